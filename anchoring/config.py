"""Shared configuration for the anchoring package."""

from lxml import etree

# Characters of surrounding text stored as TextQuoteSelector prefix/suffix
QUOTE_CONTEXT_LENGTH = 32

# Minimum quote-and-context score for a fuzzy (non-exact) quote match
FUZZY_THRESHOLD = 0.7

# Fuzzy candidate windows may differ from the quote length by this fraction
FUZZY_LENGTH_TOLERANCE = 0.3

# Words must be longer than this to count as shared content between candidates
MIN_SIGNIFICANT_WORD_LENGTH = 3

# Most aligned window starts refined when searching for a fuzzy quote match
FUZZY_MAX_CANDIDATES = 50

# Relative weights of the quote match score components
QUOTE_WEIGHT = 50
PREFIX_WEIGHT = 20
SUFFIX_WEIGHT = 20
POSITION_WEIGHT = 2


def validate_offsets(start: int, end: int) -> None:
    """Validate a pair of text offsets.

    Args:
        start: Start offset (inclusive)
        end: End offset (exclusive)

    Raises:
        ValueError: If the offsets are negative or reversed
    """
    if start < 0 or end < 0:
        raise ValueError(f"Invalid offsets: {start}-{end}. Offsets must be >= 0")
    if start > end:
        raise ValueError(
            f"Invalid offsets: {start}-{end}. Start must not be after end"
        )


def validate_ignore_selector(expression: str) -> etree.XPath:
    """Compile an ignore-selector XPath expression.

    Args:
        expression: XPath expression matching elements to skip, e.g.
            "//*[starts-with(@class, 'annotator-')]"

    Returns:
        The compiled expression

    Raises:
        ValueError: If the expression is not valid XPath
    """
    try:
        return etree.XPath(expression)
    except etree.XPathSyntaxError as e:
        raise ValueError(
            f"Invalid ignore selector: '{expression}'. Expected an XPath expression"
        ) from e
