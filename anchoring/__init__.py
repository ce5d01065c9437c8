"""
anchoring - W3C Web Annotation anchoring for HTML documents.

This library provides:
- Pydantic models for RangeSelector, TextPositionSelector and TextQuoteSelector
- Anchoring: resolving stored selectors into a range of the current document,
  falling back from structural to positional to fuzzy quote matching
- Describing: deriving the selectors for a range of a document

Import patterns:

    # Primary API (recommended)
    from anchoring import HtmlDocument, anchor, describe

    # Full submodule imports (for internal types)
    from anchoring.resolvers import RangeResolver, TextQuoteResolver
    from anchoring.descriptor import Derivation, derive_all

Example usage:

    import asyncio
    from anchoring import HtmlDocument, anchor, describe

    document = HtmlDocument.from_html("<p>Say hello world to everyone</p>")

    selectors = describe(document, document.range(4, 15))
    found = asyncio.run(anchor(document, selectors))
    print(found.text)  # "hello world"
"""

from anchoring.batch import AnchorResult, AnchorStatus, anchor_annotations
from anchoring.descriptor import describe
from anchoring.document import HtmlDocument, TextRange
from anchoring.exceptions import (
    AnchorExhausted,
    AnchoringError,
    QuoteMismatch,
    RangeNotFound,
    RangeUnsupported,
    SelectorInvalid,
)
from anchoring.models import (
    Annotation,
    RangeSelector,
    Selector,
    TextPositionSelector,
    TextQuoteSelector,
    load_annotations,
    parse_selector,
)
from anchoring.orchestrator import Anchorer, anchor
from anchoring.protocols import AnchorOptions

__version__ = "0.1.0"

# Primary public API
__all__ = [
    "AnchorExhausted",
    "AnchorOptions",
    "AnchorResult",
    "AnchorStatus",
    "Anchorer",
    "AnchoringError",
    "Annotation",
    "HtmlDocument",
    "QuoteMismatch",
    "RangeNotFound",
    "RangeSelector",
    "RangeUnsupported",
    "Selector",
    "SelectorInvalid",
    "TextPositionSelector",
    "TextQuoteSelector",
    "TextRange",
    "anchor",
    "anchor_annotations",
    "describe",
    "load_annotations",
    "parse_selector",
]
