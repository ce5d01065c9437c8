"""Selector resolvers for lxml documents.

One resolver per selector variant. Each converts a stored selector into a
TextRange of an HtmlDocument and a TextRange back into a selector.
"""

from __future__ import annotations

from lxml import etree

from anchoring.config import QUOTE_CONTEXT_LENGTH, validate_ignore_selector
from anchoring.document import HtmlDocument, TextRange
from anchoring.exceptions import RangeNotFound, RangeUnsupported, SelectorInvalid
from anchoring.matcher import match_quote
from anchoring.models import RangeSelector, TextPositionSelector, TextQuoteSelector
from anchoring.paths import element_from_xpath, xpath_from_element
from anchoring.protocols import AnchorOptions

__all__ = ["RangeResolver", "TextPositionResolver", "TextQuoteResolver"]


def _bind_range(document: HtmlDocument, text_range: TextRange) -> TextRange:
    """Check that a range belongs to the document."""
    if text_range.document is not document:
        raise RangeUnsupported("range belongs to a different document")
    return text_range


class RangeResolver:
    """Structural resolver: container element paths plus container offsets."""

    selector_type = "RangeSelector"

    def __init__(self, document: HtmlDocument, start: int, end: int) -> None:
        self.document = document
        self.start = start
        self.end = end

    @classmethod
    def from_selector(
        cls, document: HtmlDocument, selector: RangeSelector
    ) -> RangeResolver:
        start = cls._resolve_point(
            document, selector.start_container, selector.start_offset
        )
        end = cls._resolve_point(document, selector.end_container, selector.end_offset)
        return cls(document, start, end)

    @staticmethod
    def _resolve_point(document: HtmlDocument, path: str, offset: int) -> int:
        try:
            element = element_from_xpath(path, document.root)
        except etree.XPathError as e:
            raise SelectorInvalid(f"invalid container path {path!r}: {e}") from e
        if element is None or not document.contains(element):
            raise SelectorInvalid(f"container {path!r} not found")

        span_start, span_end = document.span_of(element)
        if offset > span_end - span_start:
            raise SelectorInvalid(
                f"offset {offset} exceeds text length {span_end - span_start} "
                f"of container {path!r}"
            )
        return span_start + offset

    @classmethod
    def from_range(cls, document: HtmlDocument, text_range: TextRange) -> RangeResolver:
        text_range = _bind_range(document, text_range)
        return cls(document, text_range.start, text_range.end)

    def to_range(self, options: AnchorOptions) -> TextRange:
        if self.start > self.end:
            raise RangeNotFound(
                f"range start {self.start} is after range end {self.end}"
            )
        return self.document.range(self.start, self.end)

    def to_selector(self, options: AnchorOptions) -> RangeSelector:
        ignored: set[etree._Element] = set()
        if options.ignore_selector:
            try:
                expression = validate_ignore_selector(options.ignore_selector)
                matched = expression(self.document.root)
            except (ValueError, etree.XPathEvalError) as e:
                raise RangeUnsupported(str(e)) from e
            if isinstance(matched, list):
                ignored = {m for m in matched if isinstance(m, etree._Element)}

        start_container, start_offset = self._describe_point(
            self.document.owner_at(self.start), self.start, ignored
        )
        end_container, end_offset = self._describe_point(
            self.document.owner_at(self.end, end=True), self.end, ignored
        )
        return RangeSelector(
            start_container=start_container,
            start_offset=start_offset,
            end_container=end_container,
            end_offset=end_offset,
        )

    def _describe_point(
        self,
        element: etree._Element,
        offset: int,
        ignored: set[etree._Element],
    ) -> tuple[str, int]:
        root = self.document.root
        # Climb out of ignored elements; the root is never skipped
        while element is not root and element in ignored:
            element = element.getparent()
        try:
            path = xpath_from_element(element, root)
        except ValueError as e:
            raise RangeUnsupported(str(e)) from e
        span_start, _ = self.document.span_of(element)
        return path, offset - span_start


class TextPositionResolver:
    """Offset resolver: character offsets into the document text."""

    selector_type = "TextPositionSelector"

    def __init__(self, document: HtmlDocument, start: int, end: int) -> None:
        self.document = document
        self.start = start
        self.end = end

    @classmethod
    def from_selector(
        cls, document: HtmlDocument, selector: TextPositionSelector
    ) -> TextPositionResolver:
        if selector.start > selector.end:
            raise SelectorInvalid(
                f"start {selector.start} is after end {selector.end}"
            )
        if selector.end > len(document):
            raise SelectorInvalid(
                f"offsets {selector.start}-{selector.end} exceed document "
                f"text length {len(document)}"
            )
        return cls(document, selector.start, selector.end)

    @classmethod
    def from_range(
        cls, document: HtmlDocument, text_range: TextRange
    ) -> TextPositionResolver:
        text_range = _bind_range(document, text_range)
        return cls(document, text_range.start, text_range.end)

    def to_range(self, options: AnchorOptions) -> TextRange:
        return self.document.range(self.start, self.end)

    def to_selector(self, options: AnchorOptions) -> TextPositionSelector:
        return TextPositionSelector(start=self.start, end=self.end)


class TextQuoteResolver:
    """Quote resolver: exact text plus prefix/suffix context, located by search."""

    selector_type = "TextQuoteSelector"

    def __init__(
        self,
        document: HtmlDocument,
        exact: str,
        prefix: str | None = None,
        suffix: str | None = None,
    ) -> None:
        self.document = document
        self.exact = exact
        self.prefix = prefix
        self.suffix = suffix

    @classmethod
    def from_selector(
        cls, document: HtmlDocument, selector: TextQuoteSelector
    ) -> TextQuoteResolver:
        if not selector.exact:
            raise SelectorInvalid("quote selector has no exact text")
        return cls(document, selector.exact, selector.prefix, selector.suffix)

    @classmethod
    def from_range(
        cls, document: HtmlDocument, text_range: TextRange
    ) -> TextQuoteResolver:
        text_range = _bind_range(document, text_range)
        if text_range.is_collapsed:
            raise RangeUnsupported("cannot quote an empty range")

        text = document.text
        prefix_start = max(0, text_range.start - QUOTE_CONTEXT_LENGTH)
        return cls(
            document,
            exact=text_range.text,
            prefix=text[prefix_start : text_range.start],
            suffix=text[text_range.end : text_range.end + QUOTE_CONTEXT_LENGTH],
        )

    def to_range(self, options: AnchorOptions) -> TextRange:
        match = match_quote(
            self.document.text,
            self.exact,
            prefix=self.prefix,
            suffix=self.suffix,
            hint=options.hint,
        )
        if match is None:
            raise RangeNotFound(f"quote {self.exact!r} not found")
        return self.document.range(match.start, match.end)

    def to_selector(self, options: AnchorOptions) -> TextQuoteSelector:
        return TextQuoteSelector(exact=self.exact, prefix=self.prefix, suffix=self.suffix)
