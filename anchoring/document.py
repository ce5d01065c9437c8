"""Document model: an lxml element tree with a flat text index.

Every resolver works against the document's plain-text content, which is
the concatenation of each element's ``text`` and each child's ``tail`` in
document order. The index records where every text segment and every
element's text content starts and ends in that string, so structural
positions and character offsets convert cheaply in both directions.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from pathlib import Path

import lxml.html
from lxml import etree

__all__ = ["HtmlDocument", "TextRange", "TextSegment"]


def is_element(node: etree._Element) -> bool:
    """True for real elements (comments and processing instructions excluded)."""
    return isinstance(node.tag, str)


@dataclass(frozen=True)
class TextSegment:
    """A run of text owned by one element.

    ``owner`` is the element whose text content contains the run: the element
    itself for its ``.text``, the parent for a child's ``.tail``.
    """

    owner: etree._Element
    start: int
    text: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)


class HtmlDocument:
    """Read-only text view of an lxml element tree."""

    def __init__(self, root: etree._Element) -> None:
        self.root = root
        self._segments: list[TextSegment] = []
        self._spans: dict[etree._Element, tuple[int, int]] = {}
        parts: list[str] = []
        self._index(root, 0, parts)
        self.text = "".join(parts)
        self._starts = [segment.start for segment in self._segments]

    @classmethod
    def from_html(cls, markup: str) -> HtmlDocument:
        """Parse an HTML fragment, wrapped in a ``<div>`` root."""
        return cls(lxml.html.fragment_fromstring(markup, create_parent="div"))

    @classmethod
    def from_file(cls, path: str | Path) -> HtmlDocument:
        """Parse an HTML file, anchoring within ``<body>`` when there is one."""
        root = lxml.html.parse(str(path)).getroot()
        body = root.find("body")
        return cls(body if body is not None else root)

    def _index(self, element: etree._Element, offset: int, parts: list[str]) -> int:
        start = offset
        if element.text:
            offset = self._add_segment(element, offset, element.text, parts)
        for child in element:
            if is_element(child):
                offset = self._index(child, offset, parts)
            if child.tail:
                offset = self._add_segment(element, offset, child.tail, parts)
        self._spans[element] = (start, offset)
        return offset

    def _add_segment(
        self, owner: etree._Element, offset: int, text: str, parts: list[str]
    ) -> int:
        self._segments.append(TextSegment(owner, offset, text))
        parts.append(text)
        return offset + len(text)

    def __len__(self) -> int:
        return len(self.text)

    def contains(self, element: etree._Element) -> bool:
        """True if the element belongs to this document's tree."""
        return element in self._spans

    def span_of(self, element: etree._Element) -> tuple[int, int]:
        """Global ``(start, end)`` offsets of an element's text content.

        Raises:
            KeyError: If the element is not part of this document
        """
        return self._spans[element]

    def owner_at(self, offset: int, *, end: bool = False) -> etree._Element:
        """Element owning the text at a boundary offset.

        A start boundary belongs to the segment holding the character at
        ``offset``; an end boundary (``end=True``) to the segment holding the
        character just before it. Offsets with no adjacent text fall back to
        the nearest segment, or the root for a document without text.
        """
        if not self._segments:
            return self.root
        if end:
            index = bisect_left(self._starts, offset) - 1
        else:
            index = bisect_right(self._starts, offset) - 1
        index = min(max(index, 0), len(self._segments) - 1)
        return self._segments[index].owner

    def range(self, start: int, end: int) -> TextRange:
        """Create a range over ``[start, end)`` of this document's text."""
        return TextRange(self, start, end)


@dataclass(frozen=True)
class TextRange:
    """A contiguous span ``[start, end)`` of a document's text content."""

    document: HtmlDocument
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= len(self.document):
            raise ValueError(
                f"Range {self.start}-{self.end} outside document text "
                f"of length {len(self.document)}"
            )

    @property
    def text(self) -> str:
        return self.document.text[self.start : self.end]

    @property
    def is_collapsed(self) -> bool:
        return self.start == self.end

    def __str__(self) -> str:
        return self.text
