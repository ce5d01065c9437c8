"""Protocols and data structures shared by resolvers and the orchestrator."""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, Self

from anchoring.models import Selector


@dataclass(frozen=True)
class AnchorOptions:
    """Options passed through to resolvers."""

    hint: int | None = None
    """Expected start offset of the target text; biases quote search."""

    ignore_selector: str | None = None
    """XPath expression for elements excluded from structural paths."""


class Range(Protocol):
    """A contiguous span of document content."""

    @property
    def start(self) -> int: ...

    @property
    def end(self) -> int: ...

    @property
    def text(self) -> str: ...


class SelectorResolver(Protocol):
    """Capability contract of one selector strategy.

    An instance is bound to one document and one selector (or range), used
    once and discarded.
    """

    selector_type: ClassVar[str]
    """Wire ``type`` of the selectors this resolver handles."""

    @classmethod
    def from_selector(cls, document: Any, selector: Selector) -> Self:
        """Bind a stored selector to a document.

        Raises:
            SelectorInvalid: If the selector cannot be interpreted against
                the document
        """
        ...

    @classmethod
    def from_range(cls, document: Any, text_range: Range) -> Self:
        """Bind a live range to a document.

        Raises:
            RangeUnsupported: If this variant cannot represent the range
        """
        ...

    def to_range(self, options: AnchorOptions) -> Range | Awaitable[Range]:
        """Locate the selected content.

        Raises:
            RangeNotFound: If no matching location exists
        """
        ...

    def to_selector(self, options: AnchorOptions) -> Selector:
        """Serialize the bound location as a selector."""
        ...
