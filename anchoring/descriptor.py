"""Descriptor: derive the selectors that describe a live range."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from anchoring.exceptions import AnchoringError
from anchoring.models import Selector
from anchoring.protocols import AnchorOptions, Range, SelectorResolver
from anchoring.resolvers import RangeResolver, TextPositionResolver, TextQuoteResolver

__all__ = ["DEFAULT_RESOLVERS", "Derivation", "derive", "derive_all", "describe"]

DEFAULT_RESOLVERS: tuple[type[SelectorResolver], ...] = (
    RangeResolver,
    TextPositionResolver,
    TextQuoteResolver,
)


@dataclass(frozen=True)
class Derivation:
    """Outcome of deriving one selector variant from a range."""

    selector_type: str
    selector: Selector | None = None
    error: AnchoringError | None = None

    @property
    def ok(self) -> bool:
        return self.selector is not None


def derive(
    resolver: type[SelectorResolver],
    document: Any,
    text_range: Range,
    options: AnchorOptions,
) -> Derivation:
    """Derive a selector with one resolver, capturing failure as a value."""
    try:
        selector = resolver.from_range(document, text_range).to_selector(options)
    except AnchoringError as e:
        return Derivation(resolver.selector_type, error=e)
    return Derivation(resolver.selector_type, selector=selector)


def derive_all(
    document: Any,
    text_range: Range,
    options: AnchorOptions | None = None,
    resolvers: Sequence[type[SelectorResolver]] = DEFAULT_RESOLVERS,
) -> list[Derivation]:
    """Derive with every resolver, in order."""
    options = options or AnchorOptions()
    return [derive(resolver, document, text_range, options) for resolver in resolvers]


def describe(
    document: Any,
    text_range: Range,
    options: AnchorOptions | None = None,
    resolvers: Sequence[type[SelectorResolver]] = DEFAULT_RESOLVERS,
) -> list[Selector]:
    """
    Describe a range as selectors.

    Variants that cannot describe the range are left out, so the result holds
    between zero and three selectors in the order RangeSelector,
    TextPositionSelector, TextQuoteSelector.
    """
    return [
        derivation.selector
        for derivation in derive_all(document, text_range, options, resolvers)
        if derivation.ok
    ]
