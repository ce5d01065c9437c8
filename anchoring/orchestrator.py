"""Anchor orchestrator: resolve a selector set into a single range.

Strategies are tried one at a time, from the cheapest and most precise to
the most resilient:

    RangeSelector -> TextPositionSelector -> TextQuoteSelector

Range and position results must reproduce the stored quote exactly when a
TextQuoteSelector is present; otherwise the next strategy is tried.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from anchoring.descriptor import Derivation, derive_all, describe as _describe
from anchoring.exceptions import AnchorExhausted, AnchoringError, QuoteMismatch
from anchoring.logging_config import logger
from anchoring.models import (
    SELECTOR_TYPES,
    RangeSelector,
    Selector,
    TextPositionSelector,
    TextQuoteSelector,
    parse_selector,
)
from anchoring.protocols import AnchorOptions, Range, SelectorResolver
from anchoring.resolvers import RangeResolver, TextPositionResolver, TextQuoteResolver

__all__ = ["Anchorer", "SelectorSet", "Strategy", "anchor", "classify_selectors"]


@dataclass(frozen=True)
class SelectorSet:
    """The effective selector of each anchoring variant."""

    range: RangeSelector | None = None
    position: TextPositionSelector | None = None
    quote: TextQuoteSelector | None = None

    @property
    def is_empty(self) -> bool:
        return self.range is None and self.position is None and self.quote is None


def classify_selectors(selectors: Iterable[Selector | dict[str, Any]]) -> SelectorSet:
    """
    Pick one effective selector per variant.

    When a variant occurs more than once, the last occurrence wins, and only
    that occurrence is validated: if it is malformed the variant is absent,
    earlier duplicates never take its place. Selector types without a
    resolver are ignored.
    """
    latest: dict[str, Any] = {}
    for item in selectors:
        if isinstance(item, dict):
            selector_type = item.get("type")
        else:
            selector_type = getattr(item, "type", None)
        if not isinstance(selector_type, str) or selector_type not in SELECTOR_TYPES:
            if not isinstance(item, dict):
                logger.warning(
                    f"Skipping selector: expected a mapping, got {type(item).__name__}"
                )
            continue
        if selector_type in latest:
            logger.debug(f"Duplicate {selector_type}, using the last one")
        latest[selector_type] = item

    found: dict[str, Selector] = {}
    for selector_type, item in latest.items():
        try:
            found[selector_type] = parse_selector(item)
        except AnchoringError as e:
            logger.warning(f"Skipping selector: {e}")

    return SelectorSet(
        range=found.get("RangeSelector"),
        position=found.get("TextPositionSelector"),
        quote=found.get("TextQuoteSelector"),
    )


@dataclass(frozen=True)
class Strategy:
    """One anchoring attempt: a resolver applied to its selector."""

    resolver: type[SelectorResolver]
    selector: Selector
    verify_quote: bool

    @property
    def name(self) -> str:
        return self.resolver.selector_type


async def _query_selector(resolver: SelectorResolver, options: AnchorOptions) -> Range:
    """Run a resolver's search, awaiting it if the resolver is asynchronous."""
    result = resolver.to_range(options)
    if inspect.isawaitable(result):
        result = await result
    return result


class Anchorer:
    """Anchors selector sets and describes ranges with a fixed set of resolvers.

    The three resolvers default to the lxml document strategies; any objects
    implementing SelectorResolver for the same document type can be used.
    """

    def __init__(
        self,
        range_resolver: type[SelectorResolver] = RangeResolver,
        position_resolver: type[SelectorResolver] = TextPositionResolver,
        quote_resolver: type[SelectorResolver] = TextQuoteResolver,
    ) -> None:
        self.range_resolver = range_resolver
        self.position_resolver = position_resolver
        self.quote_resolver = quote_resolver

    @property
    def resolvers(self) -> tuple[type[SelectorResolver], ...]:
        """Resolvers in priority order."""
        return (self.range_resolver, self.position_resolver, self.quote_resolver)

    def strategies(self, selector_set: SelectorSet) -> list[Strategy]:
        """Build the ordered strategy list, omitting absent selectors."""
        strategies: list[Strategy] = []
        if selector_set.range is not None:
            strategies.append(Strategy(self.range_resolver, selector_set.range, True))
        if selector_set.position is not None:
            strategies.append(
                Strategy(self.position_resolver, selector_set.position, True)
            )
        if selector_set.quote is not None:
            strategies.append(Strategy(self.quote_resolver, selector_set.quote, False))
        return strategies

    async def anchor(
        self,
        document: Any,
        selectors: Iterable[Selector | dict[str, Any]],
        options: AnchorOptions | None = None,
    ) -> Range:
        """
        Convert a set of selectors into a range of the document.

        Args:
            document: The document to anchor in
            selectors: Stored selectors (models or wire dicts)
            options: Resolver options; ``hint`` is overridden by the start of
                a TextPositionSelector when one is present

        Returns:
            The range found by the first strategy that succeeds

        Raises:
            AnchorExhausted: If no strategy produces a (quote-verified) range
        """
        selector_set = classify_selectors(selectors)
        if selector_set.is_empty:
            raise AnchorExhausted()

        options = options or AnchorOptions()
        if selector_set.position is not None:
            options = replace(options, hint=selector_set.position.start)

        strategies = self.strategies(selector_set)
        with logger.indent_block(f"Anchoring with {len(strategies)} strategies"):
            for strategy in strategies:
                try:
                    result = await self._attempt(
                        strategy, document, selector_set.quote, options
                    )
                except AnchoringError as e:
                    logger.debug(f"{strategy.name} failed: {e}")
                    continue
                logger.last(f"Anchored by {strategy.name} at {result.start}-{result.end}")
                return result

            logger.last("Unable to anchor")
        raise AnchorExhausted()

    async def _attempt(
        self,
        strategy: Strategy,
        document: Any,
        quote: TextQuoteSelector | None,
        options: AnchorOptions,
    ) -> Range:
        resolver = strategy.resolver.from_selector(document, strategy.selector)
        result = await _query_selector(resolver, options)
        if strategy.verify_quote and quote is not None and quote.exact:
            if result.text != quote.exact:
                raise QuoteMismatch(quote.exact, result.text)
        return result

    def describe(
        self, document: Any, text_range: Range, options: AnchorOptions | None = None
    ) -> list[Selector]:
        """Derive every selector these resolvers can produce for a range."""
        return _describe(document, text_range, options, resolvers=self.resolvers)

    def derive_all(
        self, document: Any, text_range: Range, options: AnchorOptions | None = None
    ) -> list[Derivation]:
        """Derivation results for every resolver, successful or not."""
        return derive_all(document, text_range, options, resolvers=self.resolvers)


_default_anchorer = Anchorer()


async def anchor(
    document: Any,
    selectors: Iterable[Selector | dict[str, Any]],
    options: AnchorOptions | None = None,
) -> Range:
    """Anchor selectors in a document with the default resolvers."""
    return await _default_anchorer.anchor(document, selectors, options)
