"""Tests for the lxml selector resolvers."""

import pytest

from anchoring.document import HtmlDocument
from anchoring.exceptions import RangeNotFound, RangeUnsupported, SelectorInvalid
from anchoring.models import RangeSelector, TextPositionSelector, TextQuoteSelector
from anchoring.protocols import AnchorOptions
from anchoring.resolvers import RangeResolver, TextPositionResolver, TextQuoteResolver


def make_range_selector(
    start_container: str = "/p[1]",
    start_offset: int = 4,
    end_container: str = "/p[1]",
    end_offset: int = 15,
) -> RangeSelector:
    """Create a RangeSelector, by default for "hello world"."""
    return RangeSelector(
        start_container=start_container,
        start_offset=start_offset,
        end_container=end_container,
        end_offset=end_offset,
    )


class TestRangeResolver:
    """Tests for RangeResolver."""

    def test_to_range(self, document) -> None:
        resolver = RangeResolver.from_selector(document, make_range_selector())
        result = resolver.to_range(AnchorOptions())
        assert (result.start, result.end) == (9, 20)
        assert result.text == "hello world"

    def test_range_across_elements(self, document) -> None:
        selector = make_range_selector("/p[1]", 4, "/p[2]/b[1]", 4)
        result = RangeResolver.from_selector(document, selector).to_range(
            AnchorOptions()
        )
        assert result.text == "hello world to everyone.Another bold"

    def test_root_container(self, document) -> None:
        selector = make_range_selector("", 0, "", 5)
        result = RangeResolver.from_selector(document, selector).to_range(
            AnchorOptions()
        )
        assert result.text == "Title"

    def test_missing_container(self, document) -> None:
        with pytest.raises(SelectorInvalid):
            RangeResolver.from_selector(document, make_range_selector("/p[9]"))

    def test_offset_beyond_container(self, document) -> None:
        with pytest.raises(SelectorInvalid):
            RangeResolver.from_selector(document, make_range_selector(end_offset=400))

    def test_invalid_path(self, document) -> None:
        with pytest.raises(SelectorInvalid):
            RangeResolver.from_selector(document, make_range_selector("/p["))

    def test_reversed_range(self, document) -> None:
        selector = make_range_selector("/p[2]", 0, "/p[1]", 0)
        resolver = RangeResolver.from_selector(document, selector)
        with pytest.raises(RangeNotFound):
            resolver.to_range(AnchorOptions())

    def test_to_selector(self, document) -> None:
        resolver = RangeResolver.from_range(document, document.range(9, 20))
        assert resolver.to_selector(AnchorOptions()) == make_range_selector()

    def test_to_selector_inside_nested_element(self, document) -> None:
        resolver = RangeResolver.from_range(document, document.range(41, 45))
        assert resolver.to_selector(AnchorOptions()) == make_range_selector(
            "/p[2]/b[1]", 0, "/p[2]/b[1]", 4
        )

    def test_to_selector_skips_ignored_elements(self, document) -> None:
        resolver = RangeResolver.from_range(document, document.range(41, 45))
        selector = resolver.to_selector(AnchorOptions(ignore_selector="//b"))
        assert selector == make_range_selector("/p[2]", 8, "/p[2]", 12)

    def test_ignored_highlight_wrapper(self) -> None:
        doc = HtmlDocument.from_html(
            '<p>Say <span class="annotator-hl">hello</span> world</p>'
        )
        resolver = RangeResolver.from_range(doc, doc.range(4, 9))
        selector = resolver.to_selector(
            AnchorOptions(ignore_selector="//*[starts-with(@class, 'annotator-')]")
        )
        assert selector == make_range_selector("/p[1]", 4, "/p[1]", 9)

    def test_invalid_ignore_selector(self, document) -> None:
        resolver = RangeResolver.from_range(document, document.range(9, 20))
        with pytest.raises(RangeUnsupported):
            resolver.to_selector(AnchorOptions(ignore_selector="//b["))

    def test_range_from_other_document(self, document) -> None:
        other = HtmlDocument.from_html("<p>Say hello world to everyone.</p>")
        with pytest.raises(RangeUnsupported):
            RangeResolver.from_range(document, other.range(0, 3))


class TestTextPositionResolver:
    """Tests for TextPositionResolver."""

    def test_to_range(self, document) -> None:
        selector = TextPositionSelector(start=9, end=20)
        result = TextPositionResolver.from_selector(document, selector).to_range(
            AnchorOptions()
        )
        assert result.text == "hello world"

    def test_end_beyond_document(self, document) -> None:
        with pytest.raises(SelectorInvalid):
            TextPositionResolver.from_selector(
                document, TextPositionSelector(start=50, end=62)
            )

    def test_reversed_offsets(self, document) -> None:
        with pytest.raises(SelectorInvalid):
            TextPositionResolver.from_selector(
                document, TextPositionSelector(start=20, end=9)
            )

    def test_to_selector(self, document) -> None:
        resolver = TextPositionResolver.from_range(document, document.range(9, 20))
        assert resolver.to_selector(AnchorOptions()) == TextPositionSelector(
            start=9, end=20
        )


class TestTextQuoteResolver:
    """Tests for TextQuoteResolver."""

    def test_to_range(self, document) -> None:
        selector = TextQuoteSelector(exact="hello world")
        result = TextQuoteResolver.from_selector(document, selector).to_range(
            AnchorOptions()
        )
        assert (result.start, result.end) == (9, 20)

    def test_not_found(self, document) -> None:
        selector = TextQuoteSelector(exact="goodbye moon")
        resolver = TextQuoteResolver.from_selector(document, selector)
        with pytest.raises(RangeNotFound):
            resolver.to_range(AnchorOptions())

    def test_empty_quote(self, document) -> None:
        with pytest.raises(SelectorInvalid):
            TextQuoteResolver.from_selector(document, TextQuoteSelector(exact=""))

    def test_hint_is_used(self) -> None:
        doc = HtmlDocument.from_html("<p>the cat sat. the cat ran. the cat hid.</p>")
        resolver = TextQuoteResolver.from_selector(doc, TextQuoteSelector(exact="the cat"))
        assert resolver.to_range(AnchorOptions(hint=27)).start == 26

    def test_to_selector_with_context(self, document) -> None:
        resolver = TextQuoteResolver.from_range(document, document.range(9, 20))
        assert resolver.to_selector(AnchorOptions()) == TextQuoteSelector(
            exact="hello world",
            prefix="TitleSay ",
            suffix=" to everyone.Another bold paragr",
        )

    def test_context_is_limited(self) -> None:
        doc = HtmlDocument.from_html("<p>" + "a" * 50 + "X" + "b" * 50 + "</p>")
        selector = TextQuoteResolver.from_range(doc, doc.range(50, 51)).to_selector(
            AnchorOptions()
        )
        assert selector.prefix == "a" * 32
        assert selector.suffix == "b" * 32

    def test_collapsed_range(self, document) -> None:
        with pytest.raises(RangeUnsupported):
            TextQuoteResolver.from_range(document, document.range(9, 9))
