"""Tests for the document text index and element paths."""

import pytest
from lxml import etree

from anchoring.document import HtmlDocument, TextRange
from anchoring.paths import element_from_xpath, xpath_from_element


class TestHtmlDocument:
    """Tests for text extraction and offsets."""

    def test_text_concatenates_text_and_tails(self, document) -> None:
        assert document.text == (
            "Title"
            "Say hello world to everyone."
            "Another bold paragraph here."
        )
        assert len(document) == 61

    def test_comments_contribute_no_text(self) -> None:
        doc = HtmlDocument(etree.fromstring("<div>a<!-- note -->b<?pi x?>c</div>"))
        assert doc.text == "abc"

    def test_span_of_elements(self, document) -> None:
        p1, p2 = document.root.findall("p")
        assert document.span_of(document.root) == (0, 61)
        assert document.span_of(p1) == (5, 33)
        assert document.span_of(p2) == (33, 61)
        assert document.span_of(p2.find("b")) == (41, 45)

    def test_span_of_foreign_element(self, document) -> None:
        with pytest.raises(KeyError):
            document.span_of(etree.Element("p"))

    def test_owner_at_start_boundary(self, document) -> None:
        bold = document.root.find("p/b")
        assert document.owner_at(41) is bold
        # The tail after </b> belongs to the paragraph
        assert document.owner_at(45) is document.root.findall("p")[1]

    def test_owner_at_end_boundary(self, document) -> None:
        bold = document.root.find("p/b")
        assert document.owner_at(45, end=True) is bold
        assert document.owner_at(41, end=True) is document.root.findall("p")[1]

    def test_owner_at_document_edges(self, document) -> None:
        h1 = document.root.find("h1")
        assert document.owner_at(0, end=True) is h1
        assert document.owner_at(61) is document.root.findall("p")[1]

    def test_owner_at_without_text(self) -> None:
        doc = HtmlDocument.from_html("<p></p>")
        assert doc.owner_at(0) is doc.root

    def test_from_file_uses_body(self, tmp_path) -> None:
        path = tmp_path / "page.html"
        path.write_text(
            "<html><head><title>Ignored</title></head>"
            "<body><p>Body text</p></body></html>",
            encoding="utf-8",
        )
        doc = HtmlDocument.from_file(path)
        assert doc.root.tag == "body"
        assert doc.text == "Body text"


class TestTextRange:
    """Tests for TextRange."""

    def test_text(self, document) -> None:
        text_range = document.range(9, 20)
        assert text_range.text == "hello world"
        assert str(text_range) == "hello world"
        assert not text_range.is_collapsed

    def test_collapsed(self, document) -> None:
        assert document.range(9, 9).is_collapsed

    def test_out_of_bounds(self, document) -> None:
        with pytest.raises(ValueError):
            TextRange(document, 0, 100)

    def test_reversed(self, document) -> None:
        with pytest.raises(ValueError):
            document.range(20, 9)


class TestPaths:
    """Tests for element path conversion."""

    def test_root_is_empty_path(self, document) -> None:
        assert xpath_from_element(document.root, document.root) == ""
        assert element_from_xpath("", document.root) is document.root

    def test_positions_count_same_named_siblings(self, document) -> None:
        p1, p2 = document.root.findall("p")
        assert xpath_from_element(document.root.find("h1"), document.root) == "/h1[1]"
        assert xpath_from_element(p1, document.root) == "/p[1]"
        assert xpath_from_element(p2, document.root) == "/p[2]"
        assert xpath_from_element(p2.find("b"), document.root) == "/p[2]/b[1]"

    def test_simple_path_lookup(self, document) -> None:
        bold = document.root.find("p/b")
        assert element_from_xpath("/p[2]/b[1]", document.root) is bold
        assert element_from_xpath("/P[2]/B[1]", document.root) is bold

    def test_missing_path(self, document) -> None:
        assert element_from_xpath("/p[3]", document.root) is None
        assert element_from_xpath("/p[1]/b[1]", document.root) is None

    def test_general_xpath(self, document) -> None:
        bold = document.root.find("p/b")
        assert element_from_xpath("//b", document.root) is bold

    def test_invalid_xpath(self, document) -> None:
        with pytest.raises(etree.XPathError):
            element_from_xpath("/p[", document.root)

    def test_foreign_element(self, document) -> None:
        with pytest.raises(ValueError):
            xpath_from_element(etree.Element("p"), document.root)

    def test_namespaced_tags_use_local_name(self) -> None:
        root = etree.fromstring(
            '<body xmlns="http://www.w3.org/1999/xhtml"><p>a</p><p>b</p></body>'
        )
        second = root[1]
        assert xpath_from_element(second, root) == "/p[2]"
        assert element_from_xpath("/p[2]", root) is second
