"""Tests for the DOM query facade and URL resolution."""

import pytest

from metapull.dom import Document, UrlResolver, parse_base_url, resolve_url, split_tokens
from metapull.errors import InvalidUrlError, ParseError


class TestSplitTokens:
    """Tests for split_tokens."""

    def test_splits_on_any_whitespace(self):
        """Test splitting on spaces, tabs and newlines."""
        assert split_tokens(" a\tb\n c ") == ["a", "b", "c"]

    def test_drops_duplicates_keeping_order(self):
        """Test that repeated tokens appear once, in first-seen order."""
        assert split_tokens("b a b") == ["b", "a"]

    def test_empty_values(self):
        """Test None and blank strings."""
        assert split_tokens(None) == []
        assert split_tokens("   ") == []


class TestDocumentParse:
    """Tests for Document.parse."""

    def test_parses_string(self):
        """Test parsing a plain string."""
        doc = Document.parse("<p id='x'>Hi</p>")

        assert doc.text_content(doc.element_by_id("x")) == "Hi"

    def test_decodes_bytes_with_declared_charset(self):
        """Test that byte input is decoded with the meta charset."""
        html = b'<html><head><meta charset="iso-8859-1"></head><body><p id="p">caf\xe9</p></body></html>'

        doc = Document.parse(html)

        assert doc.text_content(doc.element_by_id("p")) == "café"

    def test_bytes_default_to_utf8(self):
        """Test decoding bytes without a charset declaration."""
        doc = Document.parse("<p id='p'>naïve</p>".encode("utf-8"))

        assert doc.text_content(doc.element_by_id("p")) == "naïve"

    def test_rejects_non_text_input(self):
        """Test that non str/bytes input raises ParseError."""
        with pytest.raises(ParseError):
            Document.parse(12345)  # type: ignore[arg-type]

    def test_rejects_unknown_parser(self):
        """Test that an unsupported parser name raises ParseError."""
        with pytest.raises(ParseError, match="Unsupported parser"):
            Document.parse("<p></p>", parser="not-a-parser")

    def test_enforces_input_size_limit(self):
        """Test max_input_size."""
        with pytest.raises(ParseError, match="limit"):
            Document.parse("<p>" + "x" * 2000 + "</p>", max_input_size=1024)

    def test_attributes_are_plain_strings(self):
        """Test that class and rel stay strings rather than lists."""
        doc = Document.parse('<a id="a" class="x y" rel="me author" href="/">a</a>')
        element = doc.element_by_id("a")

        assert doc.attribute(element, "class") == "x y"
        assert doc.attribute(element, "rel") == "me author"
        assert doc.attribute(element, "missing") is None


class TestDocumentQueries:
    """Tests for the query methods."""

    def test_element_by_id_first_wins(self):
        """Test that the first element with a duplicated id is returned."""
        doc = Document.parse('<p id="dup">first</p><p id="dup">second</p>')

        assert doc.text_content(doc.element_by_id("dup")) == "first"

    def test_element_by_id_missing(self):
        """Test lookup of an id that does not exist."""
        doc = Document.parse("<p>text</p>")

        assert doc.element_by_id("nope") is None

    def test_node_ids_follow_document_order(self):
        """Test that node ordinals increase in document order."""
        doc = Document.parse('<div id="a"><span id="b"></span></div><p id="c"></p>')

        ids = [doc.node_id(doc.element_by_id(x)) for x in ("a", "b", "c")]

        assert ids == sorted(ids)
        assert len(set(ids)) == 3

    def test_children_skip_text_nodes(self):
        """Test that children returns only elements."""
        doc = Document.parse('<div id="d">text<b>1</b> more <i>2</i></div>')

        children = doc.children(doc.element_by_id("d"))

        assert [doc.tag_name(c) for c in children] == ["b", "i"]

    def test_class_tokens(self):
        """Test class token splitting."""
        doc = Document.parse('<div id="d" class="h-card  p-author h-card"></div>')

        assert doc.class_tokens(doc.element_by_id("d")) == ["h-card", "p-author"]

    def test_find_and_select(self):
        """Test find, find_all and CSS select."""
        doc = Document.parse('<ul><li class="x">1</li><li>2</li></ul>')

        assert len(doc.find_all("li")) == 2
        assert doc.find("li") is not None
        assert doc.find("table") is None
        assert len(doc.select("li.x")) == 1


class TestBaseUrl:
    """Tests for base URL handling."""

    def test_resolves_against_caller_base(self):
        """Test that relative URLs use the caller's base URL."""
        doc = Document.parse("<p></p>", base_url="https://example.com/a/b")

        assert doc.resolve("c") == "https://example.com/a/c"

    def test_base_element_overrides(self):
        """Test that <base href> is honoured."""
        html = '<head><base href="/sub/"></head><body></body>'

        doc = Document.parse(html, base_url="https://example.com/a/b")

        assert doc.base_url == "https://example.com/sub/"
        assert doc.resolve("page") == "https://example.com/sub/page"

    def test_base_element_can_be_ignored(self):
        """Test honor_base_element=False."""
        html = '<head><base href="https://other.example/"></head>'

        doc = Document.parse(html, base_url="https://example.com/", honor_base_element=False)

        assert doc.base_url == "https://example.com/"

    def test_without_base_urls_pass_through(self):
        """Test that URLs are unchanged with no base URL."""
        doc = Document.parse("<p></p>")

        assert doc.resolve(" /relative ") == "/relative"


class TestUrls:
    """Tests for URL validation and resolution."""

    def test_parse_base_url_accepts_http(self):
        """Test a valid absolute URL."""
        assert parse_base_url(" https://example.com/page ") == "https://example.com/page"

    def test_parse_base_url_accepts_opaque_schemes(self):
        """Test schemes without a host."""
        assert parse_base_url("mailto:someone@example.com") == "mailto:someone@example.com"

    @pytest.mark.parametrize(
        "url",
        ["", "not a url", "/relative/path", "https://", "http://example.com:99999/"],
    )
    def test_parse_base_url_rejects_invalid(self, url):
        """Test that unusable base URLs raise InvalidUrlError."""
        with pytest.raises(InvalidUrlError) as exc_info:
            parse_base_url(url)

        assert exc_info.value.url == url

    def test_resolve_url(self):
        """Test resolution against a base."""
        assert resolve_url("../x", "https://example.com/a/b/") == "https://example.com/a/x"
        assert resolve_url("https://other.example/", "https://example.com/") == "https://other.example/"

    def test_resolve_url_without_base(self):
        """Test pass-through when no base is given."""
        assert resolve_url("page.html") == "page.html"

    def test_url_resolver(self):
        """Test the UrlResolver wrapper."""
        resolver = UrlResolver("https://example.com/blog/")

        assert resolver.resolve("post.html") == "https://example.com/blog/post.html"
