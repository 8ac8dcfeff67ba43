"""Tests for Microformats2 parsing."""

import pytest

from metapull.dom import Document
from metapull.extractors import MicroformatsParser, normalize_datetime
from metapull.models import DiagnosticKind, Microformat, Syntax

BASE = "https://example.com/"


def parse(html, **kwargs):
    return MicroformatsParser(**kwargs).extract(Document.parse(html, base_url=BASE))


class TestRoots:
    """Tests for root discovery and grouping."""

    def test_no_microformats(self):
        """Test a page without h-* classes."""
        assert parse('<div class="card"><span class="name">x</span></div>') == {}

    def test_simple_hcard(self):
        """Test explicit p- and u- properties."""
        html = '<div class="h-card"><span class="p-name">Jane</span><a class="u-url" href="/jane">site</a></div>'

        result = parse(html)

        assert list(result) == ["h-card"]
        card = result["h-card"][0]
        assert card.to_dict() == {
            "type": ["h-card"],
            "properties": {"name": ["Jane"], "url": ["https://example.com/jane"]},
        }

    def test_nested_root_without_property_is_its_own_root(self):
        """Test that an h-* child without a property class is reported separately."""
        html = '<div class="h-feed"><div class="h-entry"><span class="p-name">A</span></div></div>'

        result = parse(html)

        assert list(result) == ["h-feed", "h-entry"]
        assert result["h-feed"][0].properties == {}
        assert result["h-entry"][0].first("name") == "A"

    def test_element_with_several_kinds(self):
        """Test that an element with two h-* classes is listed under both."""
        html = '<div class="h-card h-org"><span class="p-name">Acme</span></div>'

        result = parse(html)

        card = result["h-card"][0]
        org = result["h-org"][0]
        assert card.to_dict() == org.to_dict()
        assert card.types == ["h-card", "h-org"]
        assert card is not org

    def test_unknown_class_patterns_ignored(self):
        """Test that malformed prefixed classes are not treated as properties."""
        html = '<div class="h-card"><span class="p-Name">X</span><span class="p-">Y</span><span class="p-nick">Z</span></div>'

        card = parse(html)["h-card"][0]

        assert card.get("nick") == ["Z"]
        assert "Name" not in card.properties


class TestNestedProperties:
    """Tests for microformats used as property values."""

    def test_nested_item_is_not_flattened(self):
        """Test that a nested h-card's properties stay inside it."""
        html = """
            <article class="h-entry">
                <h1 class="p-name">Post</h1>
                <div class="p-author h-card"><span class="p-name">Jane</span></div>
            </article>
        """

        result = parse(html)

        assert list(result) == ["h-entry"]
        entry = result["h-entry"][0]
        assert entry.get("name") == ["Post"]
        author = entry.first("author")
        assert isinstance(author, Microformat)
        assert author.types == ["h-card"]
        assert author.first("name") == "Jane"
        assert author.value == "Jane"

    def test_nested_url_property_value(self):
        """Test that a u-* nested microformat takes its url as value."""
        html = """
            <div class="h-entry">
                <span class="p-name">Reply</span>
                <a class="u-in-reply-to h-cite" href="/original">Original</a>
            </div>
        """

        entry = parse(html)["h-entry"][0]
        cite = entry.first("in-reply-to")

        assert cite.first("name") == "Original"
        assert cite.first("url") == "https://example.com/original"
        assert cite.value == "https://example.com/original"
        assert cite.to_dict()["value"] == "https://example.com/original"

    def test_depth_limit_drops_deep_branches(self):
        """Test that property microformats beyond max_depth are dropped."""
        html = """
            <div class="h-entry">
                <div class="p-author h-card">
                    <div class="p-org h-card"><span class="p-name">Org</span></div>
                    <span class="p-name">Jane</span>
                </div>
            </div>
        """

        result = parse(html, max_depth=1)

        assert list(result) == ["h-entry"]
        author = result["h-entry"][0].first("author")
        assert author.first("name") == "Jane"
        assert author.get("org") == []

    def test_chain_past_default_limit_stops_at_100(self):
        """Test that a 150-level chain is cut at depth 100 and leaves no extra roots."""
        html = '<div class="h-card">' + '<div class="p-x h-card">' * 150 + "</div>" * 151

        result = parse(html)

        assert len(result["h-card"]) == 1
        assert chain_depth(result["h-card"][0], "x") == 100


def chain_depth(item, name):
    depth = 0
    while item.first(name) is not None:
        item = item.first(name)
        depth += 1
    return depth


class TestItemLimit:
    """Tests for the per-call item allowance."""

    def test_multi_property_chain_is_bounded(self):
        """Test that nesting with two property classes does not double per level."""
        html = '<div class="h-card">' + '<div class="p-a p-b h-card">' * 40 + "</div>" * 41
        diagnostics = []

        result = MicroformatsParser(max_items=1000).extract(Document.parse(html), diagnostics=diagnostics)

        assert list(result) == ["h-card"]
        assert sum(item.count_items() for item in result["h-card"]) <= 1000
        assert chain_depth(result["h-card"][0], "a") == 40
        assert [d.kind for d in diagnostics] == [DiagnosticKind.ITEM_LIMIT]
        assert diagnostics[0].syntax == Syntax.MICROFORMATS

    def test_kind_copies_count_towards_limit(self):
        """Test that listing a root under a second kind uses the allowance."""
        html = '<div class="h-card h-org"><span class="p-name">Acme</span></div>'
        diagnostics = []

        result = MicroformatsParser(max_items=1).extract(Document.parse(html), diagnostics=diagnostics)

        assert list(result) == ["h-card"]
        assert [d.kind for d in diagnostics] == [DiagnosticKind.ITEM_LIMIT]

    def test_exhausted_limit_drops_later_roots(self):
        """Test that roots after the allowance runs out are not reported."""
        html = '<div class="h-card">A</div><div class="h-card">B</div><div class="h-card">C</div>'

        result = parse(html, max_items=2)

        assert [card.first("name") for card in result["h-card"]] == ["A", "B"]


class TestPropertyParsing:
    """Tests for p-/u-/dt-/e- value rules."""

    def test_plain_value_sources(self):
        """Test abbr title, data value, img alt and text."""
        html = """
            <div class="h-card">
                <abbr class="p-nickname" title="JJ">J</abbr>
                <data class="p-uid" value="42">forty-two</data>
                <img class="p-name" alt="Jane Doe" src="/me.jpg">
                <span class="p-note">  Hello  </span>
            </div>
        """

        card = parse(html)["h-card"][0]

        assert card.first("nickname") == "JJ"
        assert card.first("uid") == "42"
        assert card.first("name") == "Jane Doe"
        assert card.first("note") == "Hello"

    def test_value_class_pattern(self):
        """Test concatenation of value-class parts."""
        html = """
            <div class="h-card">
                <span class="p-tel"><span class="value">+1</span> (call) <span class="value">555</span></span>
            </div>
        """

        assert parse(html)["h-card"][0].first("tel") == "+1555"

    def test_url_value_sources(self):
        """Test href, src and text URL values, all resolved."""
        html = """
            <div class="h-card">
                <span class="p-name">Jane</span>
                <img class="u-photo" src="photo.jpg">
                <span class="u-uid">/people/jane</span>
            </div>
        """

        card = parse(html)["h-card"][0]

        assert card.first("photo") == "https://example.com/photo.jpg"
        assert card.first("uid") == "https://example.com/people/jane"

    def test_datetime_attribute(self):
        """Test dt-* from a time element's datetime."""
        html = """
            <div class="h-entry">
                <span class="p-name">Post</span>
                <time class="dt-published" datetime="2024-01-15 10:30">Jan 15</time>
            </div>
        """

        assert parse(html)["h-entry"][0].first("published") == "2024-01-15T10:30"

    def test_datetime_value_class(self):
        """Test dt-* assembled from separate date and time parts."""
        html = """
            <div class="h-event">
                <span class="p-name">Launch</span>
                <span class="dt-start"><span class="value">2024-01-15</span> at <span class="value">8:30pm</span></span>
            </div>
        """

        assert parse(html)["h-event"][0].first("start") == "2024-01-15T20:30"

    def test_embedded_value_is_text(self):
        """Test that e-* yields text content."""
        html = '<div class="h-entry"><span class="p-name">P</span><div class="e-content"><p>Hello <b>world</b></p></div></div>'

        assert parse(html)["h-entry"][0].first("content") == "Hello world"

    def test_repeated_properties_keep_order(self):
        """Test that values accumulate in document order."""
        html = """
            <div class="h-entry">
                <span class="p-name">P</span>
                <a class="p-category" href="/a">alpha</a>
                <a class="p-category" href="/b">beta</a>
            </div>
        """

        assert parse(html)["h-entry"][0].get("category") == ["alpha", "beta"]


class TestImpliedProperties:
    """Tests for implied name, photo and url."""

    def test_implied_name_from_text(self):
        """Test a root with no properties."""
        card = parse('<span class="h-card">Jane Doe</span>')["h-card"][0]

        assert card.properties == {"name": ["Jane Doe"]}

    def test_implied_name_and_photo_from_img(self):
        """Test an img root."""
        card = parse('<img class="h-card" src="/me.jpg" alt="Jane">')["h-card"][0]

        assert card.first("name") == "Jane"
        assert card.first("photo") == "https://example.com/me.jpg"

    def test_implied_url_from_link(self):
        """Test an a root."""
        card = parse('<a class="h-card" href="/jane">Jane</a>')["h-card"][0]

        assert card.first("name") == "Jane"
        assert card.first("url") == "https://example.com/jane"

    def test_implied_photo_from_only_child(self):
        """Test that an only child img supplies the photo."""
        card = parse('<div class="h-card"><img src="/me.jpg" alt="Jane"></div>')["h-card"][0]

        assert card.first("name") == "Jane"
        assert card.first("photo") == "https://example.com/me.jpg"

    def test_explicit_properties_suppress_implied(self):
        """Test that an explicit p-* disables the implied name."""
        card = parse('<div class="h-card"><span class="p-nickname">JJ</span> Jane</div>')["h-card"][0]

        assert "name" not in card.properties

    def test_implied_properties_can_be_disabled(self):
        """Test implied_properties=False."""
        result = parse('<a class="h-card" href="/jane">Jane</a>', implied_properties=False)

        assert result["h-card"][0].properties == {}


class TestNormalizeDatetime:
    """Tests for normalize_datetime."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2024-01-15", "2024-01-15"),
            ("2024-01-15T10:30:00Z", "2024-01-15T10:30:00Z"),
            ("2024-01-15 10:30 +0100", "2024-01-15T10:30+01:00"),
            ("2024-01-15 8:30pm", "2024-01-15T20:30"),
            ("12am", "00:00"),
            ("  2024-01-15  ", "2024-01-15"),
            ("January 5th", "January 5th"),
        ],
    )
    def test_normalize(self, raw, expected):
        """Test recognised and unrecognised inputs."""
        assert normalize_datetime(raw) == expected
