"""Result types for the simple extractors and the aggregate result envelope."""

import json
from dataclasses import dataclass, field
from typing import Any, Optional, TypedDict

from .diagnostics import Diagnostic
from .items import JsonLdBlock, JsonLdNode, MicrodataItem, Microformat, RdfaItem


class AlternateLink(TypedDict, total=False):
    """A <link rel="alternate"> that is not a feed (translations, mobile pages)."""

    href: str
    hreflang: Optional[str]
    media: Optional[str]
    type: Optional[str]


class FeedLink(TypedDict, total=False):
    """An RSS or Atom feed advertised with <link rel="alternate">."""

    href: str
    title: Optional[str]
    type: str


class MetaTags(TypedDict, total=False):
    """Standard HTML meta tags and head links."""

    title: str
    charset: str
    language: str
    description: str
    keywords: list[str]
    author: str
    generator: str
    viewport: str
    theme_color: str
    application_name: str
    referrer: str
    robots: list[str]
    googlebot: list[str]

    # Head links
    canonical: str
    shortlink: str
    icon: str
    apple_touch_icon: str
    manifest: str
    prev: str
    next: str
    alternate: list[AlternateLink]
    feeds: list[FeedLink]


class OgMedia(TypedDict, total=False):
    """An og:image, og:video or og:audio entry with its structured properties."""

    url: str
    secure_url: str
    type: str
    width: int
    height: int
    alt: str


class OpenGraph(TypedDict, total=False):
    """Open Graph protocol metadata."""

    title: str
    type: str
    url: str
    description: str
    site_name: str
    determiner: str
    locale: str
    locale_alternate: list[str]

    # First og:image, plus every media entry in order
    image: str
    images: list[OgMedia]
    videos: list[OgMedia]
    audios: list[OgMedia]

    # Object type namespaces (article:*, book:*, profile:*)
    article: dict[str, Any]
    book: dict[str, Any]
    profile: dict[str, Any]


class TwitterPlayer(TypedDict, total=False):
    url: str
    width: int
    height: int
    stream: str


class TwitterCard(TypedDict, total=False):
    """Twitter/X card metadata."""

    card: str
    site: str
    site_id: str
    creator: str
    creator_id: str
    title: str
    description: str
    image: str
    image_alt: str
    player: TwitterPlayer
    app: dict[str, str]


class DublinCore(TypedDict, total=False):
    """The fifteen Dublin Core elements."""

    title: str
    creator: str
    subject: list[str]
    description: str
    publisher: str
    contributor: list[str]
    date: str
    type: str
    format: str
    identifier: str
    source: str
    language: str
    relation: str
    coverage: str
    rights: str


class OEmbedEndpoint(TypedDict, total=False):
    href: str
    format: str
    title: Optional[str]


class OEmbedDiscovery(TypedDict):
    """oEmbed endpoints advertised by the page."""

    json_endpoints: list[OEmbedEndpoint]
    xml_endpoints: list[OEmbedEndpoint]


class ManifestDiscovery(TypedDict, total=False):
    """Location of the page's Web App Manifest."""

    href: str


class ManifestImage(TypedDict, total=False):
    src: str
    sizes: str
    type: str
    purpose: str
    label: str


class ManifestShortcut(TypedDict, total=False):
    name: str
    short_name: str
    description: str
    url: str
    icons: list[ManifestImage]


class WebAppManifest(TypedDict, total=False):
    """A parsed Web App Manifest with URLs resolved."""

    id: str
    name: str
    short_name: str
    description: str
    start_url: str
    scope: str
    display: str
    orientation: str
    theme_color: str
    background_color: str
    lang: str
    dir: str
    categories: list[str]
    icons: list[ManifestImage]
    screenshots: list[ManifestImage]
    shortcuts: list[ManifestShortcut]
    related_applications: list[dict[str, Any]]
    prefer_related_applications: bool


@dataclass
class JsonLdResult:
    """
    JSON-LD blocks found in a document.

    Blocks that failed to parse are absent from ``blocks`` and reported in
    ``diagnostics`` with their block index.
    """

    blocks: list[JsonLdBlock] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def nodes(self) -> list[JsonLdNode]:
        """All nodes across blocks, in document order."""
        return [node for block in self.blocks for node in block.nodes]

    def by_type(self, type_name: str) -> list[JsonLdNode]:
        """Top-level nodes declaring the given @type."""
        return [node for node in self.nodes if node.is_a(type_name)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "blocks": [block.to_dict() for block in self.blocks],
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }


@dataclass
class ExtractionResult:
    """
    Aggregated result of one extraction call.

    Fields for syntaxes that were not requested stay None and are left out
    of ``to_dict``.

    Example:
        result = extract_all(html, base_url="https://example.com/")
        for item in result.microdata or []:
            print(item.types, item.first("name"))
        print(result.to_json())
    """

    base_url: Optional[str] = None

    meta: Optional[MetaTags] = None
    opengraph: Optional[OpenGraph] = None
    twitter: Optional[TwitterCard] = None
    dublin_core: Optional[DublinCore] = None
    jsonld: Optional[JsonLdResult] = None
    microdata: Optional[list[MicrodataItem]] = None
    microformats: Optional[dict[str, list[Microformat]]] = None
    rdfa: Optional[list[RdfaItem]] = None
    oembed: Optional[OEmbedDiscovery] = None
    rel_links: Optional[dict[str, list[str]]] = None
    manifest: Optional[ManifestDiscovery] = None

    diagnostics: list[Diagnostic] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain dicts and lists for serialization."""
        data: dict[str, Any] = {"base_url": self.base_url}

        for name in ("meta", "opengraph", "twitter", "dublin_core", "oembed", "rel_links", "manifest"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value

        if self.jsonld is not None:
            data["jsonld"] = self.jsonld.to_dict()
        if self.microdata is not None:
            data["microdata"] = [item.to_dict() for item in self.microdata]
        if self.microformats is not None:
            data["microformats"] = {
                kind: [item.to_dict() for item in items] for kind, items in self.microformats.items()
            }
        if self.rdfa is not None:
            data["rdfa"] = [item.to_dict() for item in self.rdfa]

        data["diagnostics"] = [diag.to_dict() for diag in self.diagnostics]
        return data

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
