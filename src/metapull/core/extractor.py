"""Main MetadataExtractor class and module-level convenience functions."""

from __future__ import annotations

import logging
from typing import Any, Union

from ..dom import Document, parse_base_url
from ..errors import InvalidUrlError
from ..extractors import (
    DocumentExtractor,
    DublinCoreExtractor,
    ItemGraphExtractor,
    JsonLdExtractor,
    ManifestExtractor,
    MetaTagExtractor,
    MicrodataExtractor,
    MicroformatsParser,
    OEmbedExtractor,
    OpenGraphExtractor,
    RdfaExtractor,
    RelLinksExtractor,
    TwitterExtractor,
)
from ..models.config import ALL_SYNTAXES, ExtractionConfig, Syntax
from ..models.diagnostics import Diagnostic, DiagnosticKind
from ..models.items import MicrodataItem, Microformat, RdfaItem
from ..models.profiles import apply_profile
from ..models.results import (
    DublinCore,
    ExtractionResult,
    JsonLdResult,
    ManifestDiscovery,
    MetaTags,
    OEmbedDiscovery,
    OpenGraph,
    TwitterCard,
)

logger = logging.getLogger(__name__)

HtmlInput = Union[str, bytes]


class MetadataExtractor:
    """
    Primary API for metapull: parse once, run every enabled extractor.

    The document is parsed a single time and each requested syntax reads
    the same tree. Only unparseable input raises; an invalid base URL, a
    malformed JSON-LD block or a spent item allowance is reported in
    ``result.diagnostics`` and the rest of the result is still produced.

    Example:
        config = ExtractionConfig(
            base_url="https://example.com/article",
            profile=ProfileName.STRUCTURED,
        )
        result = MetadataExtractor(config).extract(html)

        for item in result.microdata or []:
            print(item.types, item.first("name"))
        for diag in result.diagnostics:
            print(f"{diag.kind.value}: {diag.message}")
    """

    def __init__(self, config: ExtractionConfig | None = None):
        """
        Initialize the extractor.

        Args:
            config: Configuration for extraction.
                    Profile defaults will be applied automatically.
        """
        self.config = apply_profile(config or ExtractionConfig())

        max_depth = self.config.limits.max_depth
        max_items = self.config.limits.max_items
        self._twitter = TwitterExtractor(fallback=self.config.social.twitter_fallback)
        self._extractors: dict[Syntax, DocumentExtractor[Any]] = {
            Syntax.META: MetaTagExtractor(),
            Syntax.OPENGRAPH: OpenGraphExtractor(),
            Syntax.DUBLIN_CORE: DublinCoreExtractor(),
            Syntax.JSONLD: JsonLdExtractor(max_depth=max_depth),
            Syntax.OEMBED: OEmbedExtractor(),
            Syntax.REL_LINKS: RelLinksExtractor(),
            Syntax.MANIFEST: ManifestExtractor(),
        }
        self._item_extractors: dict[Syntax, ItemGraphExtractor[Any]] = {
            Syntax.MICRODATA: MicrodataExtractor(max_depth=max_depth, max_items=max_items),
            Syntax.MICROFORMATS: MicroformatsParser(
                max_depth=max_depth,
                implied_properties=self.config.microformats.implied_properties,
                max_items=max_items,
            ),
            Syntax.RDFA: RdfaExtractor(max_depth=max_depth, max_items=max_items),
        }

    def parse(self, html: HtmlInput, diagnostics: list[Diagnostic] | None = None) -> Document:
        """
        Parse HTML with the configured parser and base URL.

        Args:
            html: HTML text or raw bytes
            diagnostics: List that receives an invalid_url diagnostic if the
                configured base URL is unusable

        Returns:
            Parsed document

        Raises:
            ParseError: If the input cannot be parsed
        """
        base_url = self._validated_base_url(diagnostics if diagnostics is not None else [])
        return Document.parse(
            html,
            base_url=base_url,
            parser=self.config.parser,
            honor_base_element=self.config.honor_base_element,
            max_input_size=self.config.limits.max_input_size,
        )

    def extract(self, html: HtmlInput) -> ExtractionResult:
        """
        Extract all enabled syntaxes from HTML.

        Args:
            html: HTML text or raw bytes

        Returns:
            ExtractionResult with one field per enabled syntax

        Raises:
            ParseError: If the input cannot be parsed
        """
        diagnostics: list[Diagnostic] = []
        document = self.parse(html, diagnostics)
        return self.extract_document(document, diagnostics)

    def extract_document(self, document: Document, diagnostics: list[Diagnostic] | None = None) -> ExtractionResult:
        """
        Run the enabled extractors over an already parsed document.

        Args:
            document: Parsed document
            diagnostics: Diagnostics collected before extraction

        Returns:
            ExtractionResult with one field per enabled syntax
        """
        result = ExtractionResult(base_url=document.base_url, diagnostics=list(diagnostics or []))
        enabled = [syntax for syntax in ALL_SYNTAXES if self.config.wants(syntax)]
        logger.debug(f"Extracting {', '.join(s.value for s in enabled)}")

        for syntax in enabled:
            if syntax == Syntax.TWITTER:
                # Open Graph comes first in ALL_SYNTAXES, so its result is reused when enabled
                value: Any = self._twitter.extract(document, opengraph=result.opengraph)
            elif syntax in self._item_extractors:
                value = self._item_extractors[syntax].extract(document, diagnostics=result.diagnostics)
            else:
                value = self._extractors[syntax].extract(document)
            setattr(result, syntax.value, value)

        if result.jsonld is not None:
            result.diagnostics.extend(result.jsonld.diagnostics)

        logger.info(f"Extraction finished with {len(result.diagnostics)} diagnostics")
        return result

    def _validated_base_url(self, diagnostics: list[Diagnostic]) -> str | None:
        """Validate the configured base URL, recording a diagnostic if unusable."""
        base_url = self.config.base_url
        if base_url is None:
            return None

        try:
            return parse_base_url(base_url)
        except InvalidUrlError as e:
            logger.warning(f"{e}; relative URLs will be left unresolved")
            diagnostics.append(Diagnostic(kind=DiagnosticKind.INVALID_URL, message=str(e)))
            return None


def _extract(html: HtmlInput, syntaxes: list[Syntax], base_url: str | None, **kwargs: Any) -> ExtractionResult:
    config = ExtractionConfig(base_url=base_url, syntaxes=syntaxes, **kwargs)
    return MetadataExtractor(config).extract(html)


def extract_all(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> ExtractionResult:
    """
    Extract every supported syntax.

    Args:
        html: HTML text or raw bytes
        base_url: Document URL used to resolve relative URLs
        **kwargs: Additional config options passed to ExtractionConfig

    Returns:
        ExtractionResult with all syntaxes

    Example:
        result = extract_all(html, base_url="https://example.com/", parser="lxml")
        print(result.to_json())
    """
    config = ExtractionConfig(base_url=base_url, **kwargs)
    return MetadataExtractor(config).extract(html)


def extract_microdata(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> list[MicrodataItem]:
    """Extract top-level Microdata items in document order."""
    return _extract(html, [Syntax.MICRODATA], base_url, **kwargs).microdata or []


def extract_microformats(
    html: HtmlInput, base_url: str | None = None, **kwargs: Any
) -> dict[str, list[Microformat]]:
    """Extract Microformats2 roots grouped by h-* kind."""
    return _extract(html, [Syntax.MICROFORMATS], base_url, **kwargs).microformats or {}


def extract_jsonld(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> JsonLdResult:
    """Extract JSON-LD blocks; malformed blocks appear in the result's diagnostics."""
    return _extract(html, [Syntax.JSONLD], base_url, **kwargs).jsonld or JsonLdResult()


def extract_rdfa(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> list[RdfaItem]:
    """Extract root RDFa items in document order."""
    return _extract(html, [Syntax.RDFA], base_url, **kwargs).rdfa or []


def extract_meta(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> MetaTags:
    """Extract standard meta tags and head links."""
    return _extract(html, [Syntax.META], base_url, **kwargs).meta or {}


def extract_opengraph(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> OpenGraph:
    """Extract Open Graph metadata."""
    return _extract(html, [Syntax.OPENGRAPH], base_url, **kwargs).opengraph or {}


def extract_twitter(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> TwitterCard:
    """Extract Twitter card metadata (with Open Graph fallback unless disabled)."""
    return _extract(html, [Syntax.TWITTER], base_url, **kwargs).twitter or {}


def extract_dublin_core(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> DublinCore:
    """Extract Dublin Core elements."""
    return _extract(html, [Syntax.DUBLIN_CORE], base_url, **kwargs).dublin_core or {}


def extract_oembed(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> OEmbedDiscovery:
    """Extract oEmbed discovery endpoints."""
    result = _extract(html, [Syntax.OEMBED], base_url, **kwargs).oembed
    return result if result is not None else {"json_endpoints": [], "xml_endpoints": []}


def extract_rel_links(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> dict[str, list[str]]:
    """Extract rel-* link relations."""
    return _extract(html, [Syntax.REL_LINKS], base_url, **kwargs).rel_links or {}


def extract_manifest(html: HtmlInput, base_url: str | None = None, **kwargs: Any) -> ManifestDiscovery:
    """Find the Web App Manifest link."""
    return _extract(html, [Syntax.MANIFEST], base_url, **kwargs).manifest or {}
