"""Per-syntax extractors operating on a parsed Document."""

from .dublin_core import DublinCoreExtractor
from .jsonld import JsonLdExtractor, JsonLdNormalizer, normalize_jsonld, parse_json_payload
from .limits import DEFAULT_MAX_ITEMS, ItemBudget
from .manifest import ManifestExtractor, parse_manifest
from .meta import MetaTagExtractor
from .microdata import MicrodataExtractor
from .microformats import MicroformatsParser, normalize_datetime
from .oembed import OEmbedExtractor
from .protocols import DocumentExtractor, ItemGraphExtractor
from .rdfa import PrefixMap, RdfaExtractor
from .rel_links import RelLinksExtractor
from .social import OpenGraphExtractor, TwitterExtractor

__all__ = [
    "DEFAULT_MAX_ITEMS",
    "DocumentExtractor",
    "DublinCoreExtractor",
    "ItemBudget",
    "ItemGraphExtractor",
    "JsonLdExtractor",
    "JsonLdNormalizer",
    "ManifestExtractor",
    "MetaTagExtractor",
    "MicrodataExtractor",
    "MicroformatsParser",
    "OEmbedExtractor",
    "OpenGraphExtractor",
    "PrefixMap",
    "RdfaExtractor",
    "RelLinksExtractor",
    "TwitterExtractor",
    "normalize_datetime",
    "normalize_jsonld",
    "parse_json_payload",
    "parse_manifest",
]
