"""
metapull - Extract structured metadata from HTML.

Usage:
    from metapull import MetadataExtractor, ExtractionConfig, ProfileName

    config = ExtractionConfig(
        base_url="https://example.com/article",
        profile=ProfileName.STRUCTURED,
    )
    result = MetadataExtractor(config).extract(html)

    for item in result.microdata or []:
        print(item.types, item.first("name"))

    # Or one syntax at a time
    from metapull import extract_jsonld
    for node in extract_jsonld(html).nodes:
        print(node.types)
"""

__version__ = "1.0.0"

from .core.extractor import (
    MetadataExtractor,
    extract_all,
    extract_dublin_core,
    extract_jsonld,
    extract_manifest,
    extract_meta,
    extract_microdata,
    extract_microformats,
    extract_oembed,
    extract_opengraph,
    extract_rdfa,
    extract_rel_links,
    extract_twitter,
)
from .dom import Document
from .errors import ConfigError, InvalidUrlError, MalformedPayloadError, MetapullError, ParseError
from .extractors import normalize_jsonld, parse_manifest
from .logging_config import setup_logging
from .models import (
    Diagnostic,
    DiagnosticKind,
    ExtractionConfig,
    ExtractionResult,
    JsonLdBlock,
    JsonLdNode,
    JsonLdResult,
    LimitsConfig,
    MicrodataItem,
    Microformat,
    MicroformatsConfig,
    ProfileName,
    RdfaItem,
    SocialConfig,
    Syntax,
)

__all__ = [
    "__version__",
    # Core
    "MetadataExtractor",
    "Document",
    "extract_all",
    "extract_microdata",
    "extract_microformats",
    "extract_jsonld",
    "extract_rdfa",
    "extract_meta",
    "extract_opengraph",
    "extract_twitter",
    "extract_dublin_core",
    "extract_oembed",
    "extract_rel_links",
    "extract_manifest",
    "normalize_jsonld",
    "parse_manifest",
    # Config
    "ExtractionConfig",
    "LimitsConfig",
    "MicroformatsConfig",
    "SocialConfig",
    "ProfileName",
    "Syntax",
    # Results
    "ExtractionResult",
    "MicrodataItem",
    "Microformat",
    "RdfaItem",
    "JsonLdNode",
    "JsonLdBlock",
    "JsonLdResult",
    "Diagnostic",
    "DiagnosticKind",
    # Errors
    "MetapullError",
    "ParseError",
    "InvalidUrlError",
    "MalformedPayloadError",
    "ConfigError",
    # Logging
    "setup_logging",
]
