"""Metapull configuration, item and result models."""

from .config import (
    ALL_SYNTAXES,
    ByteSize,
    ExtractionConfig,
    LimitsConfig,
    MicroformatsConfig,
    ProfileName,
    SocialConfig,
    Syntax,
)
from .diagnostics import Diagnostic, DiagnosticKind
from .items import (
    Item,
    JsonLdBlock,
    JsonLdNode,
    JsonLdValue,
    MicrodataItem,
    Microformat,
    PropertyValue,
    RdfaItem,
)
from .profiles import PROFILES, apply_profile
from .results import (
    DublinCore,
    ExtractionResult,
    JsonLdResult,
    ManifestDiscovery,
    MetaTags,
    OEmbedDiscovery,
    OpenGraph,
    TwitterCard,
    WebAppManifest,
)

__all__ = [
    # Config
    "ALL_SYNTAXES",
    "ByteSize",
    "ExtractionConfig",
    "LimitsConfig",
    "MicroformatsConfig",
    "ProfileName",
    "SocialConfig",
    "Syntax",
    # Profiles
    "PROFILES",
    "apply_profile",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
    # Items
    "Item",
    "JsonLdBlock",
    "JsonLdNode",
    "JsonLdValue",
    "MicrodataItem",
    "Microformat",
    "PropertyValue",
    "RdfaItem",
    # Results
    "DublinCore",
    "ExtractionResult",
    "JsonLdResult",
    "ManifestDiscovery",
    "MetaTags",
    "OEmbedDiscovery",
    "OpenGraph",
    "TwitterCard",
    "WebAppManifest",
]
