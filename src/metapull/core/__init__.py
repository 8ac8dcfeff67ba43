"""Core extraction API."""

from .extractor import (
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

__all__ = [
    "MetadataExtractor",
    "extract_all",
    "extract_dublin_core",
    "extract_jsonld",
    "extract_manifest",
    "extract_meta",
    "extract_microdata",
    "extract_microformats",
    "extract_oembed",
    "extract_opengraph",
    "extract_rdfa",
    "extract_rel_links",
    "extract_twitter",
]
