"""DOM query facade and URL resolution."""

from .document import SUPPORTED_PARSERS, Document, split_tokens
from .urls import UrlResolver, parse_base_url, resolve_url

__all__ = [
    "Document",
    "SUPPORTED_PARSERS",
    "split_tokens",
    "UrlResolver",
    "parse_base_url",
    "resolve_url",
]
