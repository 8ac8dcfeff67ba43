"""URL resolution against an optional base URL."""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlparse

from ..errors import InvalidUrlError

logger = logging.getLogger(__name__)

# Schemes that never need a network location
OPAQUE_SCHEMES = {"mailto", "tel", "data", "urn", "javascript", "about", "file"}


def parse_base_url(base_url: str) -> str:
    """
    Validate a base URL.

    Args:
        base_url: Candidate base URL

    Returns:
        The stripped base URL

    Raises:
        InvalidUrlError: If the URL cannot be parsed, has no scheme, or is a
            hierarchical URL without a host
    """
    candidate = base_url.strip()
    if not candidate:
        raise InvalidUrlError(base_url, "empty URL")

    try:
        parsed = urlparse(candidate)
    except ValueError as e:
        raise InvalidUrlError(base_url, str(e)) from e

    if not parsed.scheme:
        raise InvalidUrlError(base_url, "missing scheme")

    if parsed.scheme.lower() not in OPAQUE_SCHEMES and not parsed.netloc:
        raise InvalidUrlError(base_url, "missing host")

    # Port parsing is lazy in urllib; force it so bad ports surface here
    try:
        parsed.port
    except ValueError as e:
        raise InvalidUrlError(base_url, str(e)) from e

    return candidate


def resolve_url(href: str, base_url: str | None = None) -> str:
    """
    Resolve a possibly-relative href against a base URL.

    Args:
        href: The href/src value to resolve
        base_url: Optional base URL

    Returns:
        The absolute URL, or the stripped href unchanged when there is no
        base URL or resolution fails
    """
    value = href.strip()
    if not base_url:
        return value

    try:
        return urljoin(base_url, value)
    except ValueError as e:
        logger.debug(f"Could not resolve {value!r} against {base_url!r}: {e}")
        return value


class UrlResolver:
    """
    Resolves URLs against a fixed base.

    Example:
        resolver = UrlResolver("https://example.com/blog/")
        resolver.resolve("post.html")  # https://example.com/blog/post.html
    """

    def __init__(self, base_url: str | None = None):
        """
        Initialize the resolver.

        Args:
            base_url: Base URL, already validated with parse_base_url
        """
        self.base_url = base_url

    def resolve(self, href: str) -> str:
        """Resolve href against the base URL (pass-through without one)."""
        return resolve_url(href, self.base_url)
