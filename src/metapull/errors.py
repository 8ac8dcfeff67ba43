"""Exception hierarchy for metapull.

Only conditions that prevent producing any result propagate out of an
extraction call. Everything else degrades to omitted data or a diagnostic
on the result envelope.
"""

from typing import Optional


class MetapullError(Exception):
    """Base class for all metapull errors."""


class ParseError(MetapullError):
    """The HTML tree parser could not process the input. Aborts the call."""


class InvalidUrlError(MetapullError):
    """A base URL could not be parsed.

    Extraction continues with pass-through URL resolution.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL '{url}': {reason}")


class MalformedPayloadError(MetapullError):
    """An embedded payload (JSON-LD block, manifest) failed to parse."""

    def __init__(self, message: str, block_index: Optional[int] = None):
        self.block_index = block_index
        super().__init__(message)


class ConfigError(MetapullError):
    """Configuration could not be loaded or validated."""
