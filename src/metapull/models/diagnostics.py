"""Non-fatal diagnostics recorded during extraction."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .config import Syntax


class DiagnosticKind(str, Enum):
    """Kinds of recoverable problems reported on a result."""

    MALFORMED_PAYLOAD = "malformed_payload"
    INVALID_URL = "invalid_url"
    DEPTH_LIMIT = "depth_limit"
    ITEM_LIMIT = "item_limit"


@dataclass
class Diagnostic:
    """
    A recoverable problem found while extracting.

    Diagnostics never abort the call; they explain why part of the
    result is missing.

    Example:
        for diag in result.diagnostics:
            if diag.kind == DiagnosticKind.MALFORMED_PAYLOAD:
                print(f"JSON-LD block {diag.block_index}: {diag.message}")
    """

    kind: DiagnosticKind
    message: str
    syntax: Optional[Syntax] = None
    block_index: Optional[int] = None  # Position among JSON-LD script blocks

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.syntax is not None:
            data["syntax"] = self.syntax.value
        if self.block_index is not None:
            data["block_index"] = self.block_index
        return data
