"""Protocol definitions for document extractors."""

from typing import Optional, Protocol, TypeVar

from ..dom import Document
from ..models.diagnostics import Diagnostic

T_co = TypeVar("T_co", covariant=True)


class DocumentExtractor(Protocol[T_co]):
    """
    Protocol for extractors that read one syntax from a parsed document.

    Implementations never mutate the document and keep no state between
    calls, so one instance can serve many documents:
    - Recursive item builders (Microdata, Microformats2, RDFa)
    - The JSON-LD normalizer
    - Single-pass tag readers (meta, Open Graph, Dublin Core, ...)
    """

    def extract(self, document: Document) -> T_co:
        """
        Extract this syntax from a document.

        Args:
            document: Parsed document

        Returns:
            The syntax-specific result
        """
        ...


class ItemGraphExtractor(Protocol[T_co]):
    """
    Protocol for the recursive item builders.

    They share a per-call item allowance and report running out of it
    through the caller's diagnostics list.
    """

    def extract(self, document: Document, diagnostics: Optional[list[Diagnostic]] = None) -> T_co:
        ...
