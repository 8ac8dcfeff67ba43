"""Dublin Core meta tag extraction."""

import logging

from ..dom import Document
from ..models.results import DublinCore
from .meta import split_list

logger = logging.getLogger(__name__)

DC_PREFIXES = ("dc.", "dcterms.")

DC_ELEMENTS = {
    "title",
    "creator",
    "subject",
    "description",
    "publisher",
    "contributor",
    "date",
    "type",
    "format",
    "identifier",
    "source",
    "language",
    "relation",
    "coverage",
    "rights",
}

# Elements that hold a comma/semicolon separated list
LIST_ELEMENTS = {"subject", "contributor"}


class DublinCoreExtractor:
    """
    Extracts the fifteen Dublin Core elements from ``DC.*``/``dcterms.*`` meta tags.

    Names are matched case-insensitively; the first occurrence of each
    element wins.

    Example:
        <meta name="DC.title" content="My Document Title">  ->  {"title": "My Document Title"}
    """

    def extract(self, document: Document) -> DublinCore:
        dc: DublinCore = {}

        for element in document.find_all("meta"):
            name = (document.attribute(element, "name") or "").strip().lower()
            content = (document.attribute(element, "content") or "").strip()
            if not content or not name.startswith(DC_PREFIXES):
                continue

            field = name.split(".", 1)[1]
            if field not in DC_ELEMENTS or field in dc:
                continue

            if field in LIST_ELEMENTS:
                dc[field] = split_list(content, ",;")  # type: ignore[literal-required]
            else:
                dc[field] = content  # type: ignore[literal-required]

        logger.debug(f"Extracted {len(dc)} Dublin Core elements")
        return dc
