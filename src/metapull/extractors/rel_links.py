"""rel-* link relation extraction."""

from ..dom import Document, split_tokens

REL_ELEMENTS = ["a", "area", "link"]


class RelLinksExtractor:
    """
    Collects every ``rel`` relation in the document.

    Returns an ordered mapping of lower-cased rel token to the resolved URLs
    carrying it, in document order and without duplicates.

    Example:
        <a rel="me author" href="/about">  ->  {"me": [...], "author": [...]}
    """

    def extract(self, document: Document) -> dict[str, list[str]]:
        links: dict[str, list[str]] = {}

        for element in document.find_all(REL_ELEMENTS, rel=True, href=True):
            href = (document.attribute(element, "href") or "").strip()
            if not href:
                continue

            url = document.resolve(href)
            for rel in split_tokens(document.attribute(element, "rel")):
                urls = links.setdefault(rel.lower(), [])
                if url not in urls:
                    urls.append(url)

        return links
