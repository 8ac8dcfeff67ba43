"""oEmbed endpoint discovery."""

from ..dom import Document, split_tokens
from ..models.results import OEmbedDiscovery, OEmbedEndpoint


class OEmbedExtractor:
    """
    Finds oEmbed discovery links.

    ``<link rel="alternate" type="application/json+oembed">`` and its
    ``text/xml+oembed`` counterpart. Endpoints are listed, not fetched.
    """

    def extract(self, document: Document) -> OEmbedDiscovery:
        discovery: OEmbedDiscovery = {"json_endpoints": [], "xml_endpoints": []}

        for element in document.find_all("link", href=True):
            rels = [rel.lower() for rel in split_tokens(document.attribute(element, "rel"))]
            link_type = (document.attribute(element, "type") or "").lower()
            href = (document.attribute(element, "href") or "").strip()

            if "alternate" not in rels or "oembed" not in link_type or not href:
                continue

            endpoint_format = "xml" if "xml" in link_type else "json"
            endpoint: OEmbedEndpoint = {
                "href": document.resolve(href),
                "format": endpoint_format,
                "title": document.attribute(element, "title"),
            }
            discovery[f"{endpoint_format}_endpoints"].append(endpoint)  # type: ignore[literal-required]

        return discovery
