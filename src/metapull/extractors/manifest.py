"""Web App Manifest discovery and parsing."""

import logging
from typing import Any, Optional

from ..dom import Document, resolve_url, split_tokens
from ..errors import MalformedPayloadError
from ..models.results import ManifestDiscovery, ManifestImage, ManifestShortcut, WebAppManifest
from .jsonld import parse_json_payload

logger = logging.getLogger(__name__)

STRING_FIELDS = (
    "name",
    "short_name",
    "description",
    "display",
    "orientation",
    "theme_color",
    "background_color",
    "lang",
    "dir",
)

URL_FIELDS = ("id", "start_url", "scope")

IMAGE_FIELDS = ("sizes", "type", "purpose", "label")


class ManifestExtractor:
    """Finds the ``<link rel="manifest">`` of a page (the manifest is not fetched)."""

    def extract(self, document: Document) -> ManifestDiscovery:
        discovery: ManifestDiscovery = {}

        for element in document.find_all("link", href=True):
            rels = [rel.lower() for rel in split_tokens(document.attribute(element, "rel"))]
            href = (document.attribute(element, "href") or "").strip()
            if "manifest" in rels and href:
                discovery["href"] = document.resolve(href)
                break

        return discovery


def _image(data: Any, base_url: Optional[str]) -> Optional[ManifestImage]:
    if not isinstance(data, dict) or not isinstance(data.get("src"), str):
        return None
    image: ManifestImage = {"src": resolve_url(data["src"], base_url)}
    for key in IMAGE_FIELDS:
        if isinstance(data.get(key), str):
            image[key] = data[key]  # type: ignore[literal-required]
    return image


def _images(data: Any, base_url: Optional[str]) -> list[ManifestImage]:
    if not isinstance(data, list):
        return []
    return [image for image in (_image(entry, base_url) for entry in data) if image is not None]


def _shortcut(data: Any, base_url: Optional[str]) -> Optional[ManifestShortcut]:
    if not isinstance(data, dict) or not isinstance(data.get("url"), str):
        return None
    shortcut: ManifestShortcut = {"url": resolve_url(data["url"], base_url)}
    for key in ("name", "short_name", "description"):
        if isinstance(data.get(key), str):
            shortcut[key] = data[key]  # type: ignore[literal-required]
    icons = _images(data.get("icons"), base_url)
    if icons:
        shortcut["icons"] = icons
    return shortcut


def parse_manifest(json_text: str, base_url: Optional[str] = None) -> WebAppManifest:
    """
    Parse a Web App Manifest payload.

    Fields with unexpected JSON types are ignored. URL members
    (``start_url``, ``scope``, ``id``, icon and screenshot ``src``, shortcut
    ``url``) are resolved against ``base_url``, normally the manifest's own URL.

    Args:
        json_text: Manifest JSON
        base_url: URL the manifest was loaded from

    Returns:
        Parsed manifest

    Raises:
        MalformedPayloadError: If the payload is not a JSON object
    """
    data = parse_json_payload(json_text)
    if not isinstance(data, dict):
        raise MalformedPayloadError(f"Manifest must be a JSON object, got {type(data).__name__}")

    manifest: WebAppManifest = {}

    for key in STRING_FIELDS:
        if isinstance(data.get(key), str):
            manifest[key] = data[key]  # type: ignore[literal-required]

    for key in URL_FIELDS:
        if isinstance(data.get(key), str):
            manifest[key] = resolve_url(data[key], base_url)  # type: ignore[literal-required]

    if isinstance(data.get("categories"), list):
        manifest["categories"] = [c for c in data["categories"] if isinstance(c, str)]

    for key in ("icons", "screenshots"):
        images = _images(data.get(key), base_url)
        if images:
            manifest[key] = images  # type: ignore[literal-required]

    if isinstance(data.get("shortcuts"), list):
        shortcuts = [s for s in (_shortcut(entry, base_url) for entry in data["shortcuts"]) if s is not None]
        if shortcuts:
            manifest["shortcuts"] = shortcuts

    if isinstance(data.get("related_applications"), list):
        manifest["related_applications"] = [app for app in data["related_applications"] if isinstance(app, dict)]

    if isinstance(data.get("prefer_related_applications"), bool):
        manifest["prefer_related_applications"] = data["prefer_related_applications"]

    logger.debug(f"Parsed manifest with {len(manifest)} fields")
    return manifest
