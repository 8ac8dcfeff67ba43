"""Open Graph and Twitter card extraction."""

import logging
from collections.abc import Iterator
from typing import Any, Optional

from ..dom import Document
from ..models.results import OgMedia, OpenGraph, TwitterCard, TwitterPlayer

logger = logging.getLogger(__name__)

# og:<key> scalars (first occurrence wins)
OG_SCALARS = ("title", "type", "description", "site_name", "determiner", "locale")

# og:<media> -> OpenGraph list key
OG_MEDIA = {"image": "images", "video": "videos", "audio": "audios"}

# Object type namespaces and their repeatable properties
OG_NAMESPACES = {
    "article": {"author", "tag"},
    "book": {"author", "tag"},
    "profile": set(),
}

TWITTER_SCALARS = {
    "card": "card",
    "site": "site",
    "site:id": "site_id",
    "creator": "creator",
    "creator:id": "creator_id",
    "title": "title",
    "description": "description",
    "image:alt": "image_alt",
}


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        return None


def iter_meta_properties(document: Document, prefixes: tuple[str, ...]) -> Iterator[tuple[str, str]]:
    """
    Yield (key, content) for meta tags whose property/name has one of the prefixes.

    Keys are lower-cased; tags with empty content are skipped.
    """
    for element in document.find_all("meta"):
        key = document.attribute(element, "property") or document.attribute(element, "name")
        if not key:
            continue
        key = key.strip().lower()
        if not key.startswith(prefixes):
            continue
        content = (document.attribute(element, "content") or "").strip()
        if content:
            yield key, content


class OpenGraphExtractor:
    """
    Extracts Open Graph protocol metadata.

    Structured media properties (``og:image:width`` etc.) attach to the most
    recent ``og:image``/``og:video``/``og:audio`` entry.
    """

    def extract(self, document: Document) -> OpenGraph:
        og: OpenGraph = {}
        latest: dict[str, OgMedia] = {}

        for key, content in iter_meta_properties(document, ("og:", "article:", "book:", "profile:")):
            namespace, _, prop = key.partition(":")

            if namespace != "og":
                self._read_namespace(og, namespace, prop, content)
                continue

            if prop in OG_SCALARS:
                og.setdefault(prop, content)  # type: ignore[misc]
            elif prop == "url":
                og.setdefault("url", document.resolve(content))
            elif prop == "locale:alternate":
                og.setdefault("locale_alternate", []).append(content)
            else:
                self._read_media(document, og, latest, prop, content)

        images = og.get("images")
        if images and "url" in images[0]:
            og["image"] = images[0]["url"]

        logger.debug(f"Extracted {len(og)} Open Graph fields")
        return og

    @staticmethod
    def _read_media(
        document: Document, og: OpenGraph, latest: dict[str, OgMedia], prop: str, content: str
    ) -> None:
        kind, _, field = prop.partition(":")
        list_key = OG_MEDIA.get(kind)
        if list_key is None:
            return

        entries: list[OgMedia] = og.setdefault(list_key, [])  # type: ignore[misc]

        if field in ("", "url"):
            # og:image:url following a bare og:image describes the same entry
            current = latest.get(kind)
            if field == "url" and current is not None and "url" not in current:
                current["url"] = document.resolve(content)
                return
            entry: OgMedia = {"url": document.resolve(content)}
            entries.append(entry)
            latest[kind] = entry
            return

        current = latest.get(kind)
        if current is None:
            current = {}
            entries.append(current)
            latest[kind] = current

        if field == "secure_url":
            current["secure_url"] = document.resolve(content)
        elif field in ("width", "height"):
            number = _parse_int(content)
            if number is not None:
                current[field] = number  # type: ignore[literal-required]
        elif field in ("type", "alt"):
            current[field] = content  # type: ignore[literal-required]

    @staticmethod
    def _read_namespace(og: OpenGraph, namespace: str, prop: str, content: str) -> None:
        if not prop:
            return
        section: dict[str, Any] = og.setdefault(namespace, {})  # type: ignore[misc]
        if prop in OG_NAMESPACES[namespace]:
            section.setdefault(prop, []).append(content)
        else:
            section.setdefault(prop, content)


class TwitterExtractor:
    """
    Extracts Twitter/X card metadata.

    With ``fallback`` enabled, a missing title, description or image is
    filled from the page's Open Graph tags.
    """

    def __init__(self, fallback: bool = True):
        self.fallback = fallback

    def extract(self, document: Document, opengraph: Optional[OpenGraph] = None) -> TwitterCard:
        """
        Extract Twitter card metadata.

        Args:
            document: Parsed document
            opengraph: Already extracted Open Graph data to fall back on

        Returns:
            TwitterCard with only the fields found
        """
        card: TwitterCard = {}
        player: TwitterPlayer = {}
        app: dict[str, str] = {}

        for key, content in iter_meta_properties(document, ("twitter:",)):
            prop = key[len("twitter:") :]

            if prop in TWITTER_SCALARS:
                card.setdefault(TWITTER_SCALARS[prop], content)  # type: ignore[misc]
            elif prop in ("image", "image:src"):
                card.setdefault("image", document.resolve(content))
            elif prop == "player":
                player.setdefault("url", document.resolve(content))
            elif prop == "player:stream":
                player.setdefault("stream", document.resolve(content))
            elif prop in ("player:width", "player:height"):
                number = _parse_int(content)
                if number is not None:
                    player.setdefault(prop.split(":")[1], number)  # type: ignore[misc]
            elif prop.startswith("app:"):
                # app:name:iphone -> name_iphone, app:country -> country
                app.setdefault(prop[len("app:") :].replace(":", "_"), content)

        if "url" in player:
            card["player"] = player
        if app:
            card["app"] = app

        if self.fallback:
            self._apply_fallback(card, opengraph if opengraph is not None else OpenGraphExtractor().extract(document))

        return card

    @staticmethod
    def _apply_fallback(card: TwitterCard, og: OpenGraph) -> None:
        for key in ("title", "description", "image"):
            if key not in card and key in og:
                card[key] = og[key]  # type: ignore[literal-required]
