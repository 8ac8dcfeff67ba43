"""Standard HTML meta tag and head link extraction."""

import logging
import re
from typing import Optional

from bs4 import Tag

from ..dom import Document, split_tokens
from ..models.results import AlternateLink, FeedLink, MetaTags

logger = logging.getLogger(__name__)

# meta name -> MetaTags key for single-valued tags
SCALAR_META_NAMES = {
    "description": "description",
    "author": "author",
    "generator": "generator",
    "viewport": "viewport",
    "theme-color": "theme_color",
    "application-name": "application_name",
    "referrer": "referrer",
}

# meta name -> MetaTags key for comma-separated directive lists
DIRECTIVE_META_NAMES = {
    "robots": "robots",
    "googlebot": "googlebot",
}

# rel token -> MetaTags key (first link wins)
LINK_RELS = {
    "canonical": "canonical",
    "shortlink": "shortlink",
    "icon": "icon",
    "apple-touch-icon": "apple_touch_icon",
    "manifest": "manifest",
    "prev": "prev",
    "next": "next",
}

FEED_TYPES = ("application/rss+xml", "application/atom+xml")

_CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([^\"'\s;]+)", re.IGNORECASE)


def split_list(value: str, separators: str = ",") -> list[str]:
    """Split a delimited list, dropping empty entries."""
    pattern = "[" + re.escape(separators) + "]"
    return [part.strip() for part in re.split(pattern, value) if part.strip()]


class MetaTagExtractor:
    """
    Extracts standard meta tags and head links.

    Single-valued fields keep the first non-empty occurrence. Link URLs are
    resolved against the document base URL.
    """

    def extract(self, document: Document) -> MetaTags:
        """
        Extract meta tags.

        Args:
            document: Parsed document

        Returns:
            MetaTags with only the fields found
        """
        meta: MetaTags = {}

        title = document.find("title")
        if isinstance(title, Tag):
            text = document.text_content(title).strip()
            if text:
                meta["title"] = text

        html = document.find("html")
        if isinstance(html, Tag):
            lang = (document.attribute(html, "lang") or "").strip()
            if lang:
                meta["language"] = lang

        for element in document.find_all("meta"):
            self._read_meta(document, element, meta)

        for element in document.find_all("link", href=True):
            self._read_link(document, element, meta)

        logger.debug(f"Extracted {len(meta)} meta fields")
        return meta

    def _read_meta(self, document: Document, element: Tag, meta: MetaTags) -> None:
        charset = self._charset(document, element)
        if charset and "charset" not in meta:
            meta["charset"] = charset

        name = (document.attribute(element, "name") or "").strip().lower()
        content = (document.attribute(element, "content") or "").strip()
        if not name or not content:
            return

        if name in SCALAR_META_NAMES:
            meta.setdefault(SCALAR_META_NAMES[name], content)  # type: ignore[misc]
        elif name in DIRECTIVE_META_NAMES:
            meta.setdefault(  # type: ignore[misc]
                DIRECTIVE_META_NAMES[name], [d.lower() for d in split_list(content)]
            )
        elif name == "keywords":
            meta.setdefault("keywords", split_list(content))

    @staticmethod
    def _charset(document: Document, element: Tag) -> Optional[str]:
        charset = document.attribute(element, "charset")
        if charset and charset.strip():
            return charset.strip()

        http_equiv = (document.attribute(element, "http-equiv") or "").strip().lower()
        if http_equiv == "content-type":
            match = _CHARSET_RE.search(document.attribute(element, "content") or "")
            if match:
                return match.group(1)
        return None

    def _read_link(self, document: Document, element: Tag, meta: MetaTags) -> None:
        href = (document.attribute(element, "href") or "").strip()
        if not href:
            return

        rels = [rel.lower() for rel in split_tokens(document.attribute(element, "rel"))]
        url = document.resolve(href)

        for rel in rels:
            key = LINK_RELS.get(rel)
            if key:
                meta.setdefault(key, url)  # type: ignore[misc]

        if "alternate" in rels:
            self._read_alternate(document, element, url, meta)

    @staticmethod
    def _read_alternate(document: Document, element: Tag, url: str, meta: MetaTags) -> None:
        link_type = (document.attribute(element, "type") or "").strip().lower()

        if "oembed" in link_type:
            return

        if link_type in FEED_TYPES:
            feed: FeedLink = {"href": url, "type": link_type}
            title = document.attribute(element, "title")
            if title and title.strip():
                feed["title"] = title.strip()
            meta.setdefault("feeds", []).append(feed)
            return

        alternate: AlternateLink = {"href": url}
        for attribute in ("hreflang", "media", "type"):
            value = document.attribute(element, attribute)
            if value and value.strip():
                alternate[attribute] = value.strip()  # type: ignore[literal-required]
        meta.setdefault("alternate", []).append(alternate)
