"""Read-only query facade over a parsed HTML document."""

import logging
import re
from collections.abc import Iterator
from typing import Any, Optional, Union

from bs4 import BeautifulSoup, FeatureNotFound, Tag

from ..errors import InvalidUrlError, ParseError
from .urls import UrlResolver, parse_base_url, resolve_url

logger = logging.getLogger(__name__)

SUPPORTED_PARSERS = ("html.parser", "lxml", "html5lib")

_WHITESPACE = re.compile(r"\s+")


def split_tokens(value: Optional[str]) -> list[str]:
    """Split a whitespace-separated attribute value into unique tokens, keeping order."""
    if not value:
        return []
    tokens: list[str] = []
    for token in _WHITESPACE.split(value.strip()):
        if token and token not in tokens:
            tokens.append(token)
    return tokens


class Document:
    """
    Wraps a parsed HTML tree and exposes the queries extractors need.

    Elements are identified by a stable document-order ordinal (see
    ``node_id``) so traversal state can be tracked without touching the tree.
    The document is never mutated after parsing.

    Example:
        doc = Document.parse("<p id='x'>Hi</p>", base_url="https://example.com/")
        doc.text_content(doc.element_by_id("x"))  # "Hi"
    """

    def __init__(
        self,
        soup: BeautifulSoup,
        base_url: Optional[str] = None,
        honor_base_element: bool = True,
    ):
        """
        Initialize the facade.

        Args:
            soup: Parsed document
            base_url: Validated document URL (or None)
            honor_base_element: Whether a <base href> element overrides base_url
        """
        self.soup = soup
        self._ordinals: dict[int, int] = {}
        self._ids: dict[str, Tag] = {}

        for ordinal, element in enumerate(soup.find_all(True)):
            self._ordinals[id(element)] = ordinal
            element_id = element.get("id")
            if element_id and element_id not in self._ids:
                self._ids[element_id] = element

        self.base_url = self._effective_base_url(base_url, honor_base_element)
        self.resolver = UrlResolver(self.base_url)

    @classmethod
    def parse(
        cls,
        html: Union[str, bytes],
        base_url: Optional[str] = None,
        parser: str = "html.parser",
        honor_base_element: bool = True,
        max_input_size: Optional[int] = None,
    ) -> "Document":
        """
        Parse raw HTML into a Document.

        Args:
            html: HTML text or raw bytes
            base_url: Validated document URL (or None)
            parser: BeautifulSoup tree builder name
            honor_base_element: Whether a <base href> element overrides base_url
            max_input_size: Optional maximum input size in bytes

        Returns:
            Parsed document

        Raises:
            ParseError: If the input cannot be parsed
        """
        if isinstance(html, bytes):
            size = len(html)
            text = cls._decode(html)
        elif isinstance(html, str):
            size = len(html.encode("utf-8", errors="replace"))
            text = html
        else:
            raise ParseError(f"Expected str or bytes, got {type(html).__name__}")

        if max_input_size is not None and size > max_input_size:
            raise ParseError(f"Input is {size} bytes, above the {max_input_size} byte limit")

        if parser not in SUPPORTED_PARSERS:
            raise ParseError(f"Unsupported parser '{parser}' (choose from {', '.join(SUPPORTED_PARSERS)})")

        try:
            # Keep every attribute a plain string; class/rel tokens are split on demand
            soup = BeautifulSoup(text, parser, multi_valued_attributes=None)
        except FeatureNotFound as e:
            raise ParseError(f"Parser '{parser}' is not installed") from e
        except Exception as e:
            raise ParseError(f"Failed to parse HTML: {e}") from e

        return cls(soup, base_url=base_url, honor_base_element=honor_base_element)

    @staticmethod
    def _detect_encoding(html: bytes) -> str:
        """Detect character encoding from HTML content."""
        head = html[:2048].decode("latin-1", errors="ignore")
        charset_match = re.search(r'charset=["\']?([^"\'\s>;]+)', head, re.IGNORECASE)
        if charset_match:
            return charset_match.group(1).strip()
        return "utf-8"

    @classmethod
    def _decode(cls, html: bytes) -> str:
        """Decode HTML bytes using the sniffed charset."""
        encoding = cls._detect_encoding(html)
        try:
            return html.decode(encoding, errors="replace")
        except LookupError:
            return html.decode("utf-8", errors="replace")

    def _effective_base_url(self, base_url: Optional[str], honor_base_element: bool) -> Optional[str]:
        """Combine the caller's base URL with the document's <base href>."""
        if not honor_base_element:
            return base_url

        base_element = self.soup.find("base", href=True)
        if not isinstance(base_element, Tag):
            return base_url

        href = str(base_element["href"]).strip()
        if not href:
            return base_url

        try:
            return parse_base_url(resolve_url(href, base_url))
        except InvalidUrlError as e:
            logger.debug(f"Ignoring <base href>: {e}")
            return base_url

    @property
    def root(self) -> BeautifulSoup:
        """The document root."""
        return self.soup

    def node_id(self, element: Tag) -> int:
        """Stable document-order ordinal of an element."""
        return self._ordinals[id(element)]

    def element_by_id(self, element_id: str) -> Optional[Tag]:
        """First element in document order whose id attribute matches."""
        return self._ids.get(element_id)

    @staticmethod
    def tag_name(element: Tag) -> str:
        """Lower-cased tag name."""
        return (element.name or "").lower()

    @staticmethod
    def attribute(element: Tag, name: str) -> Optional[str]:
        """Attribute value, or None when absent."""
        value = element.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @staticmethod
    def has_attribute(element: Tag, name: str) -> bool:
        """Whether the attribute is present (even if empty)."""
        return element.has_attr(name)

    @staticmethod
    def children(element: Tag) -> list[Tag]:
        """Child elements in order."""
        return [child for child in element.children if isinstance(child, Tag)]

    @staticmethod
    def descendants(element: Tag) -> Iterator[Tag]:
        """Descendant elements in document order."""
        for node in element.descendants:
            if isinstance(node, Tag):
                yield node

    @classmethod
    def class_tokens(cls, element: Tag) -> list[str]:
        """Class tokens in attribute order, without duplicates."""
        return split_tokens(cls.attribute(element, "class"))

    @staticmethod
    def text_content(element: Tag) -> str:
        """Concatenated text of the element and its descendants."""
        return element.get_text()

    def find(self, name: Any = None, **attrs: Any) -> Optional[Tag]:
        """First element matching a BeautifulSoup name/attribute filter."""
        found = self.soup.find(name, **attrs)
        return found if isinstance(found, Tag) else None

    def find_all(self, name: Any = None, **attrs: Any) -> list[Tag]:
        """Elements matching a BeautifulSoup name/attribute filter, in document order."""
        return [el for el in self.soup.find_all(name, **attrs) if isinstance(el, Tag)]

    def select(self, selector: str, element: Optional[Tag] = None) -> list[Tag]:
        """CSS select within an element (default: the whole document)."""
        scope = element if element is not None else self.soup
        return list(scope.select(selector))

    def all_elements(self) -> Iterator[Tag]:
        """Every element in document order."""
        return self.descendants(self.soup)

    def resolve(self, href: str) -> str:
        """Resolve href against the effective base URL."""
        return self.resolver.resolve(href)
