"""HTML5 Microdata extraction (itemscope / itemprop / itemref)."""

import copy
import logging
from typing import Optional

from bs4 import Tag

from ..dom import Document, split_tokens
from ..models.config import Syntax
from ..models.diagnostics import Diagnostic
from ..models.items import MicrodataItem
from .limits import DEFAULT_MAX_ITEMS, ItemBudget

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100

# Tag name -> (attribute holding the property value, whether it is a URL)
VALUE_ATTRIBUTES: dict[str, tuple[str, bool]] = {
    "meta": ("content", False),
    "a": ("href", True),
    "area": ("href", True),
    "link": ("href", True),
    "audio": ("src", True),
    "embed": ("src", True),
    "iframe": ("src", True),
    "img": ("src", True),
    "source": ("src", True),
    "track": ("src", True),
    "video": ("src", True),
    "object": ("data", True),
    "data": ("value", False),
    "meter": ("value", False),
    "time": ("datetime", False),
}

# Tags whose value falls back to text content when the attribute is missing
TEXT_FALLBACK_TAGS = {"time"}


class MicrodataExtractor:
    """
    Builds Microdata item graphs from a parsed document.

    Top-level items are ``itemscope`` elements without ``itemprop``.
    Properties come from descendants (not descending into nested scopes)
    followed by ``itemref`` targets in the order listed. Every nested item
    is a fresh copy, so an element reachable through several ``itemref``
    paths yields independent items and the result graph has no cycles.
    A nested scope already on the active expansion path, or one deeper than
    ``max_depth``, is left out. At most ``max_items`` items (copies
    included) are built per call; once that allowance is spent the rest is
    dropped and an item_limit diagnostic is recorded.

    Example:
        extractor = MicrodataExtractor()
        items = extractor.extract(Document.parse(html))
        items[0].first("name")
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, max_items: int = DEFAULT_MAX_ITEMS):
        """
        Initialize the extractor.

        Args:
            max_depth: Maximum nesting depth of items below a top-level item
            max_items: Maximum number of items built per call
        """
        self.max_depth = max_depth
        self.max_items = max_items

    def extract(self, document: Document, diagnostics: Optional[list[Diagnostic]] = None) -> list[MicrodataItem]:
        """
        Extract all top-level Microdata items.

        Args:
            document: Parsed document
            diagnostics: List that receives an item_limit diagnostic if
                the item allowance runs out

        Returns:
            Top-level items in document order
        """
        items: list[MicrodataItem] = []
        budget = ItemBudget(self.max_items)

        for element in document.all_elements():
            if not self._is_top_level(element):
                continue
            if not budget.take():
                break
            path = frozenset({document.node_id(element)})
            items.append(self._build_item(document, element, depth=0, path=path, budget=budget))

        budget.report(Syntax.MICRODATA, diagnostics)
        logger.debug(f"Extracted {len(items)} microdata items")
        return items

    @staticmethod
    def _is_top_level(element: Tag) -> bool:
        """An itemscope that is not itself a property of another item."""
        return element.has_attr("itemscope") and not element.has_attr("itemprop")

    def _build_item(
        self,
        document: Document,
        element: Tag,
        depth: int,
        path: frozenset,
        budget: ItemBudget,
    ) -> MicrodataItem:
        """Build one item and, recursively, its nested items."""
        item = MicrodataItem(types=split_tokens(document.attribute(element, "itemtype")))

        itemid = document.attribute(element, "itemid")
        if itemid and itemid.strip():
            item.id = document.resolve(itemid)

        for prop_element in self._property_elements(document, element):
            names = split_tokens(document.attribute(prop_element, "itemprop"))
            if not names:
                continue

            if prop_element.has_attr("itemscope"):
                nested = self._build_nested(document, prop_element, depth, path, budget)
                if nested is None:
                    continue
                item.add_item_property(names[0], nested)
                for name in names[1:]:
                    if not budget.take_copy(nested):
                        break
                    item.add_item_property(name, copy.deepcopy(nested))
            else:
                value = self._property_value(document, prop_element)
                if value is None:
                    continue
                for name in names:
                    item.add_text_property(name, value)

        return item

    def _build_nested(
        self,
        document: Document,
        element: Tag,
        depth: int,
        path: frozenset,
        budget: ItemBudget,
    ) -> Optional[MicrodataItem]:
        """Build a nested item unless it would cycle or exceed a limit."""
        node = document.node_id(element)

        if node in path:
            logger.debug(f"Omitting cyclic microdata item (element #{node})")
            return None

        if depth + 1 > self.max_depth:
            logger.debug(f"Truncating microdata nesting at depth {self.max_depth} (element #{node})")
            return None

        if not budget.take():
            return None

        return self._build_item(document, element, depth + 1, path | {node}, budget)

    def _property_elements(self, document: Document, scope: Tag) -> list[Tag]:
        """
        Collect the elements that contribute properties to an item.

        Args:
            document: Parsed document
            scope: The itemscope element

        Returns:
            Descendant property elements in document order, then those
            reached through itemref, each element at most once
        """
        found: list[Tag] = []
        seen = {document.node_id(scope)}

        def crawl(start: list[Tag]) -> None:
            stack = list(reversed(start))
            while stack:
                element = stack.pop()
                node = document.node_id(element)
                if node in seen:
                    continue
                seen.add(node)

                if element.has_attr("itemprop"):
                    found.append(element)

                # A nested scope owns everything below it
                if not element.has_attr("itemscope"):
                    stack.extend(reversed(document.children(element)))

        crawl(document.children(scope))

        for ref in split_tokens(document.attribute(scope, "itemref")):
            target = document.element_by_id(ref)
            if target is None:
                logger.debug(f"Skipping dangling itemref '{ref}'")
                continue
            crawl([target])

        return found

    @staticmethod
    def _property_value(document: Document, element: Tag) -> Optional[str]:
        """Text value of a non-item property element."""
        tag = document.tag_name(element)
        rule = VALUE_ATTRIBUTES.get(tag)

        if rule is None:
            return document.text_content(element).strip()

        attribute, is_url = rule
        value = document.attribute(element, attribute)
        if value is None:
            if tag in TEXT_FALLBACK_TAGS:
                return document.text_content(element).strip()
            return None

        return document.resolve(value) if is_url else value
