"""RDFa (Lite) item extraction."""

import copy
import logging
from typing import Optional

from bs4 import Tag

from ..dom import Document, split_tokens
from ..models.config import Syntax
from ..models.diagnostics import Diagnostic
from ..models.items import RdfaItem
from .limits import DEFAULT_MAX_ITEMS, ItemBudget

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100

DEFAULT_PREFIXES: dict[str, str] = {
    "schema": "https://schema.org/",
    "foaf": "http://xmlns.com/foaf/0.1/",
    "dc": "http://purl.org/dc/terms/",
    "og": "http://ogp.me/ns#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
}

# Attributes holding a resource value, in order of precedence
RESOURCE_ATTRIBUTES = ("resource", "href", "src")


class PrefixMap:
    """
    CURIE prefix mappings for a document.

    Starts from the common prefixes and adds every ``prefix`` attribute
    found in the document (``prefix="ex: https://example.com/ns#"``).
    """

    def __init__(self, prefixes: Optional[dict[str, str]] = None):
        self.prefixes = dict(DEFAULT_PREFIXES)
        if prefixes:
            self.prefixes.update(prefixes)

    def add_declarations(self, value: str) -> None:
        """Add mappings from a ``prefix`` attribute value."""
        tokens = value.split()
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.endswith(":") and len(token) > 1 and i + 1 < len(tokens):
                self.prefixes[token[:-1]] = tokens[i + 1]
                i += 2
            else:
                i += 1

    def expand(self, term: str, vocab: Optional[str] = None) -> str:
        """
        Expand a CURIE or vocabulary term.

        ``schema:name`` uses the prefix map, a bare ``name`` is appended to
        the vocabulary when there is one, anything else is returned as is.
        """
        if ":" in term:
            prefix, _, local = term.partition(":")
            namespace = self.prefixes.get(prefix)
            if namespace is not None and not local.startswith("//"):
                return namespace + local
            return term
        if vocab:
            return vocab + term
        return term


class RdfaExtractor:
    """
    Builds RDFa items from a parsed document.

    Scopes are ``typeof`` elements and ``vocab`` elements that sit outside
    any other scope. A ``typeof`` element that also carries ``property``
    inside a scope is a nested item of that scope; every other scope is a
    root item. Property scanning stops at nested ``typeof`` elements.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, max_items: int = DEFAULT_MAX_ITEMS):
        self.max_depth = max_depth
        self.max_items = max_items

    def extract(self, document: Document, diagnostics: Optional[list[Diagnostic]] = None) -> list[RdfaItem]:
        """
        Extract all root RDFa items.

        Args:
            document: Parsed document
            diagnostics: List that receives an item_limit diagnostic if
                the item allowance runs out

        Returns:
            Root items in document order
        """
        prefixes = PrefixMap()
        for element in document.all_elements():
            declarations = document.attribute(element, "prefix")
            if declarations:
                prefixes.add_declarations(declarations)

        items: list[RdfaItem] = []
        budget = ItemBudget(self.max_items)
        for root in self._roots(document):
            if not budget.take():
                break
            items.append(self._build_item(document, root, prefixes, depth=0, budget=budget))

        budget.report(Syntax.RDFA, diagnostics)
        logger.debug(f"Extracted {len(items)} RDFa items")
        return items

    @staticmethod
    def _roots(document: Document) -> list[Tag]:
        roots: list[Tag] = []
        stack = [(child, False) for child in reversed(document.children(document.root))]

        while stack:
            element, in_scope = stack.pop()
            opens_scope = in_scope

            if element.has_attr("typeof"):
                if not (in_scope and element.has_attr("property")):
                    roots.append(element)
                opens_scope = True
            elif element.has_attr("vocab") and not in_scope:
                roots.append(element)
                opens_scope = True

            stack.extend((child, opens_scope) for child in reversed(document.children(element)))

        return roots

    @staticmethod
    def _vocab(document: Document, element: Tag) -> Optional[str]:
        """Vocabulary in effect at an element (nearest vocab attribute)."""
        node: Optional[Tag] = element
        while node is not None:
            if node.has_attr("vocab"):
                vocab = (document.attribute(node, "vocab") or "").strip()
                return vocab or None
            node = node.parent
        return None

    def _build_item(
        self, document: Document, scope: Tag, prefixes: PrefixMap, depth: int, budget: ItemBudget
    ) -> RdfaItem:
        vocab = self._vocab(document, scope)
        item = RdfaItem(vocab=vocab)
        item.types = [prefixes.expand(token, vocab) for token in split_tokens(document.attribute(scope, "typeof"))]

        subject = document.attribute(scope, "about")
        if subject is None and scope.has_attr("property"):
            subject = document.attribute(scope, "resource")
        if subject and subject.strip():
            item.id = document.resolve(prefixes.expand(subject.strip()))

        stack = list(reversed(document.children(scope)))
        while stack:
            element = stack.pop()
            has_typeof = element.has_attr("typeof")

            if element.has_attr("property"):
                element_vocab = self._vocab(document, element)
                names = [
                    prefixes.expand(name, element_vocab)
                    for name in split_tokens(document.attribute(element, "property"))
                ]

                if has_typeof:
                    nested = self._build_nested(document, element, prefixes, depth, budget)
                    if nested is not None and names:
                        item.add_item_property(names[0], nested)
                        for name in names[1:]:
                            if not budget.take_copy(nested):
                                break
                            item.add_item_property(name, copy.deepcopy(nested))
                    continue

                value = self._property_value(document, element, prefixes)
                for name in names:
                    item.add_text_property(name, value)

            if has_typeof:
                # A typeof element without property is its own root
                continue

            stack.extend(reversed(document.children(element)))

        return item

    def _build_nested(
        self, document: Document, element: Tag, prefixes: PrefixMap, depth: int, budget: ItemBudget
    ) -> Optional[RdfaItem]:
        if depth + 1 > self.max_depth:
            logger.debug(f"Truncating RDFa nesting at depth {self.max_depth}")
            return None
        if not budget.take():
            return None
        return self._build_item(document, element, prefixes, depth + 1, budget)

    @staticmethod
    def _property_value(document: Document, element: Tag, prefixes: PrefixMap) -> str:
        """content, then resource/href/src (resolved), then text."""
        content = document.attribute(element, "content")
        if content is not None:
            return content.strip()

        for attribute in RESOURCE_ATTRIBUTES:
            value = document.attribute(element, attribute)
            if value is not None:
                expanded = prefixes.expand(value.strip()) if attribute == "resource" else value
                return document.resolve(expanded)

        return document.text_content(element).strip()
