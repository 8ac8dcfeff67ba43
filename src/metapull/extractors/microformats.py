"""Microformats2 parsing (h-* roots with p-/u-/dt-/e- properties)."""

import copy
import logging
import re
from typing import NamedTuple, Optional

from bs4 import Tag

from ..dom import Document
from ..models.config import Syntax
from ..models.diagnostics import Diagnostic
from ..models.items import Microformat
from .limits import DEFAULT_MAX_ITEMS, ItemBudget

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100

_CLASS_RE = re.compile(r"^(?P<prefix>h|p|u|dt|e)-(?P<name>[a-z0-9]+(?:-[a-z0-9]+)*)$")

_DATE_RE = r"(?P<date>\d{4}-\d{2}-\d{2}|\d{4}-\d{3})"
_TIME_RE = r"(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?(?::(?P<second>\d{2}(?:\.\d+)?))?\s*(?P<ampm>[ap]\.?m\.?)?"
_TZ_RE = r"(?P<tz>Z|[+-]\d{1,2}(?::?\d{2})?)"

_DATETIME = re.compile(rf"^{_DATE_RE}(?:(?:T|\s+){_TIME_RE})?\s*{_TZ_RE}?$", re.IGNORECASE)
_TIME_ONLY = re.compile(rf"^{_TIME_RE}\s*{_TZ_RE}?$", re.IGNORECASE)
_DATE_ONLY = re.compile(rf"^{_DATE_RE}$")
_TZ_ONLY = re.compile(rf"^{_TZ_RE}$", re.IGNORECASE)


class PropertyClass(NamedTuple):
    """A parsed property class token such as ``p-name``."""

    prefix: str
    name: str


def root_types(document: Document, element: Tag) -> list[str]:
    """The h-* class tokens of an element."""
    types = []
    for token in document.class_tokens(element):
        match = _CLASS_RE.match(token)
        if match and match.group("prefix") == "h":
            types.append(token)
    return types


def property_classes(document: Document, element: Tag) -> list[PropertyClass]:
    """The p-/u-/dt-/e- class tokens of an element."""
    props = []
    for token in document.class_tokens(element):
        match = _CLASS_RE.match(token)
        if match and match.group("prefix") != "h":
            props.append(PropertyClass(match.group("prefix"), match.group("name")))
    return props


def _normalize_time(match: re.Match) -> str:
    hour = int(match.group("hour"))
    minute = match.group("minute") or "00"
    second = match.group("second")
    ampm = (match.group("ampm") or "").replace(".", "").lower()

    if ampm == "pm" and hour < 12:
        hour += 12
    elif ampm == "am" and hour == 12:
        hour = 0

    result = f"{hour:02d}:{minute}"
    if second:
        result += f":{second}"
    return result


def _normalize_tz(tz: Optional[str]) -> str:
    if not tz:
        return ""
    if tz.upper() == "Z":
        return "Z"
    sign, digits = tz[0], tz[1:].replace(":", "")
    if len(digits) <= 2:
        return f"{sign}{int(digits):02d}:00"
    return f"{sign}{digits[:-2].zfill(2)}:{digits[-2:]}"


def normalize_datetime(value: str) -> str:
    """
    Best-effort normalization of a date/time string to ISO-8601 form.

    Recognized dates, times (including am/pm) and zone offsets are rewritten
    (``2024-01-15 8:30pm +0100`` becomes ``2024-01-15T20:30+01:00``);
    anything else is returned trimmed. No calendar validation is done.
    """
    text = value.strip()

    match = _DATETIME.match(text)
    if match:
        result = match.group("date")
        if match.group("hour"):
            result += "T" + _normalize_time(match)
        return result + _normalize_tz(match.group("tz"))

    match = _TIME_ONLY.match(text)
    if match and (match.group("minute") or match.group("ampm")):
        return _normalize_time(match) + _normalize_tz(match.group("tz"))

    return text


class MicroformatsParser:
    """
    Parses Microformats2 items from a parsed document.

    Every element with an h-* class is a microformat. One that carries a
    property class and sits inside another microformat becomes a nested
    property value of that microformat; all others are reported as roots,
    in document order. Property scanning never descends into a nested
    microformat, so a nested item is never also a flat property of its
    ancestor. Copies made for multi-kind roots and multi-property nested
    items count towards ``max_items`` like every other item.

    Example:
        parser = MicroformatsParser()
        result = parser.extract(Document.parse(html))
        result["h-card"][0].first("name")
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        implied_properties: bool = True,
        max_items: int = DEFAULT_MAX_ITEMS,
    ):
        """
        Initialize the parser.

        Args:
            max_depth: Maximum nesting depth of property microformats
            implied_properties: Derive name/photo/url when not explicit
            max_items: Maximum number of items built per call
        """
        self.max_depth = max_depth
        self.implied_properties = implied_properties
        self.max_items = max_items

    def extract(
        self, document: Document, diagnostics: Optional[list[Diagnostic]] = None
    ) -> dict[str, list[Microformat]]:
        """
        Extract all root microformats grouped by h-* kind.

        Args:
            document: Parsed document
            diagnostics: List that receives an item_limit diagnostic if
                the item allowance runs out

        Returns:
            Mapping of kind (e.g. "h-card") to items in document order. An
            element with several h-* classes is listed under each kind.
        """
        results: dict[str, list[Microformat]] = {}
        consumed: set[int] = set()
        budget = ItemBudget(self.max_items)

        for element in document.all_elements():
            types = root_types(document, element)
            if not types or document.node_id(element) in consumed:
                continue
            if not budget.take():
                break

            item = self._parse_item(document, element, types, depth=0, consumed=consumed, budget=budget)
            results.setdefault(types[0], []).append(item)
            for kind in types[1:]:
                if not budget.take_copy(item):
                    break
                results.setdefault(kind, []).append(copy.deepcopy(item))

        budget.report(Syntax.MICROFORMATS, diagnostics)
        logger.debug(f"Extracted microformats: {', '.join(results) or 'none'}")
        return results

    def _parse_item(
        self,
        document: Document,
        element: Tag,
        types: list[str],
        depth: int,
        consumed: set[int],
        budget: ItemBudget,
    ) -> Microformat:
        """Parse one microformat and its nested property microformats."""
        element_id = document.attribute(element, "id")
        item = Microformat(types=types, id=element_id.strip() if element_id and element_id.strip() else None)

        prop_elements, has_nested = self._property_elements(document, element)
        explicit_prefixes: set[str] = set()

        for prop_element in prop_elements:
            props = property_classes(document, prop_element)
            explicit_prefixes.update(prop.prefix for prop in props)
            nested_types = root_types(document, prop_element)

            if not nested_types:
                for prop in props:
                    item.add_text_property(prop.name, self._parse_value(document, prop_element, prop.prefix))
                continue

            if depth + 1 > self.max_depth:
                logger.debug(f"Truncating microformat nesting at depth {self.max_depth}")
                self._consume_subtree(document, prop_element, consumed)
                continue

            if not budget.take():
                self._consume_subtree(document, prop_element, consumed)
                continue

            consumed.add(document.node_id(prop_element))
            nested = self._parse_item(document, prop_element, nested_types, depth + 1, consumed, budget)

            for index, prop in enumerate(props):
                if index == 0:
                    value_item = nested
                elif budget.take_copy(nested):
                    value_item = copy.deepcopy(nested)
                else:
                    break
                value_item.value = self._nested_value(document, prop_element, prop.prefix, value_item)
                item.add_item_property(prop.name, value_item)

        if self.implied_properties:
            self._apply_implied(document, element, item, explicit_prefixes, has_nested)

        return item

    def _property_elements(self, document: Document, root: Tag) -> tuple[list[Tag], bool]:
        """
        Collect property elements below a root.

        Returns:
            Property elements in document order, and whether any nested
            microformat was found
        """
        found: list[Tag] = []
        has_nested = False
        stack = list(reversed(document.children(root)))

        while stack:
            element = stack.pop()
            is_microformat = bool(root_types(document, element))

            if property_classes(document, element):
                found.append(element)

            if is_microformat:
                # Nested microformats own their subtree
                has_nested = True
                continue

            stack.extend(reversed(document.children(element)))

        return found, has_nested

    def _consume_subtree(self, document: Document, element: Tag, consumed: set[int]) -> None:
        """Mark a truncated branch so none of it resurfaces as a root."""
        consumed.add(document.node_id(element))
        for descendant in document.descendants(element):
            if root_types(document, descendant):
                consumed.add(document.node_id(descendant))

    def _nested_value(self, document: Document, element: Tag, prefix: str, item: Microformat) -> str:
        """Plain value of a microformat used as a property."""
        if prefix == "p":
            name = item.first("name")
            if isinstance(name, str):
                return name
        elif prefix == "u":
            url = item.first("url")
            if isinstance(url, str):
                return url
        return self._parse_value(document, element, prefix)

    def _parse_value(self, document: Document, element: Tag, prefix: str) -> str:
        if prefix == "u":
            return self._url_value(document, element)
        if prefix == "dt":
            return self._datetime_value(document, element)
        if prefix == "e":
            parts = self._value_class_parts(document, element, prefix)
            return "".join(parts) if parts else document.text_content(element).strip()
        return self._plain_value(document, element)

    def _plain_value(self, document: Document, element: Tag) -> str:
        """p-* value: value-class pattern, then element-specific attributes, then text."""
        parts = self._value_class_parts(document, element, "p")
        if parts:
            return "".join(parts)

        tag = document.tag_name(element)
        if tag in ("abbr", "link") and element.has_attr("title"):
            return document.attribute(element, "title") or ""
        if tag in ("data", "input") and element.has_attr("value"):
            return document.attribute(element, "value") or ""
        if tag in ("img", "area") and element.has_attr("alt"):
            return document.attribute(element, "alt") or ""
        return document.text_content(element).strip()

    def _url_value(self, document: Document, element: Tag) -> str:
        """u-* value: URL attribute, then value-class pattern, then text; resolved."""
        tag = document.tag_name(element)
        value: Optional[str] = None

        if tag in ("a", "area", "link") and element.has_attr("href"):
            value = document.attribute(element, "href")
        elif tag in ("img", "audio", "video", "source", "iframe") and element.has_attr("src"):
            value = document.attribute(element, "src")
        elif tag == "video" and element.has_attr("poster"):
            value = document.attribute(element, "poster")
        elif tag == "object" and element.has_attr("data"):
            value = document.attribute(element, "data")

        if value is None:
            parts = self._value_class_parts(document, element, "u")
            if parts:
                value = "".join(parts)
            elif tag == "abbr" and element.has_attr("title"):
                value = document.attribute(element, "title")
            elif tag in ("data", "input") and element.has_attr("value"):
                value = document.attribute(element, "value")
            else:
                value = document.text_content(element).strip()

        return document.resolve(value or "")

    def _datetime_value(self, document: Document, element: Tag) -> str:
        """dt-* value: datetime attribute, then value-class pattern, then text."""
        tag = document.tag_name(element)

        if tag in ("time", "ins", "del") and element.has_attr("datetime"):
            return normalize_datetime(document.attribute(element, "datetime") or "")

        parts = self._value_class_parts(document, element, "dt")
        if parts:
            return self._combine_datetime_parts(parts)

        if tag == "abbr" and element.has_attr("title"):
            return normalize_datetime(document.attribute(element, "title") or "")
        if tag in ("data", "input") and element.has_attr("value"):
            return normalize_datetime(document.attribute(element, "value") or "")
        return normalize_datetime(document.text_content(element))

    @staticmethod
    def _combine_datetime_parts(parts: list[str]) -> str:
        """Join separate date, time and zone value-class parts."""
        date = time = tz = None
        for raw in parts:
            part = raw.strip()
            if date is None and _DATE_ONLY.match(part):
                date = part
            elif date is None and _DATETIME.match(part):
                return normalize_datetime(part)
            elif time is None and _TIME_ONLY.match(part):
                time = part
            elif tz is None and _TZ_ONLY.match(part):
                tz = part

        if date is None and time is None:
            return normalize_datetime("".join(parts))

        text = " ".join(p for p in (date, time) if p)
        if tz:
            text += tz
        return normalize_datetime(text)

    def _value_class_parts(self, document: Document, element: Tag, prefix: str) -> list[str]:
        """
        Values of ``value`` / ``value-title`` descendants (value-class pattern).

        Nested microformats are not searched.
        """
        parts: list[str] = []
        stack = list(reversed(document.children(element)))

        while stack:
            child = stack.pop()
            if root_types(document, child):
                continue

            classes = document.class_tokens(child)
            if "value-title" in classes:
                parts.append(document.attribute(child, "title") or "")
                continue
            if "value" in classes:
                parts.append(self._value_class_text(document, child, prefix))
                continue

            stack.extend(reversed(document.children(child)))

        return parts

    @staticmethod
    def _value_class_text(document: Document, element: Tag, prefix: str) -> str:
        tag = document.tag_name(element)
        if prefix == "dt" and tag in ("time", "ins", "del") and element.has_attr("datetime"):
            return document.attribute(element, "datetime") or ""
        if tag in ("img", "area"):
            return document.attribute(element, "alt") or ""
        if tag == "abbr" and element.has_attr("title"):
            return document.attribute(element, "title") or ""
        if tag in ("data", "input") and element.has_attr("value"):
            return document.attribute(element, "value") or ""
        return document.text_content(element).strip()

    def _apply_implied(
        self,
        document: Document,
        element: Tag,
        item: Microformat,
        explicit_prefixes: set[str],
        has_nested: bool,
    ) -> None:
        """Add implied name, photo and url properties."""
        if has_nested:
            return

        if "name" not in item.properties and not explicit_prefixes & {"p", "e"}:
            item.add_text_property("name", self._implied_name(document, element))

        if "u" in explicit_prefixes:
            return

        if "photo" not in item.properties:
            photo = self._implied_attribute(document, element, {"img": "src", "object": "data"})
            if photo is not None:
                item.add_text_property("photo", document.resolve(photo))

        if "url" not in item.properties:
            url = self._implied_attribute(document, element, {"a": "href", "area": "href"})
            if url is not None:
                item.add_text_property("url", document.resolve(url))

    def _implied_name(self, document: Document, element: Tag) -> str:
        for candidate in self._implied_candidates(document, element):
            tag = document.tag_name(candidate)
            if tag in ("img", "area") and candidate.has_attr("alt"):
                return (document.attribute(candidate, "alt") or "").strip()
            if tag == "abbr" and candidate.has_attr("title"):
                return (document.attribute(candidate, "title") or "").strip()
        return document.text_content(element).strip()

    def _implied_attribute(self, document: Document, element: Tag, rules: dict[str, str]) -> Optional[str]:
        for candidate in self._implied_candidates(document, element):
            attribute = rules.get(document.tag_name(candidate))
            if attribute and candidate.has_attr(attribute):
                return document.attribute(candidate, attribute)
        return None

    @staticmethod
    def _implied_candidates(document: Document, element: Tag) -> list[Tag]:
        """The root itself, its only child, and that child's only child (not microformats)."""
        candidates = [element]
        current = element
        for _ in range(2):
            children = document.children(current)
            if len(children) != 1 or root_types(document, children[0]):
                break
            current = children[0]
            candidates.append(current)
        return candidates
