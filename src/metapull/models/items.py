"""Property value model shared by the recursive extractors."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Union

# A property value is either text (plain text or a resolved URL) or a nested item
PropertyValue = Union[str, "Item"]

JsonScalar = Union[str, int, float, bool]
JsonLdValue = Union[JsonScalar, "JsonLdNode"]


@dataclass
class Item:
    """
    An item with a type list, an optional id and an ordered property map.

    Properties keep insertion (document) order and values accumulate: a
    property seen twice holds two values. A missing property is simply an
    absent key. Items are built append-only during a single extraction pass
    and each nested item is owned by exactly one parent.

    Attributes:
        types: Type tokens/URIs in source order
        id: Optional global identifier
        properties: Property name to ordered list of values
    """

    types: list[str] = field(default_factory=list)
    id: str | None = None
    properties: dict[str, list[PropertyValue]] = field(default_factory=dict)

    def add_text_property(self, name: str, value: str) -> None:
        """Append a text value to a property."""
        self.properties.setdefault(name, []).append(value)

    def add_item_property(self, name: str, item: Item) -> None:
        """Append a nested item to a property."""
        self.properties.setdefault(name, []).append(item)

    def get(self, name: str) -> list[PropertyValue]:
        """All values of a property (empty list when absent)."""
        return list(self.properties.get(name, []))

    def first(self, name: str) -> PropertyValue | None:
        """First value of a property in document order, if any."""
        values = self.properties.get(name)
        return values[0] if values else None

    def nested_items(self) -> Iterator[Item]:
        """Nested items held directly by this item's properties."""
        for values in self.properties.values():
            for value in values:
                if isinstance(value, Item):
                    yield value

    def count_items(self) -> int:
        """Number of items in this item's tree, itself included."""
        return 1 + sum(child.count_items() for child in self.nested_items())

    def _base_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": list(self.types)}
        if self.id is not None:
            data["id"] = self.id
        return data

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain dicts and lists."""
        data = self._base_dict()
        data["properties"] = {
            name: [value.to_dict() if isinstance(value, Item) else value for value in values]
            for name, values in self.properties.items()
        }
        return data


@dataclass
class MicrodataItem(Item):
    """An HTML5 Microdata item (an ``itemscope`` element)."""


@dataclass
class Microformat(Item):
    """
    A Microformats2 item (an element with an ``h-*`` class).

    Attributes:
        value: Plain value of the item when it is itself a property of
            another microformat (e.g. the name of an embedded h-card)
    """

    value: str | None = None

    def _base_dict(self) -> dict[str, Any]:
        data = super()._base_dict()
        if self.value is not None:
            data["value"] = self.value
        return data


@dataclass
class RdfaItem(Item):
    """
    An RDFa item (an element with ``typeof``, or a ``vocab`` root).

    Attributes:
        vocab: Vocabulary in effect for the item
    """

    vocab: str | None = None

    def _base_dict(self) -> dict[str, Any]:
        data = super()._base_dict()
        if self.vocab is not None:
            data["vocab"] = self.vocab
        return data


@dataclass
class JsonLdNode:
    """
    A normalized JSON-LD node object.

    ``@type`` becomes ``types``, ``@id`` becomes ``id`` and ``@context`` is
    kept as-is in ``context``. Every other key is a property whose values
    are JSON scalars or nested nodes. ``@id`` references to other nodes are
    left as plain strings.
    """

    types: list[str] = field(default_factory=list)
    id: str | None = None
    context: Any = None
    properties: dict[str, list[JsonLdValue]] = field(default_factory=dict)

    def add_value(self, name: str, value: JsonLdValue) -> None:
        """Append a scalar or nested node to a property."""
        self.properties.setdefault(name, []).append(value)

    def get(self, name: str) -> list[JsonLdValue]:
        """All values of a property (empty list when absent)."""
        return list(self.properties.get(name, []))

    def first(self, name: str) -> JsonLdValue | None:
        """First value of a property, if any."""
        values = self.properties.get(name)
        return values[0] if values else None

    def is_a(self, type_name: str) -> bool:
        """Whether the node declares the given type."""
        return type_name in self.types

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to canonical JSON-LD form.

        Re-normalizing this form yields an identical node.
        """
        data: dict[str, Any] = {}
        if self.context is not None:
            data["@context"] = self.context
        if self.id is not None:
            data["@id"] = self.id
        if self.types:
            data["@type"] = list(self.types)
        for name, values in self.properties.items():
            data[name] = [value.to_dict() if isinstance(value, JsonLdNode) else value for value in values]
        return data


@dataclass
class JsonLdBlock:
    """Nodes normalized from one ``<script type="application/ld+json">`` block."""

    index: int
    nodes: list[JsonLdNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "nodes": [node.to_dict() for node in self.nodes]}
