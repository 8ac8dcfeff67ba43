"""JSON-LD extraction and node normalization."""

import json
import logging
import re
from typing import Any, Optional

from bs4 import NavigableString, Tag

from ..dom import Document
from ..errors import MalformedPayloadError
from ..models.config import Syntax
from ..models.diagnostics import Diagnostic, DiagnosticKind
from ..models.items import JsonLdBlock, JsonLdNode, JsonLdValue
from ..models.results import JsonLdResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100

LD_JSON_TYPE = "application/ld+json"

# Keys of a @graph wrapper that do not make it a node of its own
GRAPH_WRAPPER_KEYS = {"@context", "@id", "@graph"}

_WRAPPER_START = re.compile(r"^\s*(?://\s*)?(?:<!--|<!\[CDATA\[)")
_WRAPPER_END = re.compile(r"(?://\s*)?(?:-->|\]\]>)\s*$")


def _strip_wrappers(text: str) -> str:
    """Remove HTML comment / CDATA wrappers some sites put around the payload."""
    cleaned = text.strip()
    for _ in range(2):
        stripped = _WRAPPER_END.sub("", _WRAPPER_START.sub("", cleaned)).strip()
        if stripped == cleaned:
            break
        cleaned = stripped
    return cleaned


def parse_json_payload(text: str, block_index: Optional[int] = None) -> Any:
    """
    Parse an embedded JSON payload.

    Control characters inside strings are tolerated since pages often
    contain raw newlines in JSON-LD descriptions.

    Args:
        text: Raw payload text
        block_index: Position of the block, carried on the error

    Returns:
        Parsed JSON value

    Raises:
        MalformedPayloadError: If the payload is not valid JSON
    """
    try:
        return json.loads(_strip_wrappers(text), strict=False)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(
            f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}", block_index=block_index
        ) from e
    except RecursionError as e:
        raise MalformedPayloadError("JSON payload is nested too deeply", block_index=block_index) from e


class JsonLdNormalizer:
    """
    Converts parsed JSON-LD values into JsonLdNode trees.

    A top-level array is a list of nodes. A top-level object carrying
    ``@graph`` contributes its graph objects, which inherit the wrapper's
    ``@context``; the wrapper is kept as a node only when it has keys besides
    ``@context``, ``@id`` and ``@graph``. Any other object is one node.

    ``null`` values and empty arrays produce no property values, and nested
    arrays are flattened, so normalizing the ``to_dict()`` form of the
    output gives back equal nodes.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self.truncated = False

    def normalize(self, data: Any) -> list[JsonLdNode]:
        """
        Normalize a parsed JSON-LD value.

        Args:
            data: Parsed JSON (object, array or scalar)

        Returns:
            Top-level nodes in source order; scalars yield none
        """
        self.truncated = False

        if isinstance(data, list):
            return [self._node(obj, depth=0) for obj in self._flatten(data) if isinstance(obj, dict)]

        if not isinstance(data, dict):
            return []

        if "@graph" not in data:
            return [self._node(data, depth=0)]

        context = data.get("@context")
        nodes: list[JsonLdNode] = []

        if set(data) - GRAPH_WRAPPER_KEYS:
            wrapper = {key: value for key, value in data.items() if key != "@graph"}
            nodes.append(self._node(wrapper, depth=0))

        graph = data["@graph"]
        members = self._flatten(graph) if isinstance(graph, list) else [graph]
        for obj in members:
            if isinstance(obj, dict):
                nodes.append(self._node(obj, depth=0, inherited_context=context))

        return nodes

    @classmethod
    def _flatten(cls, values: list) -> list:
        flat: list = []
        for value in values:
            if isinstance(value, list):
                flat.extend(cls._flatten(value))
            else:
                flat.append(value)
        return flat

    def _node(self, obj: dict, depth: int, inherited_context: Any = None) -> JsonLdNode:
        node = JsonLdNode()

        context = obj.get("@context")
        node.context = context if context is not None else inherited_context

        raw_types = obj.get("@type")
        if isinstance(raw_types, str):
            node.types = [raw_types]
        elif isinstance(raw_types, list):
            node.types = [t for t in self._flatten(raw_types) if isinstance(t, str)]

        raw_id = obj.get("@id")
        if isinstance(raw_id, str):
            node.id = raw_id

        for key, value in obj.items():
            if key in ("@context", "@type", "@id"):
                continue
            for item in self._values(value, depth):
                node.add_value(key, item)

        return node

    def _values(self, value: Any, depth: int) -> list[JsonLdValue]:
        if value is None:
            return []

        if isinstance(value, list):
            values: list[JsonLdValue] = []
            for element in value:
                values.extend(self._values(element, depth))
            return values

        if isinstance(value, dict):
            if depth + 1 > self.max_depth:
                logger.debug(f"Truncating JSON-LD nesting at depth {self.max_depth}")
                self.truncated = True
                return []
            return [self._node(value, depth + 1)]

        return [value]


def normalize_jsonld(data: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> list[JsonLdNode]:
    """
    Normalize a parsed JSON-LD value into nodes.

    Example:
        >>> nodes = normalize_jsonld({"@type": "Person", "name": "Jane"})
        >>> nodes[0].types, nodes[0].first("name")
        (['Person'], 'Jane')
    """
    return JsonLdNormalizer(max_depth).normalize(data)


class JsonLdExtractor:
    """
    Extracts every ``application/ld+json`` script block.

    Blocks are independent: a block with invalid JSON is reported as a
    diagnostic with its index and the remaining blocks are still normalized.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth

    def extract(self, document: Document) -> JsonLdResult:
        """
        Extract and normalize all JSON-LD blocks.

        Args:
            document: Parsed document

        Returns:
            Normalized blocks plus per-block diagnostics
        """
        result = JsonLdResult()

        for index, script in enumerate(self._scripts(document)):
            text = self._script_text(script)
            if not text.strip():
                continue

            try:
                data = parse_json_payload(text, block_index=index)
            except MalformedPayloadError as e:
                logger.warning(f"Skipping malformed JSON-LD block {index}: {e}")
                result.diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.MALFORMED_PAYLOAD,
                        message=str(e),
                        syntax=Syntax.JSONLD,
                        block_index=index,
                    )
                )
                continue

            normalizer = JsonLdNormalizer(self.max_depth)
            nodes = normalizer.normalize(data)

            if normalizer.truncated:
                result.diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.DEPTH_LIMIT,
                        message=f"Nodes nested deeper than {self.max_depth} levels were dropped",
                        syntax=Syntax.JSONLD,
                        block_index=index,
                    )
                )

            result.blocks.append(JsonLdBlock(index=index, nodes=nodes))

        logger.debug(f"Extracted {len(result.blocks)} JSON-LD blocks ({len(result.diagnostics)} diagnostics)")
        return result

    @staticmethod
    def _scripts(document: Document) -> list[Tag]:
        """ld+json scripts in document order (type matched case-insensitively)."""
        scripts = []
        for script in document.find_all("script"):
            script_type = document.attribute(script, "type") or ""
            if script_type.split(";")[0].strip().lower() == LD_JSON_TYPE:
                scripts.append(script)
        return scripts

    @staticmethod
    def _script_text(script: Tag) -> str:
        return "".join(str(node) for node in script.contents if isinstance(node, NavigableString))
