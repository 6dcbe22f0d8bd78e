"""Document Tree — the in-memory form every normalization pass works on.

A parsed JSON/YAML document is one of three node kinds:

- ScalarNode: a string, number, boolean or null leaf
- SequenceNode: an ordered list of nodes (order is meaningful)
- MappingNode: string keys to nodes (order is not meaningful for equality,
  but is kept so projected output follows the source layout)

Passes never mutate a node they receive; they build new nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class NodeKind(Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class ScalarCategory(Enum):
    """Coarse value type used when comparing two scalars."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"


@dataclass
class ScalarNode:
    """A leaf value."""

    value: str | int | float | bool | None = None

    @property
    def kind(self) -> NodeKind:
        return NodeKind.SCALAR

    @property
    def category(self) -> ScalarCategory:
        # bool is a subclass of int, check it first
        if self.value is None:
            return ScalarCategory.NULL
        if isinstance(self.value, bool):
            return ScalarCategory.BOOLEAN
        if isinstance(self.value, (int, float)):
            return ScalarCategory.NUMBER
        return ScalarCategory.STRING

    @property
    def is_string(self) -> bool:
        return isinstance(self.value, str)


@dataclass
class SequenceNode:
    """An ordered list of child nodes."""

    items: list[DocNode] = field(default_factory=list)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.SEQUENCE

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class MappingNode:
    """String-keyed child nodes. Keys are unique."""

    fields: dict[str, DocNode] = field(default_factory=dict)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.MAPPING

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, key: str) -> bool:
        return key in self.fields

    def keys(self) -> list[str]:
        return list(self.fields)

    def sorted(self) -> MappingNode:
        """Return a shallow copy with keys in ascending code-point order."""
        return MappingNode(fields={k: self.fields[k] for k in sorted(self.fields)})


DocNode = Union[ScalarNode, SequenceNode, MappingNode]


def from_native(data: Any) -> DocNode:
    """Build a Document Tree from plain Python containers.

    Accepts what a JSON or YAML loader produces: dict, list, str, int,
    float, bool and None. Anything else raises TypeError. Two keys that
    render to the same text (``1`` and ``"1"``) raise ValueError.
    """
    if isinstance(data, dict):
        fields = {}
        for k, v in data.items():
            key = key_text(k)
            if key in fields:
                raise ValueError(f"found duplicate key {key!r}")
            fields[key] = from_native(v)
        return MappingNode(fields=fields)
    if isinstance(data, list):
        return SequenceNode(items=[from_native(item) for item in data])
    if data is None or isinstance(data, (str, bool, int, float)):
        return ScalarNode(value=data)
    raise TypeError(f"unsupported value of type {type(data).__name__}: {data!r}")


def to_native(node: DocNode) -> Any:
    """Convert a Document Tree back into dicts, lists and scalars."""
    if isinstance(node, MappingNode):
        return {key: to_native(child) for key, child in node.fields.items()}
    if isinstance(node, SequenceNode):
        return [to_native(child) for child in node.items]
    if isinstance(node, ScalarNode):
        return node.value
    raise TypeError(f"not a document node: {node!r}")


def key_text(key: Any) -> str:
    """Render a mapping key as the string it would be written as in YAML."""
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (int, float)):
        return str(key)
    raise TypeError(f"unsupported mapping key of type {type(key).__name__}: {key!r}")
