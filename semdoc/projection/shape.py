"""Key shapes — the structural skeleton of a template document.

A shape keeps a template's mappings and sequences but forgets its leaf
values. Sequences remember only the shape of their first element, which
then acts as a stencil for every element of the projected list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from semdoc.tree.models import DocNode, MappingNode, ScalarNode, SequenceNode


@dataclass(frozen=True)
class ScalarShape:
    """The template has a leaf here: keep whatever the source holds."""


@dataclass(frozen=True)
class SequenceShape:
    """The template has a list here. ``item`` is None when the list was empty."""

    item: KeyShape | None = None


@dataclass(frozen=True)
class MappingShape:
    """The template has an object here with these keys."""

    fields: dict[str, KeyShape] = field(default_factory=dict)


KeyShape = Union[ScalarShape, SequenceShape, MappingShape]


def extract_shape(node: DocNode) -> KeyShape:
    """Derive the key shape of a template tree."""
    if isinstance(node, MappingNode):
        return MappingShape(
            fields={key: extract_shape(child) for key, child in node.fields.items()}
        )
    if isinstance(node, SequenceNode):
        if not node.items:
            return SequenceShape()
        item = extract_shape(node.items[0])
        # An empty first object carries no structure to stencil with
        if isinstance(item, MappingShape) and not item.fields:
            return SequenceShape()
        return SequenceShape(item=item)
    if isinstance(node, ScalarNode):
        return ScalarShape()
    raise TypeError(f"not a document node: {node!r}")
