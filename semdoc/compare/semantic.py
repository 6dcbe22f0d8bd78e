"""Semantic comparator — decide whether two documents mean the same thing.

Both documents go through the same normalization pipeline before they are
compared structurally:

1. duration literals in string values are rewritten to minimal spelling
2. default value rules insert server-omitted fields

Mapping key order never matters; sequence order always does. Reordering a
list is a real change, not a cosmetic one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from semdoc.normalize.defaults import DEFAULT_RULES, DefaultValueRule, apply_defaults
from semdoc.normalize.durations import normalize_tree_durations
from semdoc.tree.codec import DocumentFormat, parse_document
from semdoc.tree.models import DocNode, MappingNode, ScalarNode, SequenceNode

logger = logging.getLogger(__name__)

Rules = Sequence[DefaultValueRule]


def normalize_for_comparison(
    node: DocNode,
    rules: Rules = DEFAULT_RULES,
    durations: bool = True,
) -> DocNode:
    """Run the comparison pipeline over a tree and return the normalized copy."""
    if durations:
        node = normalize_tree_durations(node)
    if rules:
        node = apply_defaults(node, rules)
    return node


def scalars_equal(a: ScalarNode, b: ScalarNode) -> bool:
    """Scalars are equal when they share a category and a value (so 1 == 1.0 but true != 1)."""
    return a.category is b.category and a.value == b.value


def nodes_equal(a: DocNode, b: DocNode) -> bool:
    """Structural equality of two normalized trees."""
    if isinstance(a, MappingNode):
        if not isinstance(b, MappingNode) or a.fields.keys() != b.fields.keys():
            return False
        return all(nodes_equal(child, b.fields[key]) for key, child in a.fields.items())
    if isinstance(a, SequenceNode):
        if not isinstance(b, SequenceNode) or len(a.items) != len(b.items):
            return False
        return all(nodes_equal(x, y) for x, y in zip(a.items, b.items))
    if isinstance(a, ScalarNode):
        return isinstance(b, ScalarNode) and scalars_equal(a, b)
    raise TypeError(f"not a document node: {a!r}")


def _parse_pair(
    first: str, second: str, fmt: DocumentFormat, rules: Rules, durations: bool
) -> tuple[DocNode, DocNode]:
    tree_a = parse_document(first, fmt, label="first")
    tree_b = parse_document(second, fmt, label="second")
    return (
        normalize_for_comparison(tree_a, rules, durations),
        normalize_for_comparison(tree_b, rules, durations),
    )


def are_semantically_equal(
    first: str,
    second: str,
    *,
    fmt: DocumentFormat = DocumentFormat.YAML,
    rules: Rules = DEFAULT_RULES,
    durations: bool = True,
) -> bool:
    """Return True if two documents are equal once formatting noise is removed.

    Pass ``rules=()`` and ``durations=False`` for a plain structural
    comparison that only ignores key order and whitespace.

    Raises:
        ParseError: labelled "first" or "second" for whichever input failed.
    """
    if first == second:
        logger.debug("Documents are byte-identical, skipping parse")
        return True

    tree_a, tree_b = _parse_pair(first, second, fmt, rules, durations)
    return nodes_equal(tree_a, tree_b)


def semantic_differences(
    first: str,
    second: str,
    *,
    fmt: DocumentFormat = DocumentFormat.YAML,
    rules: Rules = DEFAULT_RULES,
    durations: bool = True,
) -> list[str]:
    """List the places where two normalized documents differ.

    Each entry reads ``<path>: <what differs>``, with paths such as
    ``$.spec.queries[1].operator``. An empty list means the documents are
    semantically equal.
    """
    if first == second:
        return []

    tree_a, tree_b = _parse_pair(first, second, fmt, rules, durations)
    differences: list[str] = []
    _collect_differences(tree_a, tree_b, "$", differences)
    return differences


def _collect_differences(a: DocNode, b: DocNode, path: str, out: list[str]):
    if type(a) is not type(b):
        out.append(f"{path}: {a.kind.value} vs {b.kind.value}")
        return

    if isinstance(a, MappingNode):
        for key in a.fields:
            if key not in b.fields:
                out.append(f"{path}.{key}: only in first")
            else:
                _collect_differences(a.fields[key], b.fields[key], f"{path}.{key}", out)
        for key in b.fields:
            if key not in a.fields:
                out.append(f"{path}.{key}: only in second")
    elif isinstance(a, SequenceNode):
        if len(a.items) != len(b.items):
            out.append(f"{path}: length {len(a.items)} vs {len(b.items)}")
        for i, (x, y) in enumerate(zip(a.items, b.items)):
            _collect_differences(x, y, f"{path}[{i}]", out)
    elif not scalars_equal(a, b):
        out.append(f"{path}: {a.value!r} vs {b.value!r}")
