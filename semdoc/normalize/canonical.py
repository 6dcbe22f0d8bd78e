"""Canonicalizer — deterministic, key-sorted re-serialization of a document.

Two documents that differ only in key order, whitespace, quoting style or
duration spelling canonicalize to byte-identical text.
"""

from __future__ import annotations

from semdoc.normalize.durations import normalize_tree_durations
from semdoc.tree.codec import DocumentFormat, dump_document, parse_document
from semdoc.tree.models import DocNode, MappingNode, ScalarNode, SequenceNode


def sort_tree(node: DocNode) -> DocNode:
    """Sort mapping keys at every level. Sequence order is never touched."""
    if isinstance(node, MappingNode):
        return MappingNode(
            fields={key: sort_tree(child) for key, child in node.sorted().fields.items()}
        )
    if isinstance(node, SequenceNode):
        return SequenceNode(items=[sort_tree(child) for child in node.items])
    if isinstance(node, ScalarNode):
        return node
    raise TypeError(f"not a document node: {node!r}")


def canonicalize(
    text: str,
    *,
    fmt: DocumentFormat = DocumentFormat.YAML,
    indent: int = 2,
    durations: bool = True,
) -> str:
    """Return the canonical form of ``text``.

    Args:
        text: The document to canonicalize. Empty or blank text yields "".
        fmt: Input and output format.
        indent: Indentation width of the output.
        durations: Rewrite duration literals in string values to their
            minimal spelling before serializing.

    Raises:
        ParseError: if ``text`` is not a valid document.
    """
    if not text or not text.strip():
        return ""

    tree = parse_document(text, fmt, label="document")
    if durations:
        tree = normalize_tree_durations(tree)
    return dump_document(sort_tree(tree), fmt, indent=indent)
