"""Template projector — prune a document to the fields a template declares.

Used during drift detection: a remote system returns many fields the caller
never set, and only the ones the caller declared should take part in the
comparison. Projection is best-effort. A structural mismatch between source
and template yields null for that subtree instead of an error, and leaf
values are never rewritten.
"""

from __future__ import annotations

import logging

from semdoc.projection.shape import KeyShape, MappingShape, ScalarShape, SequenceShape, extract_shape
from semdoc.tree.codec import DocumentFormat, dump_document, parse_document
from semdoc.tree.models import DocNode, MappingNode, ScalarNode, SequenceNode

logger = logging.getLogger(__name__)


def project_node(node: DocNode, shape: KeyShape) -> DocNode:
    """Project ``node`` onto ``shape``."""
    if isinstance(shape, ScalarShape):
        return node

    if isinstance(shape, MappingShape):
        if not isinstance(node, MappingNode):
            return ScalarNode(value=None)
        return MappingNode(
            fields={
                key: project_node(child, shape.fields[key])
                for key, child in node.fields.items()
                if key in shape.fields
            }
        )

    if isinstance(shape, SequenceShape):
        if not isinstance(node, SequenceNode):
            return ScalarNode(value=None)
        if shape.item is not None:
            return SequenceNode(items=[project_node(child, shape.item) for child in node.items])
        return SequenceNode(items=[_project_without_item_shape(child, shape) for child in node.items])

    raise TypeError(f"not a key shape: {shape!r}")


def _project_without_item_shape(node: DocNode, shape: SequenceShape) -> DocNode:
    # An empty template list gives its elements no keys to keep, so objects
    # come out empty. Leaves have no keys and survive as they are.
    if isinstance(node, MappingNode):
        return MappingNode()
    if isinstance(node, SequenceNode):
        return project_node(node, shape)
    return node


def project_by_template(
    source: str,
    template: str,
    *,
    fmt: DocumentFormat = DocumentFormat.YAML,
    indent: int = 2,
) -> str:
    """Filter ``source`` down to the keys present in ``template``.

    An empty or blank source yields "", an empty or blank template returns
    ``source`` as is.
    The projected document keeps the source's key order. JSON output is
    compact.

    Raises:
        ParseError: labelled "source" or "template" for whichever failed.
    """
    if not source or not source.strip():
        return ""
    if not template or not template.strip():
        return source

    source_tree = parse_document(source, fmt, label="source")
    template_tree = parse_document(template, fmt, label="template")

    shape = extract_shape(template_tree)
    projected = project_node(source_tree, shape)
    logger.debug("Projected %s source onto template shape %s", fmt.value, type(shape).__name__)

    return dump_document(projected, fmt, indent=indent, compact=fmt is DocumentFormat.JSON)
