"""Document Tree — a tagged-variant representation of parsed JSON/YAML.

Every normalization pass in semdoc operates on this tree rather than on
untyped dicts and lists, so each pass handles exactly three node kinds.
"""

from semdoc.tree.codec import DocumentFormat, dump_document, parse_document
from semdoc.tree.models import (
    DocNode,
    MappingNode,
    NodeKind,
    ScalarCategory,
    ScalarNode,
    SequenceNode,
    from_native,
    to_native,
)

__all__ = [
    "DocNode",
    "DocumentFormat",
    "MappingNode",
    "NodeKind",
    "ScalarCategory",
    "ScalarNode",
    "SequenceNode",
    "dump_document",
    "from_native",
    "parse_document",
    "to_native",
]
