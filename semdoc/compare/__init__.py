"""Semantic comparison of JSON/YAML documents."""

from semdoc.compare.semantic import (
    are_semantically_equal,
    nodes_equal,
    normalize_for_comparison,
    semantic_differences,
)

__all__ = [
    "are_semantically_equal",
    "nodes_equal",
    "normalize_for_comparison",
    "semantic_differences",
]
