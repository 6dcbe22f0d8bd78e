"""Template projection — restrict a document to a template's key shape."""

from semdoc.projection.projector import project_by_template, project_node
from semdoc.projection.shape import KeyShape, MappingShape, ScalarShape, SequenceShape, extract_shape

__all__ = [
    "KeyShape",
    "MappingShape",
    "ScalarShape",
    "SequenceShape",
    "extract_shape",
    "project_by_template",
    "project_node",
]
