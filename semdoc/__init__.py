"""semdoc — semantic normalization and comparison of JSON/YAML documents."""

from semdoc.compare.semantic import are_semantically_equal
from semdoc.exceptions import ParseError, RuleConfigError, SemdocError
from semdoc.normalize.canonical import canonicalize
from semdoc.normalize.durations import normalize_durations
from semdoc.projection.projector import project_by_template
from semdoc.tree.codec import DocumentFormat

__version__ = "0.1.0"

__all__ = [
    "DocumentFormat",
    "ParseError",
    "RuleConfigError",
    "SemdocError",
    "are_semantically_equal",
    "canonicalize",
    "normalize_durations",
    "project_by_template",
]
