"""Drift detection — detect divergence between declared and observed configuration.

Drift happens when the configuration a remote system reports no longer
matches what the caller declared. Most textual differences are not drift:
the remote reorders keys, respells durations, adds fields the caller never
set and omits fields that hold their default. Detection therefore:

1. Projects the observed document onto the declared document's key shape
2. Canonicalizes both sides
3. Compares them semantically

A report without drift resolves to the declared text, so a caller that
stores the resolved value never sees a spurious change (no apply loop).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from semdoc.compare.semantic import are_semantically_equal, semantic_differences
from semdoc.config import EngineConfig
from semdoc.exceptions import ParseError
from semdoc.normalize.canonical import canonicalize
from semdoc.normalize.defaults import DEFAULT_RULES, DefaultValueRule
from semdoc.projection.projector import project_by_template
from semdoc.tree.codec import DocumentFormat

logger = logging.getLogger(__name__)


class DriftType:
    CONTENT = "content_drift"  # Declared fields differ from what the remote reports
    UNDETERMINED = "undetermined"  # Observed or declared text could not be read


@dataclass
class DriftReport:
    """Report of detected drift for a single document."""

    name: str = ""
    declared: str = ""
    observed: str = ""
    resolved: str = ""
    drift_types: list[str] = field(default_factory=list)
    details: list[str] = field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        return DriftType.CONTENT in self.drift_types

    @property
    def undetermined(self) -> bool:
        return DriftType.UNDETERMINED in self.drift_types

    def summary(self) -> str:
        label = self.name or "document"
        if not self.drift_types:
            return f"{label}: no drift detected"
        types = ", ".join(self.drift_types)
        return f"{label}: DRIFT [{types}]"


class DriftDetector:
    """Compares declared documents against what a remote system reports."""

    def __init__(
        self,
        fmt: DocumentFormat = DocumentFormat.YAML,
        rules: Sequence[DefaultValueRule] = DEFAULT_RULES,
        durations: bool = True,
        indent: int = 2,
    ):
        self.fmt = fmt
        self.rules = tuple(rules)
        self.durations = durations
        self.indent = indent

    @classmethod
    def from_config(cls, config: EngineConfig) -> DriftDetector:
        """Build a detector from an EngineConfig."""
        return cls(
            fmt=config.fmt,
            rules=config.rules,
            durations=config.durations,
            indent=config.indent,
        )

    def check(self, declared: str, observed: str, name: str = "") -> DriftReport:
        """Check one declared document against its observed counterpart.

        Args:
            declared: The configuration the caller submitted (or last stored).
            observed: The configuration the remote system reports now.
            name: Label used in the report and in log messages.
        """
        report = DriftReport(name=name, declared=declared, observed=observed, resolved=declared)

        try:
            filtered = project_by_template(observed, declared, fmt=self.fmt, indent=self.indent)
        except ParseError as e:
            logger.warning("Cannot determine drift for %s, keeping declared value: %s", name or "document", e)
            report.drift_types.append(DriftType.UNDETERMINED)
            report.details.append(f"Cannot determine drift: {e}")
            return report

        declared_canonical = self._canonical_or_raw(declared, "declared", name)
        observed_canonical = self._canonical_or_raw(filtered, "observed", name)

        options = {"fmt": self.fmt, "rules": self.rules, "durations": self.durations}
        try:
            same = are_semantically_equal(declared_canonical, observed_canonical, **options)
            differences = [] if same else semantic_differences(
                declared_canonical, observed_canonical, **options
            )
        except ParseError as e:
            logger.warning(
                "Semantic comparison failed for %s, falling back to text comparison: %s",
                name or "document",
                e,
            )
            same = declared_canonical == observed_canonical
            differences = []

        if same:
            logger.debug("No drift for %s", name or "document")
            return report

        logger.info(
            "Configuration drift detected for %s (declared length %d, observed length %d)",
            name or "document",
            len(declared_canonical),
            len(observed_canonical),
        )
        report.drift_types.append(DriftType.CONTENT)
        report.details.extend(differences or ["Canonical documents differ"])
        report.resolved = observed_canonical
        return report

    def check_all(self, documents: dict[str, tuple[str, str]]) -> list[DriftReport]:
        """Check drift for several named (declared, observed) pairs."""
        return [
            self.check(declared, observed, name=name)
            for name, (declared, observed) in documents.items()
        ]

    def _canonical_or_raw(self, text: str, side: str, name: str) -> str:
        try:
            return canonicalize(text, fmt=self.fmt, indent=self.indent, durations=self.durations)
        except ParseError as e:
            logger.warning("Failed to normalize %s %s, using raw text: %s", side, name or "document", e)
            return text
