"""Engine configuration read from the environment.

Environment variables:

- SEMDOC_FORMAT: "yaml" (default) or "json"
- SEMDOC_INDENT: indentation width of canonical output (default 2)
- SEMDOC_NORMALIZE_DURATIONS: "true"/"false" (default true)
- SEMDOC_RULES_FILE: YAML file replacing the built-in default value rules
- SEMDOC_LOG_LEVEL: logging level name for the CLI (default WARNING)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from semdoc.exceptions import RuleConfigError
from semdoc.normalize.defaults import DEFAULT_RULES, DefaultValueRule, load_rules
from semdoc.tree.codec import DocumentFormat

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class EngineConfig:
    """Options shared by the CLI and the drift detector."""

    fmt: DocumentFormat = DocumentFormat.YAML
    indent: int = 2
    durations: bool = True
    rules: tuple[DefaultValueRule, ...] = field(default_factory=lambda: DEFAULT_RULES)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> EngineConfig:
        env = os.environ if environ is None else environ
        config = cls()

        fmt = env.get("SEMDOC_FORMAT", "").strip().lower()
        if fmt:
            try:
                config.fmt = DocumentFormat(fmt)
            except ValueError:
                raise RuleConfigError(f"SEMDOC_FORMAT must be 'yaml' or 'json', got {fmt!r}") from None

        indent = env.get("SEMDOC_INDENT", "").strip()
        if indent:
            if not indent.isdigit() or not 2 <= int(indent) <= 9:
                raise RuleConfigError(f"SEMDOC_INDENT must be an integer from 2 to 9, got {indent!r}")
            config.indent = int(indent)

        durations = env.get("SEMDOC_NORMALIZE_DURATIONS", "").strip().lower()
        if durations:
            if durations not in _TRUE | _FALSE:
                raise RuleConfigError(f"SEMDOC_NORMALIZE_DURATIONS must be a boolean, got {durations!r}")
            config.durations = durations in _TRUE

        rules_file = env.get("SEMDOC_RULES_FILE", "").strip()
        if rules_file:
            config.rules = load_rules(rules_file)

        log_level = env.get("SEMDOC_LOG_LEVEL", "").strip().upper()
        if log_level:
            if not isinstance(logging.getLevelName(log_level), int):
                raise RuleConfigError(f"SEMDOC_LOG_LEVEL is not a logging level: {log_level!r}")
            config.log_level = log_level

        return config
