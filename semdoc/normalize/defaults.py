"""Default value injector — make server-omitted defaults explicit.

Some remote systems drop a field from their response when it holds its
default value. A rule names the fields that identify the kind of object the
default belongs to, and the field/value to insert when it is missing. Rules
are data: adding a default means adding a rule, not a branch.

Rules are checked at every mapping in the document, not only the root,
because nested objects can match a rule on their own.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from semdoc.exceptions import RuleConfigError
from semdoc.tree.models import DocNode, MappingNode, ScalarNode, SequenceNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefaultValueRule:
    """Insert ``default_field: default_value`` where all ``required_fields`` co-occur."""

    required_fields: frozenset[str] = field(default_factory=frozenset)
    default_field: str = ""
    default_value: str | int | float | bool | None = None

    def applies_to(self, mapping: MappingNode) -> bool:
        if self.default_field in mapping:
            return False
        return all(name in mapping for name in self.required_fields)


DEFAULT_RULES: tuple[DefaultValueRule, ...] = (
    # Monitors come back without isPaused unless they are paused
    DefaultValueRule(
        required_fields=frozenset({"title", "model"}),
        default_field="isPaused",
        default_value=False,
    ),
)


def apply_defaults(
    node: DocNode,
    rules: Sequence[DefaultValueRule] = DEFAULT_RULES,
) -> DocNode:
    """Return a copy of ``node`` with every matching rule applied at every mapping."""
    if isinstance(node, MappingNode):
        result = MappingNode(
            fields={key: apply_defaults(child, rules) for key, child in node.fields.items()}
        )
        for rule in rules:
            if rule.applies_to(result):
                logger.debug("Injecting default %s=%r", rule.default_field, rule.default_value)
                result.fields[rule.default_field] = ScalarNode(value=rule.default_value)
        return result
    if isinstance(node, SequenceNode):
        return SequenceNode(items=[apply_defaults(child, rules) for child in node.items])
    if isinstance(node, ScalarNode):
        return node
    raise TypeError(f"not a document node: {node!r}")


def load_rules(path: str | Path) -> tuple[DefaultValueRule, ...]:
    """Load default value rules from a YAML file.

    Expected layout::

        rules:
          - required_fields: [title, model]
            default_field: isPaused
            default_value: false
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise RuleConfigError(f"Cannot read rules file {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
        raise RuleConfigError(f"Rules file {path} must have a top-level 'rules' list")

    rules = []
    for i, rule_data in enumerate(data["rules"]):
        if not isinstance(rule_data, dict):
            raise RuleConfigError(f"Rule {i + 1} in {path} is not a mapping")

        required = rule_data.get("required_fields", [])
        default_field = rule_data.get("default_field")
        default_value = rule_data.get("default_value")

        if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
            raise RuleConfigError(f"Rule {i + 1} in {path}: 'required_fields' must be a list of strings")
        if not isinstance(default_field, str) or not default_field:
            raise RuleConfigError(f"Rule {i + 1} in {path}: missing 'default_field'")
        if default_value is not None and not isinstance(default_value, (str, int, float, bool)):
            raise RuleConfigError(f"Rule {i + 1} in {path}: 'default_value' must be a scalar")

        rules.append(
            DefaultValueRule(
                required_fields=frozenset(required),
                default_field=default_field,
                default_value=default_value,
            )
        )

    return tuple(rules)
