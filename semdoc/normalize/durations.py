"""Duration normalizer — rewrite duration literals to their minimal spelling.

Remote systems often echo a duration back in a longer form than it was
submitted (``5m`` comes back as ``5m0s``, ``1h`` as ``1h0m0s``). Rewriting
every literal to hours/minutes/seconds with zero components dropped makes
both spellings identical:

    5m0s    -> 5m
    1h0m0s  -> 1h
    90m     -> 1h30m
    0h0m0s  -> 0s

One literal-rewrite function backs both entry points: ``normalize_durations``
works on raw text, ``normalize_tree_durations`` on the string leaves of a
Document Tree.
"""

from __future__ import annotations

import re

from semdoc.tree.models import DocNode, MappingNode, ScalarNode, SequenceNode

# h, m, s in that order, each optional, at least one present
DURATION_PATTERN = re.compile(r"\d+h(?:\d+m)?(?:\d+s)?|\d+m(?:\d+s)?|\d+s", re.ASCII)
_LITERAL = re.compile(r"(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?", re.ASCII)

# Durations are bounded by a signed 64-bit nanosecond count
MAX_DURATION_SECONDS = (2**63 - 1) // 1_000_000_000
_MAX_COMPONENT_DIGITS = 19


def parse_duration(literal: str) -> int | None:
    """Return the number of seconds ``literal`` denotes, or None if it is not a duration."""
    match = _LITERAL.fullmatch(literal)
    if not match or not any(match.groups()):
        return None
    # Longer digit runs are out of range anyway and too long for int()
    if any(g and len(g.lstrip("0")) > _MAX_COMPONENT_DIGITS for g in match.groups()):
        return None

    hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    total = hours * 3600 + minutes * 60 + seconds
    if total > MAX_DURATION_SECONDS:
        return None
    return total


def format_duration(total_seconds: int) -> str:
    """Spell a second count as hours/minutes/seconds, omitting zero components."""
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)

    parts = [
        f"{amount}{unit}"
        for amount, unit in ((hours, "h"), (minutes, "m"), (seconds, "s"))
        if amount
    ]
    return "".join(parts) or "0s"


def normalize_duration_literal(literal: str) -> str:
    """Rewrite a single duration literal, or return it untouched if it does not parse."""
    total = parse_duration(literal)
    if total is None:
        return literal

    rewritten = format_duration(total)
    if parse_duration(rewritten) != total:
        return literal
    return rewritten


def normalize_durations(text: str) -> str:
    """Rewrite every duration-shaped substring of ``text``. Never raises."""
    if not text:
        return text

    # Adjacent literals ("60s0m") can merge into a new literal once rewritten
    while True:
        rewritten = DURATION_PATTERN.sub(lambda m: normalize_duration_literal(m.group(0)), text)
        if rewritten == text:
            return rewritten
        text = rewritten


def normalize_tree_durations(node: DocNode) -> DocNode:
    """Return a copy of ``node`` with durations rewritten inside every string leaf.

    Mapping keys are left alone; only values are rewritten.
    """
    if isinstance(node, MappingNode):
        return MappingNode(
            fields={key: normalize_tree_durations(child) for key, child in node.fields.items()}
        )
    if isinstance(node, SequenceNode):
        return SequenceNode(items=[normalize_tree_durations(child) for child in node.items])
    if isinstance(node, ScalarNode):
        if node.is_string:
            return ScalarNode(value=normalize_durations(node.value))
        return node
    raise TypeError(f"not a document node: {node!r}")
