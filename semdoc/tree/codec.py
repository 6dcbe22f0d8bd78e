"""Parse text into a Document Tree and serialize it back.

YAML goes through a PyYAML safe loader that keeps timestamps as plain
strings and refuses duplicate keys; JSON goes through the json module
with the same duplicate-key check.
"""

from __future__ import annotations

import json
import logging
from enum import Enum

import yaml

from semdoc.exceptions import ParseError
from semdoc.tree.models import DocNode, from_native, key_text, to_native

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_MERGE_TAG = "tag:yaml.org,2002:merge"
_DOCUMENT_END = "\n...\n"


class DocumentFormat(Enum):
    YAML = "yaml"
    JSON = "json"


class _DocumentLoader(yaml.SafeLoader):
    """Safe loader without timestamp resolution and with duplicate-key checks.

    Keys are turned into their YAML text while the mapping is built, so
    ``1`` and ``true`` stay distinct keys while ``1`` and ``'1'`` collide.
    """

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            return super().construct_mapping(node, deep=deep)

        seen = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG:
                continue
            key = key_text(self.construct_object(key_node, deep=True))
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)

        # Merged entries come first, so the mapping's own keys override them
        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            key = key_text(self.construct_object(key_node, deep=True))
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


_DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class _DocumentDumper(yaml.SafeDumper):
    """Safe dumper that indents sequences nested under a mapping key."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def _reject_duplicate_keys(pairs: list[tuple[str, object]]) -> dict:
    result = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"found duplicate key {key!r}")
        result[key] = value
    return result


def parse_document(
    text: str,
    fmt: DocumentFormat = DocumentFormat.YAML,
    label: str = "document",
) -> DocNode:
    """Parse ``text`` into a Document Tree.

    Raises:
        ParseError: if the text is malformed or holds values that have no
            Document Tree counterpart (timestamps with explicit tags,
            binary data, sets, recursive aliases).
    """
    try:
        if fmt is DocumentFormat.JSON:
            data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
        else:
            data = yaml.load(text, Loader=_DocumentLoader)
        return from_native(data)
    except (yaml.YAMLError, ValueError, TypeError, RecursionError) as e:
        logger.error(
            "Failed to parse %s %s document (length %d): %s",
            label,
            fmt.value,
            len(text),
            e,
        )
        raise ParseError(label, text, str(e)) from e


def dump_document(
    node: DocNode,
    fmt: DocumentFormat = DocumentFormat.YAML,
    indent: int = 2,
    compact: bool = False,
) -> str:
    """Serialize a Document Tree, keeping mapping keys in their current order.

    YAML output is block style with no line folding and ends with exactly one
    newline. JSON output is indented (one trailing newline) unless
    ``compact`` is set, in which case it is a single line with no newline.
    """
    data = to_native(node)

    if fmt is DocumentFormat.JSON:
        if compact:
            return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        return json.dumps(data, indent=indent, ensure_ascii=False) + "\n"

    output = yaml.dump(
        data,
        Dumper=_DocumentDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=indent,
        width=float("inf"),
    )
    # Plain scalars at the root get an explicit document end marker
    if output.endswith(_DOCUMENT_END):
        output = output[: -len(_DOCUMENT_END)] + "\n"
    return output.rstrip("\n") + "\n"
