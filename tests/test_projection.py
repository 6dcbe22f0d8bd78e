"""Tests for template projection."""

import pytest

from semdoc.exceptions import ParseError
from semdoc.projection.projector import project_by_template, project_node
from semdoc.projection.shape import MappingShape, ScalarShape, SequenceShape, extract_shape
from semdoc.tree.codec import DocumentFormat
from semdoc.tree.models import MappingNode, ScalarNode, from_native, to_native


# --- Shape Tests ---


def test_extract_shape_of_mapping():
    shape = extract_shape(from_native({"a": 1, "b": {"c": "x"}}))
    assert shape == MappingShape(fields={"a": ScalarShape(), "b": MappingShape(fields={"c": ScalarShape()})})


def test_extract_shape_uses_first_sequence_element():
    shape = extract_shape(from_native([{"n": 1}, {"other": 2}]))
    assert shape == SequenceShape(item=MappingShape(fields={"n": ScalarShape()}))


def test_extract_shape_of_empty_sequence():
    assert extract_shape(from_native([])) == SequenceShape()
    assert extract_shape(from_native([{}])) == SequenceShape()


def test_extract_shape_of_scalar_sequence():
    assert extract_shape(from_native(["x"])) == SequenceShape(item=ScalarShape())


# --- Node Projection Tests ---


def test_project_node_drops_unknown_keys():
    shape = extract_shape(from_native({"a": 0}))
    assert to_native(project_node(from_native({"a": 1, "b": 2}), shape)) == {"a": 1}


def test_project_node_type_mismatch_yields_null():
    shape = extract_shape(from_native({"a": {"b": 1}, "c": [1]}))
    result = project_node(from_native({"a": "flat", "c": {"x": 1}}), shape)
    assert result.fields["a"] == ScalarNode(None)
    assert result.fields["c"] == ScalarNode(None)


def test_project_node_scalar_shape_keeps_whole_subtree():
    shape = extract_shape(from_native({"spec": "anything"}))
    source = from_native({"spec": {"deep": {"er": [1, 2]}}})
    assert project_node(source, shape) == source


def test_project_node_mapping_elements_without_item_shape_become_empty():
    shape = SequenceShape()
    result = project_node(from_native([{"a": 1}, "leaf", [{"b": 2}]]), shape)
    assert to_native(result) == [{}, "leaf", [{}]]


def test_project_node_returns_new_nodes():
    source = from_native({"a": 1, "b": 2})
    project_node(source, extract_shape(from_native({"a": 0})))
    assert isinstance(source, MappingNode) and source.keys() == ["a", "b"]


# --- Text Projection Tests ---


def test_empty_source_and_template():
    assert project_by_template("", "") == ""
    assert project_by_template("", "key1: value1\nkey2: value2") == ""


def test_empty_template_returns_source_verbatim():
    source = "key1: value1\nkey2: value2\nkey3: value3"
    assert project_by_template(source, "") == source


def test_blank_source_and_template():
    assert project_by_template("  \n\t\n", "key1: value1") == ""
    source = "key1: value1\n"
    assert project_by_template(source, " \n") == source


def test_prunes_unknown_keys_json():
    result = project_by_template('{"a":1,"b":2,"c":3}', '{"a":0,"b":0}', fmt=DocumentFormat.JSON)
    assert result == '{"a":1,"b":2}'


def test_prunes_unknown_keys_yaml():
    source = "key1: value1\nkey2: value2\nkey3: value3\nextraKey: extraValue\n"
    template = "key1: template1\nkey2: template2\n"
    assert project_by_template(source, template) == "key1: value1\nkey2: value2\n"


def test_stencils_list_items():
    result = project_by_template(
        '{"items":[{"n":"x","v":1,"extra":"y"},{"n":"z","v":2}]}',
        '{"items":[{"n":"t","v":0}]}',
        fmt=DocumentFormat.JSON,
    )
    assert result == '{"items":[{"n":"x","v":1},{"n":"z","v":2}]}'


def test_nested_maps():
    source = (
        "rootKey:\n  nestedKey1: value1\n  nestedKey2: value2\n  extraNested: extraValue\n"
        "otherRoot:\n  nested: value\nextraRoot: shouldBeFiltered\n"
    )
    template = "rootKey:\n  nestedKey1: t\n  nestedKey2: t\notherRoot:\n  nested: t\n"
    expected = "rootKey:\n  nestedKey1: value1\n  nestedKey2: value2\notherRoot:\n  nested: value\n"
    assert project_by_template(source, template) == expected


def test_arrays_of_maps():
    source = (
        "items:\n"
        "  - name: item1\n    value: 100\n    extraField: shouldBeFiltered\n"
        "  - name: item2\n    value: 200\n    extraField: shouldBeFiltered\n"
        "topLevel: keep\n"
    )
    template = "items:\n  - name: template\n    value: template\ntopLevel: template\n"
    expected = "items:\n  - name: item1\n    value: 100\n  - name: item2\n    value: 200\ntopLevel: keep\n"
    assert project_by_template(source, template) == expected


def test_mixed_scalar_and_nested_values():
    source = (
        "scalarKey: scalarValue\nnestedKey:\n  nested1: value1\n  nested2: value2\n"
        "arrayKey:\n  - item1\n  - item2\nextraScalar: filtered\nextraNested:\n  shouldBe: filtered\n"
    )
    template = "scalarKey: t\nnestedKey:\n  nested1: t\narrayKey:\n  - t\n"
    expected = "scalarKey: scalarValue\nnestedKey:\n  nested1: value1\narrayKey:\n  - item1\n  - item2\n"
    assert project_by_template(source, template) == expected


def test_nested_lists_inside_list_items():
    source = (
        "monitors:\n"
        "  - title: Monitor 1\n    severity: critical\n    extra: filtered\n"
        "    queries:\n      - dataType: metrics\n        operator: eq\n        extraQueryField: filtered\n"
        "  - title: Monitor 2\n    severity: warning\n"
    )
    template = (
        "monitors:\n  - title: t\n    severity: t\n"
        "    queries:\n      - dataType: t\n        operator: t\n"
    )
    expected = (
        "monitors:\n"
        "  - title: Monitor 1\n    severity: critical\n"
        "    queries:\n      - dataType: metrics\n        operator: eq\n"
        "  - title: Monitor 2\n    severity: warning\n"
    )
    assert project_by_template(source, template) == expected


def test_empty_template_sequence_empties_list_objects():
    source = "items:\n  - name: item1\n    value: 100\n  - name: item2\n    value: 200\n"
    assert project_by_template(source, "items: []\n") == "items:\n  - {}\n  - {}\n"


def test_empty_template_sequence_keeps_scalar_items():
    assert project_by_template("tags: [a, b]\n", "tags: []\n") == "tags:\n  - a\n  - b\n"


def test_keeps_source_key_order():
    assert project_by_template("b: 1\na: 2\nc: 3\n", "a: 0\nb: 0\n") == "b: 1\na: 2\n"


def test_leaf_values_are_not_rewritten():
    assert project_by_template("interval: 5m0s\n", "interval: 5m\n") == "interval: 5m0s\n"


def test_invalid_source():
    with pytest.raises(ParseError) as exc_info:
        project_by_template("invalid: yaml: [unclosed bracket\nmalformed", "valid: yaml")
    assert exc_info.value.label == "source"
    assert "failed to parse source" in str(exc_info.value)


def test_invalid_template():
    with pytest.raises(ParseError) as exc_info:
        project_by_template("valid: yaml", "invalid: yaml: [unclosed bracket\nmalformed")
    assert exc_info.value.label == "template"
