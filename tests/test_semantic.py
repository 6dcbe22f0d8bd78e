"""Tests for semantic comparison."""

import pytest

from semdoc.compare.semantic import (
    are_semantically_equal,
    nodes_equal,
    normalize_for_comparison,
    semantic_differences,
)
from semdoc.exceptions import ParseError
from semdoc.normalize.defaults import DefaultValueRule
from semdoc.tree.codec import DocumentFormat
from semdoc.tree.models import ScalarNode, from_native, to_native


@pytest.mark.parametrize(
    "first,second,expected",
    [
        ('{"name":"test","value":123}', '{"name":"test","value":123}', True),
        ('{"name":"test","value":123}', '{"value":123,"name":"test"}', True),
        ('{"name":"test","value":123}', '{ "name" : "test" , "value" : 123 }', True),
        ('{"name":"test","value":123}', '{"name":"test","value":456}', False),
        ('{"outer":{"inner":"value","other":123}}', '{"outer":{"other":123,"inner":"value"}}', True),
        ('{"items":[1,2,3]}', '{"items":[3,2,1]}', False),
        ('{"items":[1,2]}', '{"items":[1,2,3]}', False),
        ("{}", "{}", True),
        ('{"value":null}', '{"value":null}', True),
        ('{"a":1,"b":2}', '{"b":2,"a":1}', True),
        (
            '{"spec":{"layoutType":"ordered"},"layout":[{"h":5,"w":24,"x":0,"y":0}],"widgets":[]}',
            '{"layout":[{"y":0,"x":0,"w":24,"h":5}],"spec":{"layoutType":"ordered"},"widgets":[]}',
            True,
        ),
    ],
)
def test_structural_equality(first, second, expected):
    assert are_semantically_equal(first, second) is expected


def test_durations_are_normalized():
    assert are_semantically_equal("{interval: 5m0s}", "{interval: 5m}")
    assert not are_semantically_equal("{interval: 5m}", "{interval: 10m}")
    assert are_semantically_equal("window: 1h0m0s\n", "window: 60m\n")


def test_durations_can_be_disabled():
    assert not are_semantically_equal("{interval: 5m0s}", "{interval: 5m}", durations=False)


def test_default_injection():
    declared = "title: CPU\nmodel: threshold\n"
    reported = "model: threshold\nisPaused: false\ntitle: CPU\n"
    assert are_semantically_equal(declared, reported)
    assert not are_semantically_equal(declared, reported, rules=())


def test_default_injection_does_not_hide_paused_monitor():
    assert not are_semantically_equal("title: CPU\nmodel: threshold\n", "title: CPU\nmodel: threshold\nisPaused: true\n")


def test_custom_rules():
    rules = [DefaultValueRule(frozenset({"kind"}), "replicas", 1)]
    assert are_semantically_equal("kind: web\n", "kind: web\nreplicas: 1\n", rules=rules)


def test_yaml_and_json_spellings():
    assert are_semantically_equal("a: 1\nb: [x, y]\n", '{"b": ["x", "y"], "a": 1}')


def test_scalar_categories_must_match():
    assert not are_semantically_equal("enabled: true\n", "enabled: 1\n")
    assert not are_semantically_equal("count: 1\n", "count: '1'\n")
    assert not are_semantically_equal("value: null\n", "value: ''\n")
    assert are_semantically_equal("ratio: 1\n", "ratio: 1.0\n")


def test_kind_mismatch_is_unequal():
    assert not are_semantically_equal("a: [1]\n", "a: {x: 1}\n")
    assert not are_semantically_equal("a: [1]\n", "a: 1\n")


def test_identical_text_skips_parsing():
    # Malformed but byte-identical text is equal without parsing
    assert are_semantically_equal("key: [unclosed", "key: [unclosed")


def test_parse_error_names_the_input():
    with pytest.raises(ParseError) as exc_info:
        are_semantically_equal("key: [unclosed", "key: 1")
    assert exc_info.value.label == "first"

    with pytest.raises(ParseError) as exc_info:
        are_semantically_equal("key: 1", "key: [unclosed")
    assert exc_info.value.label == "second"


def test_json_mode():
    assert are_semantically_equal('{"a": 1}', '{ "a": 1 }', fmt=DocumentFormat.JSON)
    with pytest.raises(ParseError):
        are_semantically_equal("a: 1", '{"a": 1}', fmt=DocumentFormat.JSON)


def test_nodes_equal():
    assert nodes_equal(from_native({"a": [1, {"b": None}]}), from_native({"a": [1, {"b": None}]}))
    assert not nodes_equal(ScalarNode(True), ScalarNode(1))
    assert not nodes_equal(from_native({"a": 1}), from_native({"a": 1, "b": 2}))


def test_normalize_for_comparison():
    tree = from_native({"title": "x", "model": "y", "window": "5m0s"})
    assert to_native(normalize_for_comparison(tree)) == {
        "title": "x",
        "model": "y",
        "window": "5m",
        "isPaused": False,
    }


# --- Differences Tests ---


def test_no_differences():
    assert semantic_differences("a: 1\nb: 2\n", "b: 2\na: 1\n") == []
    assert semantic_differences("same", "same") == []


def test_difference_paths():
    first = "spec:\n  queries:\n    - operator: eq\n    - operator: ne\nname: a\nold: 1\n"
    second = "spec:\n  queries:\n    - operator: eq\n    - operator: gt\nname: a\nnew: 2\n"
    assert semantic_differences(first, second) == [
        "$.spec.queries[1].operator: 'ne' vs 'gt'",
        "$.old: only in first",
        "$.new: only in second",
    ]


def test_difference_lengths_and_kinds():
    assert semantic_differences("items: [1, 2]\n", "items: [1]\n") == ["$.items: length 2 vs 1"]
    assert semantic_differences("a: [1]\n", "a: {x: 1}\n") == ["$.a: sequence vs mapping"]


def test_keys_with_the_same_text_are_a_parse_error():
    with pytest.raises(ParseError) as exc_info:
        are_semantically_equal("m: {1: a, '1': b}\n", "m: {'1': b}\n")
    assert exc_info.value.label == "first"


def test_oversized_duration_digits_do_not_raise():
    text = "x: '" + "1" * 5000 + "s'\n"
    assert are_semantically_equal(text, text + "\n")
