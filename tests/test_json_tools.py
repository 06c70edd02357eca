"""
Tests for structured-text validation helpers.
"""
import json

import pytest

from mathtutor.utils.json_tools import (
    INVALID_PROBLEM_JSON,
    escape_for_embedding,
    extract_json_object,
    get_property,
    has_properties,
    is_well_formed,
    loads_permissive,
    reconstruct,
    strip_code_fences,
)


@pytest.mark.parametrize("text", [
    '{"a": 1}',
    '{"a": 1,}',
    '{"a": [1, 2,],}',
    '{\n  // comment\n  "a": 1\n}',
    '{"a": /* inline */ 1}',
    '[1, 2, 3]',
])
def test_is_well_formed_accepts_permissive_json(text):
    assert is_well_formed(text)


@pytest.mark.parametrize("text", ["", "   ", "not json", '{"a": 1', "{'a': 1}", None])
def test_is_well_formed_rejects_garbage(text):
    assert not is_well_formed(text)


def test_relaxation_leaves_string_contents_alone():
    data = loads_permissive('{"url": "http://x.org/a,}", "b": 2,}')
    assert data == {"url": "http://x.org/a,}", "b": 2}


def test_loads_permissive_raises_value_error():
    with pytest.raises(ValueError):
        loads_permissive("{nope")


def test_get_property_is_case_insensitive():
    obj = {"IsCorrect": True}
    assert get_property(obj, "isCorrect") is True
    assert get_property(obj, "missing", "default") == "default"
    assert get_property(["not", "a", "dict"], "x") is None


def test_has_properties():
    assert has_properties('{"isCorrect": false, "Feedback": "ok"}', "isCorrect", "feedback")
    assert not has_properties('{"isCorrect": true}', "isCorrect", "feedback")
    assert not has_properties('["isCorrect", "feedback"]', "isCorrect")
    assert not has_properties("garbage", "isCorrect")
    # present but null still counts as present
    assert has_properties('{"feedback": null}', "feedback")


def test_escape_for_embedding():
    assert escape_for_embedding("") == ""
    assert escape_for_embedding('say "hi"\n') == 'say \\"hi\\"\\n'
    embedded = '{"v": "' + escape_for_embedding('a "quoted" \\ path') + '"}'
    assert json.loads(embedded)["v"] == 'a "quoted" \\ path'


def test_reconstruct_fills_missing_fields():
    rebuilt = json.loads(reconstruct('{"Statement": "Solve 2x=4", "solution": 2}'))
    assert rebuilt == {"statement": "Solve 2x=4", "solution": "2", "explanation": ""}


def test_reconstruct_drops_non_text_values():
    rebuilt = json.loads(reconstruct('{"statement": "S", "solution": ["x"], "explanation": null}'))
    assert rebuilt == {"statement": "S", "solution": "", "explanation": ""}


def test_reconstruct_invalid_input_yields_sentinel():
    assert reconstruct("no json here") == INVALID_PROBLEM_JSON
    assert reconstruct("[1, 2]") == INVALID_PROBLEM_JSON
    sentinel = json.loads(INVALID_PROBLEM_JSON)
    assert sentinel["statement"] == "Invalid problem format"
    assert sentinel["solution"] == "N/A"


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'


def test_extract_json_object_from_prose():
    text = 'Extra text {"statement":"Solve 2x=4","solution":"x=2","explanation":"divide by 2"} trailing text'
    assert json.loads(extract_json_object(text))["solution"] == "x=2"


def test_extract_json_object_skips_unparseable_braces():
    text = 'Use {x | x > 0} as the domain. {"guidance": "try factoring"}'
    assert json.loads(extract_json_object(text)) == {"guidance": "try factoring"}


def test_extract_json_object_handles_braces_inside_strings():
    text = 'Here: {"statement": "Simplify {a} + {b}", "solution": "a+b", "explanation": "-"} done'
    assert json.loads(extract_json_object(text))["statement"] == "Simplify {a} + {b}"


def test_extract_json_object_without_object_returns_cleaned_text():
    assert extract_json_object("  just words  ") == "just words"
    assert extract_json_object("") == ""
