import json

import pytest

from src.normalizer import (
    PLACEHOLDER_FILE_NAME,
    ResponseParseError,
    normalize,
    strip_code_fence,
)


def test_plain_json():
    raw = json.dumps(
        {
            "explanation": "Built a page",
            "codeChanges": [
                {"fileName": "index.html", "newContent": "<h1>Hi</h1>", "action": "update"}
            ],
            "suggestion": "Add a footer",
        }
    )
    result = normalize(raw)
    assert result.explanation == "Built a page"
    assert result.suggestion == "Add a footer"
    assert len(result.code_changes) == 1
    assert result.code_changes[0].file_name == "index.html"
    assert result.code_changes[0].action == "update"
    assert result.code_changes[0].file_id is None


@pytest.mark.parametrize(
    "raw",
    [
        '```json\n{"explanation": "ok", "codeChanges": []}\n```',
        '```\n{"explanation": "ok", "codeChanges": []}\n```',
        'Here you go:\n```json\n{"explanation": "ok", "codeChanges": []}\n```\nEnjoy',
    ],
)
def test_fenced_json(raw):
    result = normalize(raw)
    assert result.explanation == "ok"
    assert result.code_changes == []


def test_fence_around_content_with_inner_fence():
    inner = {"explanation": "docs", "codeChanges": [
        {"fileName": "README.md", "newContent": "```py\nprint(1)\n```", "action": "create"}
    ]}
    raw = "```json\n" + json.dumps(inner) + "\n```"
    result = normalize(raw)
    assert result.code_changes[0].new_content == "```py\nprint(1)\n```"


def test_strip_code_fence_leaves_plain_text():
    assert strip_code_fence("  {\"a\": 1}  ") == '{"a": 1}'


def test_non_json_degrades_to_explanation():
    raw = "Sorry, I can't help with that."
    result = normalize(raw)
    assert result.explanation == raw
    assert result.code_changes == []
    assert result.suggestion is None


def test_non_object_json_degrades():
    result = normalize("[1, 2, 3]")
    assert result.explanation == "[1, 2, 3]"
    assert result.code_changes == []


def test_strict_mode_raises_typed_error():
    with pytest.raises(ResponseParseError) as excinfo:
        normalize("not json", strict=True)
    assert excinfo.value.raw_text == "not json"


def test_repairs_invalid_escapes():
    raw = '{"explanation": "ok", "codeChanges": [{"fileName": "a.css", "newContent": "a::after { content: \\\'x\\\' }", "action": "create"}]}'
    result = normalize(raw)
    assert result.explanation == "ok"
    assert result.code_changes[0].new_content == "a::after { content: 'x' }"


@pytest.mark.parametrize("value", [None, "nope", {"fileName": "a"}, 3])
def test_code_changes_not_a_list(value):
    raw = json.dumps({"explanation": "x", "codeChanges": value})
    assert normalize(raw).code_changes == []


def test_missing_code_changes():
    assert normalize('{"explanation": "only words"}').code_changes == []


def test_entry_defaults():
    raw = json.dumps({"codeChanges": [{}, {"action": "rename", "newContent": 5}, "junk"]})
    result = normalize(raw)

    assert result.explanation == ""
    assert len(result.code_changes) == 2
    for record in result.code_changes:
        assert record.action == "create"
        assert record.file_name == PLACEHOLDER_FILE_NAME
        assert record.new_content == ""


def test_keeps_file_id_and_delete_action():
    raw = json.dumps(
        {"explanation": "", "codeChanges": [{"fileId": "abc", "fileName": "old.js", "action": "delete"}]}
    )
    record = normalize(raw).code_changes[0]
    assert record.file_id == "abc"
    assert record.action == "delete"
    assert record.new_content == ""


def test_empty_suggestion_dropped():
    raw = json.dumps({"explanation": "x", "codeChanges": [], "suggestion": ""})
    assert normalize(raw).suggestion is None


def test_bare_fence_inside_prose_is_not_unwrapped():
    raw = 'Here:\n```\n{"explanation": "ok", "codeChanges": []}\n```'
    result = normalize(raw)
    assert result.explanation == raw
    assert result.code_changes == []
