"""
Coerce free-form model output into an AiChatResponse
"""

import json
import re
from typing import Any, List

from src.logger import get_logger
from src.models import AiChatResponse, ChangeRecord

logger = get_logger(__name__)

PLACEHOLDER_FILE_NAME = "untitled.txt"
VALID_ACTIONS = ("create", "update", "delete")

WRAPPING_FENCE = re.compile(r"^```[a-zA-Z]*\s*([\s\S]*?)\s*```$")
JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```")


class ResponseParseError(ValueError):
    """Raised in strict mode when the model output is not a JSON object"""

    def __init__(self, message: str, raw_text: str):
        super().__init__(message)
        self.raw_text = raw_text


def strip_code_fence(text: str) -> str:
    """Remove one level of markdown fencing around the JSON payload"""
    stripped = text.strip()
    match = WRAPPING_FENCE.match(stripped) or JSON_FENCE.search(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def _repair_json(json_text: str) -> str:
    """Fix the escaping mistakes models commonly make inside JSON strings"""
    # double-escaped quotes: \\\" -> \"
    cleaned = re.sub(r"\\\\\"", r"\"", json_text)

    # Valid JSON escapes are \" \\ \/ \b \f \n \r \t \uXXXX, drop the backslash elsewhere
    def fix_string_escapes(match):
        fixed = re.sub(r'\\([^"\\/bfnrtu])', r"\1", match.group(1))
        return f'"{fixed}"'

    return re.sub(r'"((?:[^"\\]|\\.)*)"', fix_string_escapes, cleaned)


def _load(json_text: str) -> Any:
    try:
        return json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parsing failed, attempting to fix: {e}")
        result = json.loads(_repair_json(json_text))
        logger.info("Successfully cleaned malformed JSON")
        return result


def _coerce_change(entry: dict) -> ChangeRecord:
    action = entry.get("action")
    if action not in VALID_ACTIONS:
        action = "create"

    file_name = entry.get("fileName")
    if not isinstance(file_name, str) or not file_name:
        file_name = PLACEHOLDER_FILE_NAME

    content = entry.get("newContent")
    if not isinstance(content, str):
        content = ""

    file_id = entry.get("fileId")
    if not isinstance(file_id, str) or not file_id:
        file_id = None

    return ChangeRecord(
        file_id=file_id, file_name=file_name, new_content=content, action=action
    )


def coerce_changes(raw_changes: Any) -> List[ChangeRecord]:
    if not isinstance(raw_changes, list):
        return []

    changes = []
    for index, entry in enumerate(raw_changes):
        if not isinstance(entry, dict):
            logger.warning(f"Dropping code change #{index}: not an object")
            continue
        changes.append(_coerce_change(entry))
    return changes


def normalize(text: str, strict: bool = False) -> AiChatResponse:
    """Turn raw model text into an AiChatResponse.

    Unparseable output degrades to the raw text as the explanation with no
    code changes. With strict=True a ResponseParseError is raised instead.
    """
    json_text = strip_code_fence(text)

    try:
        parsed = _load(json_text)
        if not isinstance(parsed, dict):
            raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    except (json.JSONDecodeError, ValueError) as e:
        logger.error(f"Failed to parse AI response: {e}")
        logger.debug(f"Raw response (first 500 chars): {text[:500]}")
        if strict:
            raise ResponseParseError(f"Invalid JSON response from AI: {e}", text) from e
        return AiChatResponse(explanation=text, code_changes=[])

    explanation = parsed.get("explanation")
    if not isinstance(explanation, str):
        explanation = ""

    suggestion = parsed.get("suggestion")
    if not isinstance(suggestion, str) or not suggestion:
        suggestion = None

    changes = coerce_changes(parsed.get("codeChanges"))
    logger.info(f"Parsed AI response with {len(changes)} code changes")

    return AiChatResponse(
        explanation=explanation, code_changes=changes, suggestion=suggestion
    )
