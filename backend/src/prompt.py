import re
from typing import List, Optional

from src.models import OpenFile, SnapshotFile

system_prompt = """<role>
You are a coding assistant that builds small websites out of plain HTML, CSS and JavaScript.
</role>

<behavior>
- ALWAYS produce code, never a plan.
- A site is made of at least three files: index.html, style.css, script.js.
- Every file you return must be complete and working: return the FULL new content of the file, not a diff.
- To remove a file, return it with the action "delete" and an empty newContent.
</behavior>

<output_format>
CRITICAL: You MUST respond with ONLY valid JSON. No markdown, no text before or after the JSON.

{
  "explanation": "Short description of what you did",
  "codeChanges": [
    {"fileName": "index.html", "newContent": "ESCAPED CODE", "action": "create"},
    {"fileName": "style.css", "newContent": "ESCAPED CODE", "action": "create"},
    {"fileName": "script.js", "newContent": "ESCAPED CODE", "action": "create"}
  ],
  "suggestion": "One possible next improvement"
}

- "action" is one of "create", "update", "delete".
- IMPORTANT: All newlines within "newContent" MUST be escaped as \\n
- IMPORTANT: All double quotes within "newContent" MUST be escaped as \\"
- Prefer single quotes inside JavaScript to keep escaping simple.
</output_format>"""

user_prompt = """CURRENT PROJECT STATE:
{FILES}{OPEN_FILE}

REQUEST: {MESSAGE}

Respond with the JSON object now."""

PLACEHOLDER = re.compile(r"\{(FILES|OPEN_FILE|MESSAGE)\}")


def describe_files(files: Optional[List[SnapshotFile]]) -> str:
    if not files:
        return "New project - no files yet.\n"
    lines = ["Existing files:"]
    for file in files:
        lines.append(f"- {file.name} ({file.language}, {len(file.content)} characters)")
    return "\n".join(lines) + "\n"


def describe_open_file(current_file: Optional[OpenFile]) -> str:
    if current_file is None:
        return ""
    return (
        f"\nCurrently open file: {current_file.name}\n"
        f"```{current_file.language}\n{current_file.content}\n```\n"
    )


def build_user_prompt(
    message: str,
    all_files: Optional[List[SnapshotFile]] = None,
    current_file: Optional[OpenFile] = None,
) -> str:
    # single pass: file contents may contain braces or placeholder text
    parts = {
        "FILES": describe_files(all_files),
        "OPEN_FILE": describe_open_file(current_file),
        "MESSAGE": message,
    }
    return PLACEHOLDER.sub(lambda m: parts[m.group(1)], user_prompt)
