import json

from src.llm import LLMError
from src.models import ChangeRecord


class FakeLLM:
    """Replays canned replies and records the messages it was sent"""

    configured = True

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def complete(self, messages):
        self.calls.append(messages)
        if not self.replies:
            raise LLMError("no reply scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def model_reply(changes, explanation="Done", suggestion=None):
    payload = {"explanation": explanation, "codeChanges": changes}
    if suggestion is not None:
        payload["suggestion"] = suggestion
    return json.dumps(payload)


def change(file_name, content="", action="create", file_id=None):
    return ChangeRecord(
        file_id=file_id, file_name=file_name, new_content=content, action=action
    )
