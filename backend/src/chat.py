"""Append-only chat transcript replayed to the model as context"""

import json
from datetime import datetime
from typing import Iterable, List, Optional

from src.models import ChangeRecord, ChatMessage, HistoryMessage


def _serialize_changes(changes: Optional[List[ChangeRecord]]) -> list:
    return [
        change.model_dump(by_alias=True, exclude_none=True) for change in changes or []
    ]


class ChatSession:
    """Ordered user/assistant turns. Messages are never edited or removed."""

    def __init__(self, messages: Iterable[ChatMessage] = ()):
        self._messages: List[ChatMessage] = list(messages)

    @classmethod
    def from_history(cls, history: Optional[List[HistoryMessage]]) -> "ChatSession":
        """Rebuild a session from the history a client sends with each request"""
        session = cls()
        for entry in history or []:
            session._messages.append(
                ChatMessage(
                    role=entry.role,
                    content=entry.content,
                    code_changes=entry.code_changes,
                    suggestion=entry.suggestion,
                    timestamp="",
                )
            )
        return session

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    def __len__(self):
        return len(self._messages)

    def add_user_message(self, content: str) -> ChatMessage:
        return self._append(ChatMessage(role="user", content=content, timestamp=_now()))

    def add_assistant_message(
        self,
        content: str,
        code_changes: Optional[List[ChangeRecord]] = None,
        suggestion: Optional[str] = None,
    ) -> ChatMessage:
        return self._append(
            ChatMessage(
                role="assistant",
                content=content,
                code_changes=code_changes,
                suggestion=suggestion,
                timestamp=_now(),
            )
        )

    def _append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    def to_model_context(self) -> List[dict]:
        """Project the transcript into chat-completion messages.

        Assistant turns are re-serialized as the JSON the model produced, so it
        can refer back to its own earlier code changes.
        """
        context = []
        for message in self._messages:
            if message.role == "user":
                context.append({"role": "user", "content": message.content})
                continue
            payload = {
                "explanation": message.content,
                "codeChanges": _serialize_changes(message.code_changes),
                "suggestion": message.suggestion or "",
            }
            context.append({"role": "assistant", "content": json.dumps(payload)})
        return context


def _now() -> str:
    return datetime.now().isoformat()
