import json

import pytest

import config

from src.chat import ChatSession
from src.llm import LLMClient, LLMError, build_messages
from src.models import HistoryMessage
from src.prompt import system_prompt
from tests.helpers import change


def test_messages_are_appended_in_order():
    session = ChatSession()
    session.add_user_message("make a landing page")
    session.add_assistant_message("Done", code_changes=[change("index.html", "<h1>Hi</h1>")])
    session.add_user_message("make it blue")

    assert [m.role for m in session.messages] == ["user", "assistant", "user"]
    assert len(session) == 3
    assert all(m.timestamp for m in session.messages)


def test_messages_property_is_a_copy():
    session = ChatSession()
    session.add_user_message("hi")
    session.messages.clear()
    assert len(session) == 1


def test_model_context_reserializes_assistant_turns():
    session = ChatSession()
    session.add_user_message("build it")
    session.add_assistant_message(
        "Built", code_changes=[change("style.css", "body{}", "update")], suggestion="Add dark mode"
    )

    user, assistant = session.to_model_context()
    assert user == {"role": "user", "content": "build it"}
    assert assistant["role"] == "assistant"
    assert json.loads(assistant["content"]) == {
        "explanation": "Built",
        "codeChanges": [{"fileName": "style.css", "newContent": "body{}", "action": "update"}],
        "suggestion": "Add dark mode",
    }


def test_assistant_turn_without_changes():
    session = ChatSession()
    session.add_assistant_message("Just talking")
    (assistant,) = session.to_model_context()
    assert json.loads(assistant["content"]) == {
        "explanation": "Just talking",
        "codeChanges": [],
        "suggestion": "",
    }


def test_from_history():
    history = [
        HistoryMessage(role="user", content="hello"),
        HistoryMessage.model_validate(
            {
                "role": "assistant",
                "content": "hi",
                "codeChanges": [{"fileName": "a.js", "newContent": "1", "action": "create"}],
            }
        ),
    ]
    session = ChatSession.from_history(history)
    context = session.to_model_context()
    assert context[0] == {"role": "user", "content": "hello"}
    assert json.loads(context[1]["content"])["codeChanges"][0]["fileName"] == "a.js"
    assert ChatSession.from_history(None).to_model_context() == []


def test_build_messages_wraps_transcript():
    session = ChatSession()
    session.add_user_message("first")
    messages = build_messages(session, "second")
    assert messages[0] == {"role": "system", "content": system_prompt}
    assert messages[1] == {"role": "user", "content": "first"}
    assert messages[-1] == {"role": "user", "content": "second"}


def test_client_without_api_key_is_not_configured(monkeypatch):
    monkeypatch.setattr(config, "OPENROUTER_API_KEY", None)
    client = LLMClient()

    assert client.configured is False
    with pytest.raises(LLMError):
        client.complete([{"role": "user", "content": "hi"}])
