"""Shared fixtures: a fresh store and a scripted model client per test"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from src.db import MemoryStore
from tests.helpers import FakeLLM


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def empty_store():
    return MemoryStore(seed=False)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(store, fake_llm):
    return TestClient(create_app(store=store, client=fake_llm))
