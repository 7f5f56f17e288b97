import copy
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_orchestrator
from app.main import app
from functions.registry import FunctionRegistry
from llm.openai_chat import LLMReply
from orchestration.orchestrator import Orchestrator
from schemas.conversation import FunctionCall


def text_reply(content: Optional[str]) -> LLMReply:
    return LLMReply(content=content)


def call_reply(name: str, arguments: str = "{}") -> LLMReply:
    return LLMReply(function_call=FunctionCall(name=name, arguments=arguments))


class FakeLLM:
    """Scripted chat model. The last reply repeats once the script runs out."""

    def __init__(self, replies: List[Any], configured: bool = True):
        self._replies = list(replies)
        self.configured = configured
        self.calls: List[Dict[str, Any]] = []

    async def complete(self, messages, functions):
        self.calls.append({"messages": copy.deepcopy(messages), "functions": functions})
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeBackend:
    """Records calls and answers from a route -> response table."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self._responses = responses or {}
        self._error = error
        self.calls: List[Dict[str, str]] = []

    async def call(self, route: str, arguments: str):
        self.calls.append({"route": route, "arguments": arguments})
        if self._error is not None:
            raise self._error
        return self._responses.get(route, {})


@pytest.fixture
def registry():
    return FunctionRegistry.load()


@pytest.fixture
def make_orchestrator(registry):
    def _make(llm, backend=None, max_iterations=10):
        return Orchestrator(
            llm=llm,
            backend=backend or FakeBackend(),
            registry=registry,
            max_iterations=max_iterations,
        )
    return _make


@pytest.fixture
def api_client():
    """TestClient whose orchestrator is supplied per test via `use`."""
    client = TestClient(app)

    def use(orchestrator: Orchestrator) -> TestClient:
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        return client

    yield use
    app.dependency_overrides.clear()
