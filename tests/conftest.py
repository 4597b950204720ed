"""Shared fixtures: scripted LLM, in-memory vault and application state."""

from __future__ import annotations

import pytest

from sovereign.agent.llm import LLMClient, LLMRequest, LLMResponse, ToolCall
from sovereign.memory import ArtifactCollection, InMemoryVault, LongTermMemory, SessionLog
from sovereign.tools import ToolRegistry, register_default_tools
from sovereign.tools.state import LocalAppState, set_app_state
from sovereign.utils.config import reset_config


# ---------------------------------------------------------------------------
# LLM
# ---------------------------------------------------------------------------


class ScriptedLLM(LLMClient):
    """Returns queued responses in order and records every request."""

    def __init__(self, *responses: LLMResponse | Exception):
        self.responses = list(responses)
        self.requests: list[LLMRequest] = []

    async def generate(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("ScriptedLLM ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def text_response(text: str | None) -> LLMResponse:
    return LLMResponse(text=text)


def tool_response(name: str, arguments: dict | None = None, call_id: str = "call_1") -> LLMResponse:
    return LLMResponse(tool_calls=[ToolCall(id=call_id, name=name, arguments=arguments or {})])


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Every test starts from default configuration."""
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_MODEL",
        "OPENAI_EMBEDDING_MODEL",
        "CONTEXT_RECENCY_COUNT",
        "CONTEXT_RELEVANCE_LIMIT",
        "CONTEXT_ARTIFACT_CHAR_LIMIT",
        "CONTEXT_FACT_THRESHOLD",
        "CONTEXT_FACT_LIMIT",
        "CONTEXT_PARALLEL",
        "SYSTEM_INSTRUCTION",
        "VAULT_DIR",
        "GITHUB_TOKEN",
        "AGENT_DEFAULT_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def app_state():
    state = LocalAppState(balances={
        "0x" + "a" * 40: {"eth": "1.25", "usd": "$4,100.00"},
    })
    set_app_state(state)
    yield state
    set_app_state(None)


# ---------------------------------------------------------------------------
# Memory and tools
# ---------------------------------------------------------------------------


@pytest.fixture
def vault() -> InMemoryVault:
    return InMemoryVault()


@pytest.fixture
def memory(vault) -> LongTermMemory:
    return LongTermMemory(vault)


@pytest.fixture
def session() -> SessionLog:
    return SessionLog()


@pytest.fixture
def registry(app_state) -> ToolRegistry:
    return register_default_tools(ToolRegistry())


@pytest.fixture
def artifacts(registry) -> ArtifactCollection:
    return ArtifactCollection.from_registry(registry)
