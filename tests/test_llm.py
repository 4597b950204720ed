"""Unit tests for the OpenAI chat client adapter."""

from __future__ import annotations

import json
from types import SimpleNamespace

import openai
import pytest

from sovereign.agent.llm import (
    LLMRequest,
    OpenAIChatClient,
    ToolCall,
    ToolExchange,
    build_messages,
    parse_tool_calls,
)
from sovereign.context import Role, WorkingContext
from sovereign.errors import LLMServiceError
from sovereign.tools import ToolSchema
from sovereign.tools.results import NavPayload, ToolResult


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _completion(content: str | None = None, tool_calls: list | None = None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _raw_call(call_id: str, name: str, arguments: str):
    return SimpleNamespace(id=call_id, function=SimpleNamespace(name=name, arguments=arguments))


class FakeCompletions:
    def __init__(self, result):
        self.result = result
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _fake_client(result) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(result)))


# ---------------------------------------------------------------------------
# Message building
# ---------------------------------------------------------------------------


class TestBuildMessages:
    def test_roles_are_mapped(self):
        request = LLMRequest(
            prompt="now",
            history=[
                WorkingContext(Role.USER, "u"),
                WorkingContext(Role.MODEL, "m"),
                WorkingContext(Role.FUNCTION, "f"),
                WorkingContext(Role.SYSTEM, "s"),
            ],
            system_instruction="Be terse.\n",
        )

        messages = build_messages(request)

        assert messages == [
            {"role": "system", "content": "Be terse.\n"},
            {"role": "user", "content": "u"},
            {"role": "assistant", "content": "m"},
            {"role": "assistant", "content": "[function] f"},
            {"role": "system", "content": "s"},
            {"role": "user", "content": "now"},
        ]

    def test_no_system_message_when_empty(self):
        assert build_messages(LLMRequest(prompt="hi")) == [{"role": "user", "content": "hi"}]

    def test_tool_exchange_appends_call_and_result(self):
        call = ToolCall(id="call_1", name="system_navigate", arguments={"target": "DASHBOARD"})
        result = ToolResult.ok("system_navigate", NavPayload("DASHBOARD", "Redirected."))

        messages = build_messages(LLMRequest(prompt="go", tool_exchange=ToolExchange(call, result)))

        assistant, tool = messages[-2:]
        assert assistant["role"] == "assistant"
        assert assistant["tool_calls"][0]["id"] == "call_1"
        assert json.loads(assistant["tool_calls"][0]["function"]["arguments"]) == {"target": "DASHBOARD"}
        assert tool == {
            "role": "tool",
            "tool_call_id": "call_1",
            "content": json.dumps({"target": "DASHBOARD", "message": "Redirected."}),
        }


# ---------------------------------------------------------------------------
# Tool call parsing
# ---------------------------------------------------------------------------


class TestParseToolCalls:
    def test_parses_arguments(self):
        message = SimpleNamespace(tool_calls=[_raw_call("c1", "system_navigate", '{"target": "DASHBOARD"}')])

        assert parse_tool_calls(message) == [
            ToolCall(id="c1", name="system_navigate", arguments={"target": "DASHBOARD"})
        ]

    def test_invalid_json_becomes_empty_arguments(self):
        message = SimpleNamespace(tool_calls=[_raw_call("c1", "system_navigate", "{not json")])

        assert parse_tool_calls(message)[0].arguments == {}

    def test_no_tool_calls(self):
        assert parse_tool_calls(SimpleNamespace(tool_calls=None)) == []


# ---------------------------------------------------------------------------
# OpenAIChatClient
# ---------------------------------------------------------------------------


class TestOpenAIChatClient:
    @pytest.mark.asyncio
    async def test_generate_text(self):
        client = _fake_client(_completion(content="hello"))
        llm = OpenAIChatClient(model="gpt-test", client=client)

        response = await llm.generate(LLMRequest(prompt="hi"))

        assert response.text == "hello"
        assert response.tool_calls == []
        sent = client.chat.completions.calls[0]
        assert sent["model"] == "gpt-test"
        assert "tools" not in sent

    @pytest.mark.asyncio
    async def test_generate_with_tools(self):
        client = _fake_client(_completion(tool_calls=[_raw_call("c1", "system_navigate", "{}")]))
        llm = OpenAIChatClient(client=client)
        schema = ToolSchema(name="system_navigate", description="Navigate")

        response = await llm.generate(LLMRequest(prompt="go", tools=[schema]))

        assert response.tool_calls[0].name == "system_navigate"
        sent = client.chat.completions.calls[0]
        assert sent["tools"] == [schema.to_openai_function()]
        assert sent["tool_choice"] == "auto"

    @pytest.mark.asyncio
    async def test_service_error_is_wrapped(self):
        llm = OpenAIChatClient(client=_fake_client(openai.OpenAIError("quota exceeded")))

        with pytest.raises(LLMServiceError, match="quota exceeded"):
            await llm.generate(LLMRequest(prompt="hi"))

    def test_requires_key_without_client(self):
        with pytest.raises(ValueError, match="api_key"):
            OpenAIChatClient()
