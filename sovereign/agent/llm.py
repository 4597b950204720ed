"""
LLM Boundary
============

The single seam between the runtime and a language model service.

    response = await llm.generate(LLMRequest(
        prompt="Navigate to the dashboard",
        history=compiled.history,
        system_instruction=compiled.system_instruction,
        tools=registry.declarations(active_layers),
    ))

    response.text        # str | None
    response.tool_calls  # list[ToolCall]

A synthesis request carries the negotiated call and its result in
`tool_exchange`, so the model can explain what the tool returned.

OpenAIChatClient maps the request onto the Chat Completions API:
- model -> assistant
- function -> assistant, content prefixed with "[function]"
- tool_exchange -> assistant tool_calls message, then a tool message
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from sovereign.context.models import Role, WorkingContext
from sovereign.errors import LLMServiceError
from sovereign.tools import ToolSchema
from sovereign.tools.results import ToolResult
from sovereign.utils.config import get_config, require_openai_key
from sovereign.utils.logger import Logger

logger = Logger("LLM")


@dataclass(frozen=True)
class ToolCall:
    """
    A tool call requested by the model.

    Attributes:
        id: The tool call ID (for matching results)
        name: The tool name
        arguments: Parsed arguments dict
    """
    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolExchange:
    """A negotiated tool call together with the result it produced."""
    call: ToolCall
    result: ToolResult


@dataclass
class LLMRequest:
    """
    Everything the model sees for one call.

    Attributes:
        prompt: The current user message
        history: Compiled working context (never contains the prompt)
        system_instruction: Text for the system channel
        tools: Declarations the model may call
        tool_exchange: Prior call and result, for synthesis requests
    """
    prompt: str
    history: list[WorkingContext] = field(default_factory=list)
    system_instruction: str = ""
    tools: list[ToolSchema] = field(default_factory=list)
    tool_exchange: ToolExchange | None = None


@dataclass
class LLMResponse:
    """Text and/or tool calls returned by the model."""
    text: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)


class LLMClient(ABC):
    """A language model service."""

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Run one model call.

        Raises:
            LLMServiceError: If the service call fails
        """


# ==============================================================================
# OpenAI
# ==============================================================================

def _to_openai_message(entry: WorkingContext) -> dict:
    """Map one history entry onto a chat message."""
    if entry.role == Role.MODEL:
        return {"role": "assistant", "content": entry.content}
    if entry.role == Role.FUNCTION:
        return {"role": "assistant", "content": f"[function] {entry.content}"}
    return {"role": entry.role.value, "content": entry.content}


def build_messages(request: LLMRequest) -> list[dict]:
    """
    Format a request as messages for the Chat Completions API.

    Args:
        request: The request to format

    Returns:
        List of message dicts ready for the API
    """
    messages = []

    if request.system_instruction:
        messages.append({"role": "system", "content": request.system_instruction})

    messages.extend(_to_openai_message(entry) for entry in request.history)
    messages.append({"role": "user", "content": request.prompt})

    exchange = request.tool_exchange
    if exchange is not None:
        messages.append({
            "role": "assistant",
            "content": None,
            "tool_calls": [{
                "id": exchange.call.id,
                "type": "function",
                "function": {
                    "name": exchange.call.name,
                    "arguments": json.dumps(exchange.call.arguments),
                },
            }],
        })
        messages.append({
            "role": "tool",
            "tool_call_id": exchange.call.id,
            "content": exchange.result.to_message(),
        })

    return messages


def parse_tool_calls(message: Any) -> list[ToolCall]:
    """
    Parse tool calls from an OpenAI response message.

    Arguments that are not a valid JSON object are replaced with {}.

    Args:
        message: The `choices[0].message` of a chat completion

    Returns:
        List of parsed ToolCall objects
    """
    tool_calls = []

    for tc in message.tool_calls or []:
        try:
            arguments = json.loads(tc.function.arguments or "{}")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse tool arguments: {e}")
            arguments = {}

        if not isinstance(arguments, dict):
            logger.warning(f"Ignoring non-object arguments for {tc.function.name}")
            arguments = {}

        tool_calls.append(ToolCall(id=tc.id, name=tc.function.name, arguments=arguments))

    logger.debug(f"Parsed {len(tool_calls)} tool calls")
    return tool_calls


class OpenAIChatClient(LLMClient):
    """
    LLMClient backed by the OpenAI Chat Completions API.

    Example:
        llm = OpenAIChatClient()                      # key and model from config
        llm = OpenAIChatClient(client=fake_client)    # tests
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: AsyncOpenAI | None = None
    ):
        """
        Initialize the client.

        Args:
            api_key: OpenAI API key (defaults to config)
            model: Chat model name (defaults to config)
            client: Pre-built AsyncOpenAI client
        """
        config = get_config()

        if client is None:
            client = AsyncOpenAI(api_key=api_key or require_openai_key(config))

        self.client = client
        self.model = model or config.openai.model

        logger.info(f"LLM client initialized with model: {self.model}")

    async def generate(self, request: LLMRequest) -> LLMResponse:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": build_messages(request),
        }
        if request.tools:
            kwargs["tools"] = [schema.to_openai_function() for schema in request.tools]
            kwargs["tool_choice"] = "auto"

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            logger.error("Chat completion failed", e)
            raise LLMServiceError(str(e)) from e

        if not response.choices:
            raise LLMServiceError("Model returned no choices")

        message = response.choices[0].message
        return LLMResponse(text=message.content, tool_calls=parse_tool_calls(message))
