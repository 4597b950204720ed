"""
Agent System
============

The agent runs directives. It:
1. Receives a user directive
2. Compiles grounding context
3. Negotiates and executes a tool call
4. Synthesizes the final answer

This module provides:
- AgentRuntime: The directive state machine
- LLMClient / OpenAIChatClient: The model service boundary
- ToolExecutor: Runs the negotiated tool call
"""

from sovereign.agent.core import AgenticState, AgentRuntime, HistoryEntry, RuntimePhase
from sovereign.agent.llm import (
    LLMClient,
    LLMRequest,
    LLMResponse,
    OpenAIChatClient,
    ToolCall,
    ToolExchange,
)
from sovereign.agent.tools_executor import ToolExecutor

__all__ = [
    "AgenticState",
    "AgentRuntime",
    "HistoryEntry",
    "LLMClient",
    "LLMRequest",
    "LLMResponse",
    "OpenAIChatClient",
    "RuntimePhase",
    "ToolCall",
    "ToolExchange",
    "ToolExecutor",
]
