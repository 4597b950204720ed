"""
Tool Registry
=============

Maps tool identifiers to locally-executable handlers and their declared
schemas.

Each tool has:
- A schema: name, description, and a JSON-schema parameter object
- A handler: async function (args) -> ToolResult
- An optional gating layer: the tool is only offered to the model while
  that knowledge layer is active

Registry contract:
- Exactly one handler per tool id (duplicate registration is an error)
- Executing an unknown id raises CapabilityNotFoundError to the caller
- A handler that raises is reported as an ERROR result, never swallowed

Tool Categories:
1. System tools: navigation, workflow generation
2. Data tools: warehouse queries
3. GitHub tools: repository scans
4. Crypto tools: on-chain balance checks
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable

from sovereign.errors import CapabilityNotFoundError, SchemaNotFoundError
from sovereign.tools.results import (
    ChartPayload,
    MessagePayload,
    NavPayload,
    StatPayload,
    TablePayload,
    ToolPayload,
    ToolResult,
    ToolStatus,
    UIHint,
)
from sovereign.utils.logger import Logger

logger = Logger("ToolRegistry")

ToolHandler = Callable[[dict[str, Any]], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSchema:
    """
    Declared interface of a tool.

    Attributes:
        name: Unique tool identifier
        description: What the tool does (shown to the model)
        parameters: JSON schema object with "properties" and "required"
    """
    name: str
    description: str
    parameters: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )

    @property
    def required(self) -> list[str]:
        return list(self.parameters.get("required", []))

    def to_dict(self) -> dict:
        """Convert to a plain schema object."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    def to_openai_function(self) -> dict:
        """Convert to OpenAI function calling format."""
        return {
            "type": "function",
            "function": self.to_dict(),
        }


@dataclass(frozen=True)
class Tool:
    """
    A registered capability.

    Attributes:
        schema: The declared schema
        handler: Async function that runs the tool
        layer: Knowledge layer that must be active for the tool to be
            offered, or None for always-available tools

    Example:
        async def navigate(args: dict) -> ToolResult:
            return ToolResult.ok("system_navigate", NavPayload(args["target"], "Done."))

        tool = Tool(
            schema=ToolSchema(
                name="system_navigate",
                description="Navigate to a sector",
                parameters={
                    "type": "object",
                    "properties": {"target": {"type": "string"}},
                    "required": ["target"],
                },
            ),
            handler=navigate,
        )
    """
    schema: ToolSchema
    handler: ToolHandler
    layer: str | None = None

    @property
    def name(self) -> str:
        return self.schema.name


class ToolRegistry:
    """
    Central registry for all available tools.

    A handler that raises becomes an ERROR result. Side effects it applied
    before raising are not rolled back and only surface through the
    synthesis text.

    Example:
        registry = ToolRegistry()
        registry.register(tool)

        declarations = registry.declarations({"BUILDER_PROTOCOL"})
        result = await registry.execute("system_navigate", {"target": "DASHBOARD"})
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> Tool | None:
        """Get a tool by name, or None if not found."""
        return self._tools.get(name)

    def get_all(self) -> list[Tool]:
        """Get all registered tools in registration order."""
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        """Get list of all tool names."""
        return list(self._tools.keys())

    def get_schema(self, name: str) -> ToolSchema:
        """
        Strict schema lookup.

        Raises:
            SchemaNotFoundError: If the tool is not registered
        """
        tool = self._tools.get(name)
        if tool is None:
            raise SchemaNotFoundError(name)
        return tool.schema

    def declarations(self, active_layers: Iterable[str] = ()) -> list[ToolSchema]:
        """
        Schemas the model may call this turn.

        Always-available tools are offered unconditionally; gated tools
        only while their layer is active.

        Args:
            active_layers: Ids of the active knowledge layers

        Returns:
            Schemas in registration order
        """
        layers = set(active_layers)
        return [
            tool.schema for tool in self._tools.values()
            if tool.layer is None or tool.layer in layers
        ]

    async def execute(self, name: str, args: dict[str, Any]) -> ToolResult:
        """
        Execute a tool by name.

        Args:
            name: The tool name
            args: Arguments to pass to the handler

        Returns:
            The handler's ToolResult, or an ERROR result if it raised

        Raises:
            CapabilityNotFoundError: If no tool has this name
        """
        tool = self.get(name)
        if tool is None:
            raise CapabilityNotFoundError(name)

        try:
            logger.info(f"Executing tool: {name}")
            return await tool.handler(args)
        except Exception as e:
            logger.error(f"Tool execution failed: {name}", e)
            return ToolResult.failure(name, str(e))


# Global tool registry instance
tool_registry = ToolRegistry()


def register_default_tools(registry: ToolRegistry | None = None) -> ToolRegistry:
    """
    Register the built-in tools.

    Tool modules are imported here rather than at module load so they can
    import this package without a cycle. Tools already present are left
    alone, so calling this twice is harmless.

    Args:
        registry: Registry to populate (defaults to the global one)

    Returns:
        The populated registry
    """
    from sovereign.tools import crypto_tools, data_tools, github_tools, system_tools

    registry = registry if registry is not None else tool_registry

    for tool in (
        *system_tools.TOOLS,
        *data_tools.TOOLS,
        *github_tools.TOOLS,
        *crypto_tools.TOOLS,
    ):
        if registry.get(tool.name) is None:
            registry.register(tool)

    logger.info(f"Registered {len(registry.list_names())} tools")
    return registry


__all__ = [
    "Tool",
    "ToolHandler",
    "ToolSchema",
    "ToolRegistry",
    "tool_registry",
    "register_default_tools",
    "ToolResult",
    "ToolStatus",
    "ToolPayload",
    "UIHint",
    "TablePayload",
    "StatPayload",
    "MessagePayload",
    "NavPayload",
    "ChartPayload",
]
