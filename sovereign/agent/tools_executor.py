"""
Tool Executor
=============

Runs the tool call the model negotiated.

The executor:
1. Picks the call to honour from the model's response
2. Executes it through the registry
3. Logs the outcome

Only one tool is negotiated per directive. When the model requests
several, the first is honoured and the rest are dropped with a warning.
"""

from sovereign.agent.llm import ToolCall
from sovereign.tools import ToolRegistry, ToolResult, tool_registry
from sovereign.utils.logger import Logger

logger = Logger("ToolExecutor")


class ToolExecutor:
    """
    Executes tools called by the model.

    Example:
        executor = ToolExecutor(registry)

        call = executor.select(response.tool_calls)
        if call is not None:
            result = await executor.execute_one(call)
    """

    def __init__(self, registry: ToolRegistry | None = None):
        """
        Initialize the tool executor.

        Args:
            registry: Registry to execute against (defaults to the global one)
        """
        self.registry = registry if registry is not None else tool_registry

    def select(self, tool_calls: list[ToolCall]) -> ToolCall | None:
        """
        Choose the call to honour.

        Args:
            tool_calls: Calls requested by the model, in response order

        Returns:
            The first call, or None if there are none
        """
        if not tool_calls:
            return None

        if len(tool_calls) > 1:
            dropped = ", ".join(tc.name for tc in tool_calls[1:])
            logger.warning(f"Model requested {len(tool_calls)} tools; dropping: {dropped}")

        return tool_calls[0]

    async def execute_one(self, tool_call: ToolCall) -> ToolResult:
        """
        Execute a single tool call.

        Args:
            tool_call: The tool call to execute

        Returns:
            The tool's result

        Raises:
            CapabilityNotFoundError: If the tool is not registered
        """
        result = await self.registry.execute(tool_call.name, tool_call.arguments)

        if result.success:
            logger.debug(f"Tool {tool_call.name} succeeded")
        else:
            logger.warning(f"Tool {tool_call.name} failed: {result.error}")

        return result
