"""
System Tools
============

Always-available tools that act on the application itself:
- system_navigate: switch to another functional sector
- architect_generate_process: generate a structured workflow
"""

from sovereign.tools import Tool, ToolSchema
from sovereign.tools.results import NavPayload, TablePayload, ToolResult
from sovereign.tools.state import AppMode, WorkflowType, get_app_state
from sovereign.utils.logger import Logger

logger = Logger("SystemTools")


# ==============================================================================
# Tool: Navigate
# ==============================================================================

async def _navigate(params: dict) -> ToolResult:
    """Switch the application to the requested sector."""
    target = str(params.get("target", "")).strip()

    try:
        mode = AppMode(target.upper())
    except ValueError:
        return ToolResult.failure("system_navigate", f"Sector {target} not found in lattice.")

    get_app_state().set_mode(mode)
    return ToolResult.ok(
        "system_navigate",
        NavPayload(target=mode.value, message=f"Redirected to {target} sector."),
    )


navigate_tool = Tool(
    schema=ToolSchema(
        name="system_navigate",
        description="Navigate the OS infrastructure to a specific functional sector.",
        parameters={
            "type": "object",
            "properties": {
                "target": {
                    "type": "string",
                    "description": "Target OS sector (e.g., DASHBOARD, CODE_STUDIO, PROCESS_MAP, MEMORY_CORE)"
                }
            },
            "required": ["target"]
        },
    ),
    handler=_navigate,
)


# ==============================================================================
# Tool: Generate Process
# ==============================================================================

async def _generate_process(params: dict) -> ToolResult:
    """Generate a workflow for a directive."""
    description = str(params.get("description", "")).strip()
    raw_type = str(params.get("type", "")).strip().upper()

    if not description:
        return ToolResult.failure("architect_generate_process", "Description is required")

    try:
        workflow_type = WorkflowType(raw_type)
    except ValueError:
        allowed = ", ".join(t.value for t in WorkflowType)
        return ToolResult.failure(
            "architect_generate_process",
            f"Unknown process type {raw_type or '(empty)'}; expected one of {allowed}",
        )

    steps = await get_app_state().generate_workflow(description, workflow_type)
    logger.info(f"Generated {workflow_type.value} workflow with {len(steps)} steps")
    return ToolResult.ok("architect_generate_process", TablePayload(rows=steps))


generate_process_tool = Tool(
    schema=ToolSchema(
        name="architect_generate_process",
        description="Generate a structured workflow or PARA drive organization system based on a directive.",
        parameters={
            "type": "object",
            "properties": {
                "description": {
                    "type": "string",
                    "description": "Natural language description of the process or organization needed."
                },
                "type": {
                    "type": "string",
                    "enum": [t.value for t in WorkflowType],
                    "description": "The domain of the generated process."
                }
            },
            "required": ["description", "type"]
        },
    ),
    handler=_generate_process,
)


TOOLS = [navigate_tool, generate_process_tool]
