"""
Data Tools
==========

Warehouse access, offered only while the Builder Protocol layer is active.
"""

from sovereign.memory.layers import BUILDER_PROTOCOL
from sovereign.tools import Tool, ToolSchema
from sovereign.tools.results import TablePayload, ToolResult
from sovereign.tools.state import get_app_state
from sovereign.utils.logger import Logger

logger = Logger("DataTools")


async def _bigquery_query(params: dict) -> ToolResult:
    """Run a SQL query against the warehouse."""
    query = str(params.get("query", "")).strip()
    if not query:
        return ToolResult.failure("bigquery_query", "Query is required")

    project_id = params.get("projectId") or None

    logger.info(f"Executing: {query}")
    rows = await get_app_state().query_warehouse(query, project_id)
    return ToolResult.ok("bigquery_query", TablePayload(rows=rows))


bigquery_tool = Tool(
    schema=ToolSchema(
        name="bigquery_query",
        description="Execute deep data mining against the system BigQuery warehouse.",
        parameters={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Structured SQL query for the BigQuery environment."
                },
                "projectId": {
                    "type": "string",
                    "description": "Optional project to run the query in."
                }
            },
            "required": ["query"]
        },
    ),
    handler=_bigquery_query,
    layer=BUILDER_PROTOCOL,
)


TOOLS = [bigquery_tool]
