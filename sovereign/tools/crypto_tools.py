"""
Crypto Tools
============

On-chain lookups, offered only while the Crypto Context layer is active.
"""

import re

from sovereign.memory.layers import CRYPTO_CONTEXT
from sovereign.tools import Tool, ToolSchema
from sovereign.tools.results import StatPayload, ToolResult
from sovereign.tools.state import get_app_state

EVM_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


async def _balance_check(params: dict) -> ToolResult:
    """Look up the balance of an EVM wallet."""
    address = str(params.get("address", "")).strip()
    if not EVM_ADDRESS.match(address):
        return ToolResult.failure(
            "ethers_balance_check",
            f"Invalid EVM wallet address: {address or '(empty)'}",
        )

    balance = await get_app_state().get_balance(address)
    return ToolResult.ok(
        "ethers_balance_check",
        StatPayload(metrics={"address": address, **balance}),
    )


balance_tool = Tool(
    schema=ToolSchema(
        name="ethers_balance_check",
        description="Query on-chain protocols for real-time asset balances and usd valuation.",
        parameters={
            "type": "object",
            "properties": {
                "address": {
                    "type": "string",
                    "description": "Valid EVM wallet address."
                }
            },
            "required": ["address"]
        },
    ),
    handler=_balance_check,
    layer=CRYPTO_CONTEXT,
)


TOOLS = [balance_tool]
