"""Unit tests for the tool registry and built-in tools."""

from __future__ import annotations

import httpx
import pytest

from sovereign.errors import CapabilityNotFoundError, SchemaNotFoundError
from sovereign.memory.layers import BUILDER_PROTOCOL, CRYPTO_CONTEXT
from sovereign.tools import (
    Tool,
    ToolRegistry,
    ToolResult,
    ToolSchema,
    register_default_tools,
)
from sovereign.tools import github_tools
from sovereign.tools.results import ChartPayload, MessagePayload, ToolStatus, UIHint
from sovereign.tools.state import AppMode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _tool(name: str, layer: str | None = None, handler=None) -> Tool:
    async def default_handler(args: dict) -> ToolResult:
        return ToolResult.ok(name, MessagePayload(message="done"))

    return Tool(
        schema=ToolSchema(name=name, description=f"{name} tool"),
        handler=handler or default_handler,
        layer=layer,
    )


# ---------------------------------------------------------------------------
# ToolResult
# ---------------------------------------------------------------------------


class TestToolResult:
    def test_hint_follows_payload(self):
        result = ToolResult.ok("chart", ChartPayload(series=[{"x": 1, "y": 2}], x_key="x", y_key="y"))

        assert result.ui_hint == UIHint.CHART
        assert result.success is True

    def test_failure_has_error_data(self):
        result = ToolResult.failure("nav", "Sector VOID not found in lattice.")

        assert result.status == ToolStatus.ERROR
        assert result.ui_hint is None
        assert result.data == {"error": "Sector VOID not found in lattice."}
        assert result.to_message() == "Error: Sector VOID not found in lattice."


# ---------------------------------------------------------------------------
# ToolRegistry
# ---------------------------------------------------------------------------


class TestToolRegistry:
    def test_register_rejects_duplicates(self):
        registry = ToolRegistry()
        registry.register(_tool("a"))

        with pytest.raises(ValueError):
            registry.register(_tool("a"))

    def test_declarations_gate_on_layers(self):
        registry = ToolRegistry()
        registry.register(_tool("global"))
        registry.register(_tool("builder", layer=BUILDER_PROTOCOL))
        registry.register(_tool("crypto", layer=CRYPTO_CONTEXT))

        assert [s.name for s in registry.declarations()] == ["global"]
        assert [s.name for s in registry.declarations({CRYPTO_CONTEXT})] == ["global", "crypto"]

    def test_get_schema_is_strict(self):
        with pytest.raises(SchemaNotFoundError):
            ToolRegistry().get_schema("missing")

    @pytest.mark.asyncio
    async def test_execute_unknown_tool_raises(self):
        with pytest.raises(CapabilityNotFoundError) as exc_info:
            await ToolRegistry().execute("unknown_tool", {})

        assert str(exc_info.value) == "Capability [unknown_tool] not found in registry."

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_error_result(self):
        async def explode(args: dict) -> ToolResult:
            raise RuntimeError("kaboom")

        registry = ToolRegistry()
        registry.register(_tool("boom", handler=explode))

        result = await registry.execute("boom", {})

        assert result.status == ToolStatus.ERROR
        assert result.error == "kaboom"

    def test_register_default_tools_is_idempotent(self, app_state):
        registry = ToolRegistry()
        register_default_tools(registry)
        register_default_tools(registry)

        assert registry.list_names() == [
            "system_navigate",
            "architect_generate_process",
            "bigquery_query",
            "github_repo_scan",
            "ethers_balance_check",
        ]


# ---------------------------------------------------------------------------
# Built-in tools
# ---------------------------------------------------------------------------


class TestSystemTools:
    @pytest.mark.asyncio
    async def test_navigate_success(self, registry, app_state):
        result = await registry.execute("system_navigate", {"target": "DASHBOARD"})

        assert result.status == ToolStatus.SUCCESS
        assert result.ui_hint == UIHint.NAV
        assert result.data == {"target": "DASHBOARD", "message": "Redirected to DASHBOARD sector."}
        assert app_state.mode == AppMode.DASHBOARD

    @pytest.mark.asyncio
    async def test_navigate_is_case_insensitive(self, registry, app_state):
        result = await registry.execute("system_navigate", {"target": "code_studio"})

        assert result.success
        assert app_state.mode == AppMode.CODE_STUDIO

    @pytest.mark.asyncio
    async def test_navigate_unknown_sector(self, registry, app_state):
        result = await registry.execute("system_navigate", {"target": "VOID"})

        assert result.status == ToolStatus.ERROR
        assert result.error == "Sector VOID not found in lattice."
        assert app_state.navigation_log == []

    @pytest.mark.asyncio
    async def test_generate_process(self, registry, app_state):
        result = await registry.execute(
            "architect_generate_process",
            {"description": "Organize my drive", "type": "DRIVE_ORGANIZATION"},
        )

        assert result.ui_hint == UIHint.TABLE
        assert [row["phase"] for row in result.data] == ["Projects", "Areas", "Resources", "Archives"]
        assert app_state.workflows[0]["description"] == "Organize my drive"

    @pytest.mark.asyncio
    async def test_generate_process_rejects_unknown_type(self, registry):
        result = await registry.execute(
            "architect_generate_process", {"description": "x", "type": "PAINTING"}
        )

        assert result.status == ToolStatus.ERROR


class TestDataAndCryptoTools:
    @pytest.mark.asyncio
    async def test_bigquery_returns_rows(self, registry, app_state):
        result = await registry.execute("bigquery_query", {"query": "SELECT * FROM users"})

        assert result.ui_hint == UIHint.TABLE
        assert len(result.data) == 3
        assert app_state.query_log == [("SELECT * FROM users", None)]

    @pytest.mark.asyncio
    async def test_bigquery_passes_project(self, registry, app_state):
        await registry.execute("bigquery_query", {"query": "SELECT 1", "projectId": "sovereign-prod"})

        assert app_state.query_log == [("SELECT 1", "sovereign-prod")]

    @pytest.mark.asyncio
    async def test_balance_check(self, registry):
        address = "0x" + "A" * 40

        result = await registry.execute("ethers_balance_check", {"address": address})

        assert result.ui_hint == UIHint.STAT
        assert result.data == {"address": address, "eth": "1.25", "usd": "$4,100.00"}

    @pytest.mark.asyncio
    async def test_balance_check_rejects_bad_address(self, registry):
        result = await registry.execute("ethers_balance_check", {"address": "0x123"})

        assert result.status == ToolStatus.ERROR


class TestGitHubTools:
    @pytest.mark.asyncio
    async def test_repo_scan(self, registry, monkeypatch):
        responses = {
            "/repos/octo/repo": {
                "default_branch": "main",
                "open_issues_count": 4,
                "stargazers_count": 12,
                "pushed_at": "2026-01-01T00:00:00Z",
            },
            "/repos/octo/repo/branches?per_page=100": [{"name": "main"}, {"name": "dev"}],
        }

        async def fake_request(endpoint: str):
            return responses.get(endpoint)

        monkeypatch.setattr(github_tools, "_make_github_request", fake_request)

        result = await registry.execute("github_repo_scan", {"repo": "https://github.com/octo/repo.git"})

        assert result.ui_hint == UIHint.STAT
        assert result.data["repo"] == "octo/repo"
        assert result.data["active_branches"] == 2
        assert result.data["open_issues"] == 4

    @pytest.mark.asyncio
    async def test_repo_scan_network_error(self, registry, monkeypatch):
        async def fake_request(endpoint: str):
            raise httpx.ConnectError("unreachable")

        monkeypatch.setattr(github_tools, "_make_github_request", fake_request)

        result = await registry.execute("github_repo_scan", {"repo": "octo/repo"})

        assert result.status == ToolStatus.ERROR
        assert "unreachable" in result.error

    @pytest.mark.asyncio
    async def test_repo_scan_rejects_bad_format(self, registry):
        result = await registry.execute("github_repo_scan", {"repo": "just-a-name"})

        assert result.status == ToolStatus.ERROR
