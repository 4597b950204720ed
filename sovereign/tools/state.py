"""
Application State Boundary
==========================

The side effects of built-in tools are confined to this boundary:
navigation between application modes, workflow generation, warehouse
queries and wallet lookups.

The host application supplies its own AppState. LocalAppState is a
self-contained implementation used by the command line entry point and
by tests.

Usage:
    from sovereign.tools.state import LocalAppState, set_app_state

    set_app_state(LocalAppState())
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from sovereign.utils.logger import Logger

logger = Logger("AppState")


class AppMode(str, Enum):
    """Functional sectors the application can navigate to."""
    DASHBOARD = "DASHBOARD"
    PROCESS_MAP = "PROCESS_MAP"
    IMAGE_GEN = "IMAGE_GEN"
    POWER_XRAY = "POWER_XRAY"
    BIBLIOMORPHIC = "BIBLIOMORPHIC"
    HARDWARE_ENGINEER = "HARDWARE_ENGINEER"
    VOICE_MODE = "VOICE_MODE"
    CODE_STUDIO = "CODE_STUDIO"
    DISCOVERY = "DISCOVERY"
    BICAMERAL = "BICAMERAL"
    MEMORY_CORE = "MEMORY_CORE"


class WorkflowType(str, Enum):
    """Domains a generated workflow can target."""
    DRIVE_ORGANIZATION = "DRIVE_ORGANIZATION"
    SYSTEM_ARCHITECTURE = "SYSTEM_ARCHITECTURE"
    AGENTIC_ORCHESTRATION = "AGENTIC_ORCHESTRATION"


class AppState(ABC):
    """Mutable application state reachable from tool handlers."""

    @property
    @abstractmethod
    def mode(self) -> AppMode:
        """The current application mode."""

    @abstractmethod
    def set_mode(self, mode: AppMode) -> None:
        """Navigate to another mode."""

    @abstractmethod
    async def generate_workflow(
        self,
        description: str,
        workflow_type: WorkflowType
    ) -> list[dict[str, Any]]:
        """Generate and store a workflow, returning its steps."""

    @abstractmethod
    async def query_warehouse(
        self,
        sql: str,
        project_id: str | None = None
    ) -> list[dict[str, Any]]:
        """Run a query against the data warehouse, in the default project unless one is given."""

    @abstractmethod
    async def get_balance(self, address: str) -> dict[str, Any]:
        """Look up the balance of a wallet address."""


_WORKFLOW_TEMPLATES: dict[WorkflowType, list[tuple[str, str]]] = {
    WorkflowType.DRIVE_ORGANIZATION: [
        ("Projects", "Collect active, deadline-bound work"),
        ("Areas", "Group ongoing responsibilities"),
        ("Resources", "File reference material by topic"),
        ("Archives", "Move inactive items out of the way"),
    ],
    WorkflowType.SYSTEM_ARCHITECTURE: [
        ("Requirements", "Capture constraints and interfaces"),
        ("Components", "Split the system into services"),
        ("Data Flow", "Define contracts between components"),
        ("Review", "Validate against the requirements"),
    ],
    WorkflowType.AGENTIC_ORCHESTRATION: [
        ("Intent", "Parse the directive into goals"),
        ("Plan", "Assign goals to agents and tools"),
        ("Execute", "Run tool calls and collect results"),
        ("Synthesize", "Merge results into a report"),
    ],
}

_SAMPLE_WAREHOUSE = [
    {"id": 1, "user": "Aris_01", "plan": "Architect", "status": "Active", "sign_up": "2023-11-20"},
    {"id": 2, "user": "Nova_Edge", "plan": "Operator", "status": "Pending", "sign_up": "2023-11-21"},
    {"id": 3, "user": "Cypher_PK", "plan": "Architect", "status": "Active", "sign_up": "2023-11-22"},
]


class LocalAppState(AppState):
    """
    In-process application state.

    Attributes:
        workflows: Workflows generated so far, newest last
        warehouse_rows: Rows returned for any warehouse query
        balances: Known wallet balances keyed by lower-cased address
        navigation_log: Every mode change, in order
        query_log: Every warehouse query as (sql, project_id)
    """

    def __init__(
        self,
        mode: AppMode = AppMode.DASHBOARD,
        warehouse_rows: list[dict[str, Any]] | None = None,
        balances: dict[str, dict[str, Any]] | None = None
    ):
        self._mode = mode
        self.workflows: list[dict[str, Any]] = []
        self.warehouse_rows = list(_SAMPLE_WAREHOUSE if warehouse_rows is None else warehouse_rows)
        self.balances = {k.lower(): v for k, v in (balances or {}).items()}
        self.navigation_log: list[AppMode] = []
        self.query_log: list[tuple[str, str | None]] = []

    @property
    def mode(self) -> AppMode:
        return self._mode

    def set_mode(self, mode: AppMode) -> None:
        logger.info(f"Mode change: {self._mode.value} -> {mode.value}")
        self._mode = mode
        self.navigation_log.append(mode)

    async def generate_workflow(
        self,
        description: str,
        workflow_type: WorkflowType
    ) -> list[dict[str, Any]]:
        steps = [
            {"step": i, "phase": phase, "action": action}
            for i, (phase, action) in enumerate(_WORKFLOW_TEMPLATES[workflow_type], start=1)
        ]
        self.workflows.append({
            "description": description,
            "type": workflow_type.value,
            "steps": steps,
        })
        return steps

    async def query_warehouse(
        self,
        sql: str,
        project_id: str | None = None
    ) -> list[dict[str, Any]]:
        logger.debug(f"Warehouse query: {sql}", {"project": project_id})
        self.query_log.append((sql, project_id))
        return [dict(row) for row in self.warehouse_rows]

    async def get_balance(self, address: str) -> dict[str, Any]:
        return dict(self.balances.get(address.lower(), {"eth": "0.00", "usd": "$0.00"}))


# Global reference to the application state (set by the host)
_app_state: AppState | None = None


def set_app_state(state: AppState | None) -> None:
    """Set the application state tools act on."""
    global _app_state
    _app_state = state


def get_app_state() -> AppState:
    """
    Get the application state.

    Raises:
        RuntimeError: If set_app_state() was never called
    """
    if _app_state is None:
        raise RuntimeError("Application state not initialized. Call set_app_state() first.")
    return _app_state
