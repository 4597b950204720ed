"""
Tool Results
============

The standardized result of running a tool.

Every result names its tool and a status. Successful results carry a
typed payload; the payload variant decides how a front end should render
it (the "UI hint"):

    TABLE   -> TablePayload(rows)
    STAT    -> StatPayload(metrics)
    MESSAGE -> MessagePayload(message)
    NAV     -> NavPayload(target, message)
    CHART   -> ChartPayload(series, x_key, y_key)

Failed results carry an error message and no payload.

The `data` view is what gets sent back to the LLM for synthesis.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union


class ToolStatus(str, Enum):
    """Outcome of a tool call."""
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class UIHint(str, Enum):
    """How a result should be presented."""
    TABLE = "TABLE"
    STAT = "STAT"
    MESSAGE = "MESSAGE"
    NAV = "NAV"
    CHART = "CHART"


@dataclass(frozen=True)
class TablePayload:
    """Row-oriented data."""
    rows: list[dict[str, Any]]
    hint: ClassVar[UIHint] = UIHint.TABLE

    def to_data(self) -> list[dict[str, Any]]:
        return [dict(row) for row in self.rows]


@dataclass(frozen=True)
class StatPayload:
    """A set of named metrics."""
    metrics: dict[str, Any]
    hint: ClassVar[UIHint] = UIHint.STAT

    def to_data(self) -> dict[str, Any]:
        return dict(self.metrics)


@dataclass(frozen=True)
class MessagePayload:
    """A plain message."""
    message: str
    hint: ClassVar[UIHint] = UIHint.MESSAGE

    def to_data(self) -> dict[str, Any]:
        return {"message": self.message}


@dataclass(frozen=True)
class NavPayload:
    """A navigation to another application mode."""
    target: str
    message: str
    hint: ClassVar[UIHint] = UIHint.NAV

    def to_data(self) -> dict[str, Any]:
        return {"target": self.target, "message": self.message}


@dataclass(frozen=True)
class ChartPayload:
    """A plottable series."""
    series: list[dict[str, Any]]
    x_key: str
    y_key: str
    hint: ClassVar[UIHint] = UIHint.CHART

    def to_data(self) -> dict[str, Any]:
        return {
            "series": [dict(point) for point in self.series],
            "x_key": self.x_key,
            "y_key": self.y_key,
        }


ToolPayload = Union[TablePayload, StatPayload, MessagePayload, NavPayload, ChartPayload]


@dataclass(frozen=True)
class ToolResult:
    """
    Standardized result from tool execution.

    Attributes:
        tool_name: The tool that produced the result
        status: SUCCESS or ERROR
        payload: Typed payload for successful results
        error: Error message for failed results

    Example:
        result = ToolResult.ok("system_navigate", NavPayload("DASHBOARD", "Redirected."))
        result.ui_hint   # UIHint.NAV

        failed = ToolResult.failure("system_navigate", "Sector VOID not found in lattice.")
        failed.data      # {"error": "Sector VOID not found in lattice."}
    """
    tool_name: str
    status: ToolStatus
    payload: ToolPayload | None = None
    error: str | None = None

    @classmethod
    def ok(cls, tool_name: str, payload: ToolPayload) -> "ToolResult":
        """Build a successful result."""
        return cls(tool_name=tool_name, status=ToolStatus.SUCCESS, payload=payload)

    @classmethod
    def failure(cls, tool_name: str, error: str) -> "ToolResult":
        """Build a failed result."""
        return cls(tool_name=tool_name, status=ToolStatus.ERROR, error=error)

    @property
    def success(self) -> bool:
        return self.status == ToolStatus.SUCCESS

    @property
    def ui_hint(self) -> UIHint | None:
        """Rendering hint derived from the payload variant."""
        return self.payload.hint if self.payload is not None else None

    @property
    def data(self) -> Any:
        """The result data handed back to the LLM."""
        if self.payload is not None:
            return self.payload.to_data()
        if self.error is not None:
            return {"error": self.error}
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "tool_name": self.tool_name,
            "status": self.status.value,
            "data": self.data,
            "ui_hint": self.ui_hint.value if self.ui_hint else None,
        }

    def to_message(self) -> str:
        """Format as a message for the LLM."""
        if self.success:
            return json.dumps(self.data, default=str)
        return f"Error: {self.error}"
