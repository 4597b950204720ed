"""
Session Log
===========

The append-only record of one conversation or task.

Every turn is stored as an immutable Event: user messages, model
responses, tool calls and their results, system notes and errors. The
log is the input of the RecencyProcessor, which turns its tail into
conversation history for the model.

Design Notes:
- Events are frozen dataclasses; once appended they never change
- The log owns its events for the lifetime of the conversation
- Nothing is trimmed on append; bounding happens at compile time
"""

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


class EventKind(str, Enum):
    """What a session event records."""
    USER_MESSAGE = "user_message"
    MODEL_RESPONSE = "model_response"
    TOOL_CALL = "tool_call"
    TOOL_RESULT = "tool_result"
    SYSTEM_NOTE = "system_note"
    ERROR = "error"


@dataclass(frozen=True)
class Event:
    """
    A single session turn.

    Attributes:
        id: Unique event id
        timestamp: Unix time the event was appended
        kind: What the event records
        content: The raw text payload
        tool_name: Tool involved, for tool_call/tool_result events
        metadata: Optional extra data
    """
    id: str
    timestamp: float
    kind: EventKind
    content: str
    tool_name: str | None = None
    metadata: dict[str, Any] | None = None


class SessionLog:
    """
    Append-only event log.

    Behaves like a read-only sequence of Events, so it can be handed
    straight to the context compiler.

    Example:
        log = SessionLog()
        log.append(EventKind.USER_MESSAGE, "Open the dashboard")
        log.append(EventKind.TOOL_CALL, '{"target": "DASHBOARD"}', tool_name="system_navigate")

        len(log)       # 2
        log[-1].kind   # EventKind.TOOL_CALL
    """

    def __init__(self, events: list[Event] | None = None):
        self._events: list[Event] = list(events or [])

    def append(
        self,
        kind: EventKind | str,
        content: str,
        tool_name: str | None = None,
        metadata: dict[str, Any] | None = None
    ) -> Event:
        """
        Append a new event.

        Args:
            kind: Event kind (enum member or its string value)
            content: The payload text
            tool_name: Tool involved, if any
            metadata: Optional extra data

        Returns:
            The appended Event
        """
        event = Event(
            id=uuid.uuid4().hex,
            timestamp=time.time(),
            kind=EventKind(kind),
            content=content,
            tool_name=tool_name,
            metadata=dict(metadata) if metadata else None,
        )
        self._events.append(event)
        return event

    @property
    def events(self) -> tuple[Event, ...]:
        """All events, oldest first."""
        return tuple(self._events)

    def recent(self, count: int) -> list[Event]:
        """Get the last `count` events in chronological order."""
        if count <= 0:
            return []
        return self._events[-count:]

    def clear(self) -> None:
        """Start a fresh conversation."""
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index):
        return self._events[index]

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)
