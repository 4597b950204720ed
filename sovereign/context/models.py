"""
Context Models
==============

Types that flow through context compilation.

- WorkingContext: one entry of the history handed to the model
- CurrentScope: per-turn parameters, read-only to processors
- FactChunk: a research fact with a confidence score
- GroundingSources: the session, memory and artifacts a compile draws on
- CompiledContext: the compiler's output
"""

from dataclasses import dataclass, field
from enum import Enum

from sovereign.memory.artifacts import ArtifactCollection
from sovereign.memory.long_term import MemoryStore
from sovereign.memory.session import SessionLog


class Role(str, Enum):
    """Conversation roles understood by the LLM boundary."""
    USER = "user"
    MODEL = "model"
    SYSTEM = "system"
    FUNCTION = "function"


@dataclass(frozen=True)
class WorkingContext:
    """A single history entry. Built fresh on every compile."""
    role: Role
    content: str


@dataclass(frozen=True)
class FactChunk:
    """
    A fact produced by a research task.

    Attributes:
        id: Fact identifier
        fact: The fact text
        confidence: Confidence in [0, 1]
        source: Where the fact came from (usually a URL)
    """
    id: str
    fact: str
    confidence: float
    source: str


@dataclass(frozen=True)
class CurrentScope:
    """
    Parameters of the current turn.

    Attributes:
        current_message: The message being answered
        active_tools: Tool ids relevant to this turn
        mode: Active application mode
        active_layers: Ids of the knowledge layers toggled on
        facts: Research facts available to this turn
    """
    current_message: str
    active_tools: tuple[str, ...] = ()
    mode: str = "DASHBOARD"
    active_layers: frozenset[str] = frozenset()
    facts: tuple[FactChunk, ...] = ()


@dataclass
class GroundingSources:
    """The inputs a compile draws on besides the scope."""
    session: SessionLog
    memory: MemoryStore
    artifacts: ArtifactCollection


@dataclass
class CompiledContext:
    """
    Result of a compile.

    Attributes:
        history: Ordered entries; never includes the current message
        system_instruction: Concatenated system instructions
    """
    history: list[WorkingContext] = field(default_factory=list)
    system_instruction: str = ""
