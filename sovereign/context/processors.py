"""
Context Processors
==================

Independent units that each turn the turn's sources into zero or more
working-context entries.

    process(session, memory, artifacts, scope) -> list[WorkingContext]

Processors never share mutable state. Their only ordering dependency is
their position in the compiler's pipeline. A processor that raises is
logged by the compiler and contributes nothing.

Processors:
- RecencyProcessor: tail of the session log as conversation history
- RelevanceProcessor: long-term memory fragments relevant to the message
- ArtifactProcessor: inlined content of active user files
- ToolSchemaProcessor: schemas of the tools active this turn
- FactProcessor: high-confidence research facts
- SystemInstructionProcessor: instruction text for the system channel
- KnowledgeLayerProcessor (knowledge.py): active policy layers
"""

import binascii
import json
from abc import ABC, abstractmethod
from typing import Sequence
from urllib.parse import urlparse

from sovereign.context.models import CurrentScope, FactChunk, Role, WorkingContext
from sovereign.memory.artifacts import ArtifactCollection
from sovereign.memory.long_term import MemoryStore
from sovereign.memory.session import Event, EventKind
from sovereign.utils.logger import Logger

logger = Logger("ContextProcessor")


class ContextProcessor(ABC):
    """The contract every context processor implements."""

    name: str = "ContextProcessor"

    @abstractmethod
    async def process(
        self,
        session: Sequence[Event],
        memory: MemoryStore,
        artifacts: ArtifactCollection,
        scope: CurrentScope
    ) -> list[WorkingContext]:
        """Produce this processor's entries for the turn."""


# ==============================================================================
# Recency (short-term memory)
# ==============================================================================

EVENT_ROLES: dict[EventKind, Role] = {
    EventKind.USER_MESSAGE: Role.USER,
    EventKind.MODEL_RESPONSE: Role.MODEL,
    EventKind.TOOL_CALL: Role.FUNCTION,
    EventKind.TOOL_RESULT: Role.FUNCTION,
    # Notes and errors stay in-band so the model sees them
    EventKind.SYSTEM_NOTE: Role.USER,
    EventKind.ERROR: Role.USER,
}


class RecencyProcessor(ContextProcessor):
    """
    Maps the last `max_count` session events to history entries.

    Chronological order is preserved; a session of length L yields
    exactly min(max_count, L) entries.
    """

    name = "RecencyProcessor"

    def __init__(self, max_count: int = 10):
        self.max_count = max_count

    async def process(self, session, memory, artifacts, scope) -> list[WorkingContext]:
        if self.max_count <= 0 or len(session) == 0:
            return []

        recent = list(session)[-self.max_count:]
        return [
            WorkingContext(role=EVENT_ROLES.get(event.kind, Role.MODEL), content=event.content)
            for event in recent
        ]


# ==============================================================================
# Relevance (long-term memory / RAG)
# ==============================================================================

class RelevanceProcessor(ContextProcessor):
    """
    Retrieves memory fragments relevant to the current message.

    Emits a single user entry:

        RELEVANT KNOWLEDGE RETRIEVED:
        [MEMORY_0]: [ARTIFACT: qubic.txt] Summary: ...
        [MEMORY_1]: ...
    """

    name = "RelevanceProcessor"

    def __init__(self, limit: int = 3):
        self.limit = limit

    async def process(self, session, memory, artifacts, scope) -> list[WorkingContext]:
        fragments = await memory.query(scope.current_message, self.limit)
        if not fragments:
            return []

        block = "\n".join(
            f"[MEMORY_{i}]: {fragment}"
            for i, fragment in enumerate(fragments[:self.limit])
        )
        return [WorkingContext(role=Role.USER, content=f"RELEVANT KNOWLEDGE RETRIEVED:\n{block}")]


# ==============================================================================
# Artifacts (active files)
# ==============================================================================

class ArtifactProcessor(ContextProcessor):
    """
    Inlines the content of active user files.

    Each file contributes at most `char_limit` characters. A file cut short
    gets an explicit marker line so the model knows it is not seeing all
    of it:

        --- START FILE: report.csv ---
        <first 5000 characters>
        [TRUNCATED: showing first 5000 of 18234 characters]
        --- END FILE ---
    """

    name = "ArtifactProcessor"

    def __init__(self, char_limit: int = 5000):
        self.char_limit = char_limit

    def render(self, name: str, text: str | None) -> str:
        """Wrap one file's content in START/END markers."""
        if text is None:
            body = "(Undecodable Data)"
        elif not text:
            body = "(No Data)"
        elif len(text) > self.char_limit:
            body = (
                f"{text[:self.char_limit]}\n"
                f"[TRUNCATED: showing first {self.char_limit} of {len(text)} characters]"
            )
        else:
            body = text
        return f"--- START FILE: {name} ---\n{body}\n--- END FILE ---"

    async def process(self, session, memory, artifacts, scope) -> list[WorkingContext]:
        files = await artifacts.get_active_artifacts()
        if not files:
            return []

        blocks = []
        for file in files:
            try:
                text = file.decode()
            except (binascii.Error, ValueError) as e:
                logger.warning(f"Could not decode artifact {file.name}: {e}")
                text = None
            blocks.append(self.render(file.name, text))

        content = "\n\n".join(blocks)
        return [WorkingContext(role=Role.USER, content=f"ACTIVE WORKSPACE FILES:\n{content}")]


# ==============================================================================
# Tool schemas (capability injection)
# ==============================================================================

class ToolSchemaProcessor(ContextProcessor):
    """
    Injects the schema of every tool active this turn.

    A lookup that fails or returns an empty schema is logged and skipped;
    it never blocks the turn.
    """

    name = "ToolSchemaProcessor"

    async def process(self, session, memory, artifacts, scope) -> list[WorkingContext]:
        entries = []

        for tool_name in scope.active_tools:
            try:
                schema = await artifacts.get_schema(tool_name)
            except Exception as e:
                logger.warning(f"Could not inject schema for {tool_name}: {e}")
                continue

            if not schema:
                logger.warning(f"Skipping empty schema for {tool_name}")
                continue

            entries.append(WorkingContext(
                role=Role.SYSTEM,
                content=f"Available Tool Definition for {tool_name}:\n{json.dumps(schema, indent=2)}",
            ))
            logger.debug(f"Injected schema for: {tool_name}")

        return entries


# ==============================================================================
# Facts (research compilation)
# ==============================================================================

def _source_label(source: str) -> str:
    """Host of a URL source, or the source as given."""
    parsed = urlparse(source)
    return parsed.netloc or source


class FactProcessor(ContextProcessor):
    """
    Compiles high-confidence research facts into one system entry.

    Facts at or below `threshold` are dropped; the rest are sorted by
    descending confidence and capped at `limit`.
    """

    name = "FactProcessor"

    def __init__(self, threshold: float = 0.6, limit: int = 10):
        self.threshold = threshold
        self.limit = limit

    def select(self, facts: Sequence[FactChunk]) -> list[FactChunk]:
        """Filter, sort and cap the facts."""
        kept = [f for f in facts if f.confidence > self.threshold]
        kept.sort(key=lambda f: f.confidence, reverse=True)
        return kept[:self.limit]

    async def process(self, session, memory, artifacts, scope) -> list[WorkingContext]:
        facts = self.select(scope.facts)
        if not facts:
            return []

        lines = "\n---\n".join(
            f"[FACT ID: {f.id[-4:]}] CONF: {f.confidence:.2f} | "
            f"SRC: {_source_label(f.source)} | FACT: {f.fact}"
            for f in facts
        )
        return [WorkingContext(
            role=Role.SYSTEM,
            content=f"HIGH-CONFIDENCE RESEARCH COMPILATION (TOP {len(facts)} VERIFIABLE FACTS):\n{lines}",
        )]


# ==============================================================================
# System instruction
# ==============================================================================

class SystemInstructionProcessor(ContextProcessor):
    """
    Carries instruction text for the system channel.

    Emits no history entries. The compiler reads `instruction` directly
    and appends it to the system instruction buffer.
    """

    name = "SystemInstructionProcessor"

    def __init__(self, instruction: str):
        self.instruction = instruction

    async def process(self, session, memory, artifacts, scope) -> list[WorkingContext]:
        return []
