"""
Context Compiler
================

Runs the processor pipeline and assembles the working context for a turn.

The compiler is responsible for:
1. Running every processor in its configured order
2. Isolating processor failures so one bad source never blocks a turn
3. Collecting system instructions into a single buffer

Default pipeline (see build_default_compiler):
    system instructions -> knowledge layers -> tool schemas -> facts
    -> relevant memory -> active files -> recent history

Example:
    compiler = build_default_compiler()
    compiled = await compiler.compile(session, memory, artifacts, scope)
    compiled.history             # list[WorkingContext]
    compiled.system_instruction  # str
"""

import asyncio
from typing import Sequence

from sovereign.context.knowledge import KnowledgeLayerProcessor
from sovereign.context.models import CompiledContext, CurrentScope, WorkingContext
from sovereign.context.processors import (
    ArtifactProcessor,
    ContextProcessor,
    FactProcessor,
    RecencyProcessor,
    RelevanceProcessor,
    SystemInstructionProcessor,
    ToolSchemaProcessor,
)
from sovereign.memory.artifacts import ArtifactCollection
from sovereign.memory.layers import LayerCatalog
from sovereign.memory.long_term import MemoryStore
from sovereign.memory.session import Event
from sovereign.utils.config import Config, get_config
from sovereign.utils.logger import Logger

logger = Logger("ContextCompiler")


class ContextCompiler:
    """
    Compiles working context from an ordered list of processors.

    Each SystemInstructionProcessor contributes `instruction + "\\n"` to the
    system instruction. Every other processor contributes its entries to
    the history, in pipeline order. A processor that raises is logged and
    contributes nothing.

    With parallel=True the non-instruction processors run concurrently,
    but their output is still assembled in configured order.
    """

    def __init__(self, processors: Sequence[ContextProcessor], parallel: bool = False):
        self.processors = list(processors)
        self.parallel = parallel

    async def _run(
        self,
        processor: ContextProcessor,
        session: Sequence[Event],
        memory: MemoryStore,
        artifacts: ArtifactCollection,
        scope: CurrentScope
    ) -> list[WorkingContext]:
        """Run one processor, turning a failure into an empty contribution."""
        try:
            return await processor.process(session, memory, artifacts, scope)
        except Exception as e:
            logger.child(processor.name).error("Processor failed", e)
            return []

    async def compile(
        self,
        session: Sequence[Event],
        memory: MemoryStore,
        artifacts: ArtifactCollection,
        scope: CurrentScope
    ) -> CompiledContext:
        """
        Compile the working context for one turn.

        Args:
            session: The session event log
            memory: Long-term memory to query
            artifacts: Active files and tool schemas
            scope: Parameters of the current turn

        Returns:
            CompiledContext; its history never contains the current message
        """
        compiled = CompiledContext()

        for processor in self.processors:
            if isinstance(processor, SystemInstructionProcessor):
                compiled.system_instruction += processor.instruction + "\n"

        history_processors = [
            p for p in self.processors
            if not isinstance(p, SystemInstructionProcessor)
        ]

        if self.parallel:
            results = await asyncio.gather(*[
                self._run(p, session, memory, artifacts, scope)
                for p in history_processors
            ])
        else:
            results = []
            for processor in history_processors:
                results.append(await self._run(processor, session, memory, artifacts, scope))

        for entries in results:
            compiled.history.extend(entries)

        logger.debug(
            f"Compiled {len(compiled.history)} entries from "
            f"{len(self.processors)} processors"
        )
        return compiled


def build_default_compiler(
    config: Config | None = None,
    catalog: LayerCatalog | None = None
) -> ContextCompiler:
    """
    Assemble the standard processor pipeline.

    Args:
        config: Configuration to read budgets from (defaults to get_config())
        catalog: Knowledge layer catalog (defaults to the static layers)

    Returns:
        A ready-to-use ContextCompiler
    """
    settings = (config or get_config()).context

    processors: list[ContextProcessor] = [
        SystemInstructionProcessor(instruction)
        for instruction in settings.system_instructions
    ]
    processors.extend([
        KnowledgeLayerProcessor(catalog),
        ToolSchemaProcessor(),
        FactProcessor(
            threshold=settings.fact_confidence_threshold,
            limit=settings.fact_limit,
        ),
        RelevanceProcessor(limit=settings.relevance_limit),
        ArtifactProcessor(char_limit=settings.artifact_char_limit),
        RecencyProcessor(max_count=settings.recency_count),
    ])

    return ContextCompiler(processors, parallel=settings.parallel_processors)
