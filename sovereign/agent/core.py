"""
Agent Runtime
=============

Orchestrates a single directive from user input to final answer.

The runtime is the "brain" of the system. It:
1. Receives a user directive
2. Compiles grounding context (when sources are configured)
3. Calls the model with the tools offered by the active layers
4. Negotiates and executes at most one tool call
5. Asks the model to synthesize the tool result
6. Returns the final answer

Directive Lifecycle:
    IDLE
     │
     ▼
    THINKING ──── no tool call ───► RESPONDING ──► IDLE
     │
     ▼
    NEGOTIATING_TOOL
     │
     ▼
    EXECUTING
     │
     ▼
    SYNTHESIZING ─────────────────────────────────► IDLE

    Any failure or cancellation ─────────────────► ERROR

Every transition is published to subscribers as a state snapshot.
"""

import asyncio
import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Iterable

from sovereign.agent.llm import LLMClient, LLMRequest, ToolExchange
from sovereign.agent.tools_executor import ToolExecutor
from sovereign.context.compiler import ContextCompiler
from sovereign.context.models import CompiledContext, CurrentScope, FactChunk, GroundingSources
from sovereign.errors import DirectiveFailedError, RuntimeBusyError
from sovereign.memory.session import EventKind
from sovereign.tools import ToolRegistry, ToolResult, ToolSchema
from sovereign.utils.logger import Logger

logger = Logger("Agent")

FINALIZED_FALLBACK = "Directive finalized."
SYNTHESIZED_FALLBACK = "Directive synthesized."


class RuntimePhase(str, Enum):
    """Where the runtime is in the directive lifecycle."""
    IDLE = "IDLE"
    THINKING = "THINKING"
    RESPONDING = "RESPONDING"
    NEGOTIATING_TOOL = "NEGOTIATING_TOOL"
    EXECUTING = "EXECUTING"
    SYNTHESIZING = "SYNTHESIZING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class HistoryEntry:
    """
    One line of the directive's visible history.

    Attributes:
        role: "user", "model" or "tool"
        content: Text shown for the entry
        tool_name: The tool a "tool" entry refers to
    """
    role: str
    content: str
    tool_name: str | None = None


@dataclass
class AgenticState:
    """
    Observable runtime state.

    Attributes:
        phase: Current lifecycle phase
        is_thinking: True while a directive is in flight
        active_tool: Tool being negotiated or executed
        last_result: Result of the last completed tool call
        history: Entries of the current directive
        error: Message of the failure that ended the last directive
    """
    phase: RuntimePhase = RuntimePhase.IDLE
    is_thinking: bool = False
    active_tool: str | None = None
    last_result: ToolResult | None = None
    history: list[HistoryEntry] = field(default_factory=list)
    error: str | None = None

    def snapshot(self) -> "AgenticState":
        """Copy that later transitions will not mutate."""
        return replace(self, history=list(self.history))


StateListener = Callable[[AgenticState], None]


class AgentRuntime:
    """
    Runs directives against a model and a tool registry.

    Example:
        runtime = AgentRuntime(
            llm=OpenAIChatClient(),
            registry=register_default_tools(),
            compiler=build_default_compiler(),
            sources=GroundingSources(session, memory, artifacts),
        )

        runtime.subscribe(lambda state: print(state.phase))
        answer = await runtime.execute(
            "Check wallet 0xabc...",
            active_layers={"CRYPTO_CONTEXT"},
        )
    """

    def __init__(
        self,
        llm: LLMClient,
        registry: ToolRegistry | None = None,
        compiler: ContextCompiler | None = None,
        sources: GroundingSources | None = None,
        default_mode: str = "DASHBOARD"
    ):
        """
        Initialize the runtime.

        Args:
            llm: Model service
            registry: Tools the model may call (defaults to the global registry)
            compiler: Context compiler used for grounding
            sources: Session, memory and artifacts to ground on
            default_mode: Mode used when a directive does not name one
        """
        self.llm = llm
        self.executor = ToolExecutor(registry)
        self.compiler = compiler
        self.sources = sources
        self.default_mode = default_mode

        self._state = AgenticState()
        self._listeners: list[StateListener] = []
        self._in_flight = False

    @property
    def registry(self) -> ToolRegistry:
        return self.executor.registry

    @property
    def state(self) -> AgenticState:
        """Snapshot of the current state."""
        return self._state.snapshot()

    @property
    def busy(self) -> bool:
        return self._in_flight

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener for state transitions.

        Args:
            listener: Called with a snapshot after every transition

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ==========================================================================
    # State transitions
    # ==========================================================================

    def _notify(self) -> None:
        snapshot = self._state.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error("State listener failed", e)

    def _transition(self, phase: RuntimePhase, **changes) -> None:
        self._state = replace(self._state, phase=phase, **changes)
        logger.debug(f"Phase -> {phase.value}")
        self._notify()

    def _append(self, entry: HistoryEntry) -> None:
        self._state.history.append(entry)
        self._notify()

    def _record(self, kind: EventKind, content: str, tool_name: str | None = None, metadata: dict | None = None) -> None:
        """Append an event to the session log, when one is configured."""
        if self.sources is not None:
            self.sources.session.append(kind, content, tool_name=tool_name, metadata=metadata)

    # ==========================================================================
    # Directive execution
    # ==========================================================================

    async def execute(
        self,
        directive: str,
        active_layers: Iterable[str] = (),
        mode: str | None = None,
        facts: Iterable[FactChunk] = ()
    ) -> str:
        """
        Run one directive to completion.

        Args:
            directive: The user's instruction
            active_layers: Ids of the knowledge layers toggled on
            mode: Application mode (defaults to default_mode)
            facts: Research facts to ground on

        Returns:
            The final answer text

        Raises:
            RuntimeBusyError: If another directive is in flight
            DirectiveFailedError: If the directive could not complete
            asyncio.CancelledError: If the awaiting task is cancelled; the
                runtime is left in ERROR and ready for the next directive
        """
        if self._in_flight:
            raise RuntimeBusyError("A directive is already in flight")

        self._in_flight = True
        try:
            return await self._run(directive, frozenset(active_layers), mode, tuple(facts))

        except asyncio.CancelledError:
            logger.warning(f"Directive cancelled: {directive[:50]}")
            self._transition(
                RuntimePhase.ERROR,
                is_thinking=False,
                active_tool=None,
                last_result=None,
                error="Directive cancelled",
            )
            self._record(EventKind.ERROR, "Directive cancelled")
            raise

        except Exception as e:
            logger.error(f"Directive failed: {directive[:50]}", e)
            self._transition(
                RuntimePhase.ERROR,
                is_thinking=False,
                active_tool=None,
                last_result=None,
                error=str(e),
            )
            self._record(EventKind.ERROR, str(e))
            raise DirectiveFailedError(directive, e) from e

        finally:
            self._in_flight = False

    async def _ground(
        self,
        directive: str,
        declarations: list[ToolSchema],
        active_layers: frozenset[str],
        mode: str | None,
        facts: tuple[FactChunk, ...]
    ) -> CompiledContext:
        """Compile grounding context, or an empty one when none is configured."""
        if self.compiler is None or self.sources is None:
            return CompiledContext()

        scope = CurrentScope(
            current_message=directive,
            active_tools=tuple(schema.name for schema in declarations),
            mode=mode or self.default_mode,
            active_layers=active_layers,
            facts=facts,
        )
        return await self.compiler.compile(
            self.sources.session,
            self.sources.memory,
            self.sources.artifacts,
            scope,
        )

    async def _run(
        self,
        directive: str,
        active_layers: frozenset[str],
        mode: str | None,
        facts: tuple[FactChunk, ...]
    ) -> str:
        logger.info(f"Executing directive: {directive[:50]}...")

        self._state = AgenticState(
            phase=RuntimePhase.THINKING,
            is_thinking=True,
            history=[HistoryEntry("user", directive)],
        )
        self._notify()

        declarations = self.registry.declarations(active_layers)
        # Compiled before the directive is logged so history never repeats it
        compiled = await self._ground(directive, declarations, active_layers, mode, facts)
        self._record(EventKind.USER_MESSAGE, directive)

        response = await self.llm.generate(LLMRequest(
            prompt=directive,
            history=compiled.history,
            system_instruction=compiled.system_instruction,
            tools=declarations,
        ))

        call = self.executor.select(response.tool_calls)

        if call is None:
            self._transition(RuntimePhase.RESPONDING)
            text = response.text or FINALIZED_FALLBACK
            self._append(HistoryEntry("model", text))
            self._record(EventKind.MODEL_RESPONSE, text)
            self._transition(RuntimePhase.IDLE, is_thinking=False)
            return text

        self._transition(RuntimePhase.NEGOTIATING_TOOL, active_tool=call.name)
        self._append(HistoryEntry("model", f"AUTHORIZATION_REQUIRED: Negotiating tool [{call.name}]"))
        self._record(EventKind.TOOL_CALL, json.dumps(call.arguments), tool_name=call.name)

        self._transition(RuntimePhase.EXECUTING)
        result = await self.executor.execute_one(call)

        self._append(HistoryEntry(
            "tool",
            f"SIGNAL_STABLE: Result captured from [{call.name}]. Synchronizing state...",
            tool_name=call.name,
        ))
        self._record(
            EventKind.TOOL_RESULT,
            result.to_message(),
            tool_name=call.name,
            metadata={"status": result.status.value},
        )

        self._transition(RuntimePhase.SYNTHESIZING, last_result=result)
        synthesis = await self.llm.generate(LLMRequest(
            prompt=directive,
            history=compiled.history,
            system_instruction=compiled.system_instruction,
            tool_exchange=ToolExchange(call=call, result=result),
        ))

        text = synthesis.text or SYNTHESIZED_FALLBACK
        self._append(HistoryEntry("model", text))
        self._record(EventKind.MODEL_RESPONSE, text)
        self._transition(RuntimePhase.IDLE, is_thinking=False, active_tool=None)

        logger.info(f"Directive complete ({len(text)} chars)")
        return text
