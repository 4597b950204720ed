"""
Sovereign Core - Main Entry Point
=================================

Runs a single directive from the command line. It:
1. Loads configuration
2. Initializes all components (vault, memory, layers, tools, compiler)
3. Runs the directive through the agent runtime
4. Prints the answer and the tool result hint

Run with:
    python -m sovereign.main "Navigate to the dashboard"

Or after installing:
    sovereign "Check wallet 0x..." --layer CRYPTO_CONTEXT
    sovereign "Summarize this" --file notes.md
"""

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

from sovereign.utils.config import get_config
from sovereign.utils.logger import Logger

main_logger = Logger("Main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sovereign",
        description="Run one directive through the agent runtime.",
    )
    parser.add_argument("directive", help="The instruction to execute")
    parser.add_argument(
        "--layer",
        action="append",
        default=[],
        metavar="ID",
        help="Activate a knowledge layer (repeatable)",
    )
    parser.add_argument("--mode", default=None, help="Application mode for this directive")
    parser.add_argument(
        "--file",
        action="append",
        default=[],
        type=Path,
        metavar="PATH",
        help="Attach a file to the workspace (repeatable)",
    )
    return parser


async def main(argv: list[str] | None = None) -> int:
    """
    Main async entry point.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        # 1. Load configuration
        main_logger.info("Loading configuration...")
        config = get_config()

        # 2. Storage and memory
        main_logger.info("Initializing memory system...")
        from sovereign.memory import (
            ArtifactCollection,
            FileData,
            FileVault,
            LayerCatalog,
            LongTermMemory,
            SessionLog,
        )
        vault = FileVault(config.vault.directory)
        memory = LongTermMemory(vault)
        catalog = LayerCatalog(vault)

        # 3. Tools
        main_logger.info("Setting up tools...")
        from sovereign.tools import register_default_tools, tool_registry
        from sovereign.tools.state import AppMode, LocalAppState, set_app_state
        mode = (args.mode or config.agent.default_mode).upper()
        set_app_state(LocalAppState(mode=AppMode(mode) if mode in AppMode.__members__ else AppMode.DASHBOARD))
        registry = register_default_tools(tool_registry)

        files = []
        for path in args.file:
            mime_type = mimetypes.guess_type(path.name)[0] or "text/plain"
            text = await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
            files.append(FileData.from_text(path.name, text, mime_type))
        artifacts = ArtifactCollection.from_registry(registry, files)

        # 4. Runtime
        main_logger.info("Creating agent...")
        from sovereign.agent import AgentRuntime, OpenAIChatClient
        from sovereign.context import GroundingSources, build_default_compiler
        runtime = AgentRuntime(
            llm=OpenAIChatClient(),
            registry=registry,
            compiler=build_default_compiler(config, catalog),
            sources=GroundingSources(SessionLog(), memory, artifacts),
            default_mode=config.agent.default_mode,
        )

        # 5. Execute
        answer = await runtime.execute(args.directive, active_layers=args.layer, mode=mode)

    except Exception as e:
        main_logger.error("Directive failed", e)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(answer)
    result = runtime.state.last_result
    if result is not None:
        hint = result.ui_hint.value if result.ui_hint else "NONE"
        print(f"[{result.tool_name}] {result.status.value} ({hint})")
    return 0


def run():
    """
    Synchronous entry point.

    This is called when running with the `sovereign` command.
    """
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
