"""
Logger Utility
==============

Context-aware logging used by every component of the runtime core.

Each module creates its own logger with a component name, so a single
directive can be followed through the compiler, the processors, the
registry and the agent runtime:

    [2026-01-31T10:30:00] [INFO] [AgentRuntime] Directive received
    [2026-01-31T10:30:00] [DEBUG] [ContextCompiler] Executing: RecencyProcessor
    [2026-01-31T10:30:01] [WARN] [ArtifactCollection] Schema not found for: weather_api

Features:
1. Log levels (DEBUG, INFO, WARNING, ERROR) filtered by LOG_LEVEL
2. Timestamped, colour-coded terminal output
3. Child loggers for nested contexts ([Compiler:Fact])
4. Optional structured data printed as JSON

Usage:
    from sovereign.utils.logger import Logger, logger

    logger.info("Runtime started")

    compiler_logger = Logger("ContextCompiler")
    compiler_logger.debug("Compiled context", {"entries": 7})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """
    Log levels with numeric values for comparison.
    Higher values = more severe.
    """
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def _get_log_level_from_env() -> LogLevel:
    """
    Parse the LOG_LEVEL environment variable.

    Returns:
        LogLevel: The configured log level, defaults to INFO
    """
    level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    return _LEVEL_NAMES.get(level_str, LogLevel.INFO)


class Logger:
    """
    A context-aware logger with colored output.

    The level is read when the logger is created, so tests can set
    LOG_LEVEL before constructing a component to see its debug output.

    Example:
        logger = Logger("ToolRegistry")
        logger.info("Registered tool: system_navigate")

        child = logger.child("Execute")
        child.debug("Invoking handler", {"args": {"target": "DASHBOARD"}})
    """

    def __init__(self, context: str = ""):
        """
        Initialize a logger with an optional context.

        Args:
            context: Prefix for all messages (e.g., "AgentRuntime", "Vault")
        """
        self.context = context
        self._min_level = _get_log_level_from_env()

    def child(self, child_context: str) -> "Logger":
        """
        Create a child logger with additional context.

        Args:
            child_context: Additional context to append

        Returns:
            A new Logger whose messages show [context:child_context]
        """
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def is_enabled_for(self, level: LogLevel) -> bool:
        """Check whether messages at this level would be emitted."""
        return level >= self._min_level

    def _format_message(self, level: str, message: str, color: str) -> str:
        """
        Format a log message with timestamp, level, and context.

        Output format: [TIMESTAMP] [LEVEL] [context] message
        """
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if not self.is_enabled_for(level):
            return

        formatted = self._format_message(level_name, message, color)

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(formatted, file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a debug message. Only shown when LOG_LEVEL=DEBUG."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """
        Log a warning message.

        Warnings mark recoverable failures: a processor that contributed
        nothing, a schema lookup that fell back to an empty object.
        """
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: Exception | None = None) -> None:
        """
        Log an error message.

        Args:
            message: The error message
            error: Optional exception to include details from
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)


# Default logger instance for general use
logger = Logger("Sovereign")
