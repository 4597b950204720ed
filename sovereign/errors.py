"""
Error Types
===========

Exceptions raised by the runtime core.

Failures fall into three groups:
- Per-processor: a context processor raised. Logged by the compiler,
  the processor contributes nothing. No exception type needed.
- Per-lookup: a missing tool schema or no memory match. Tolerant
  lookups return an empty value; strict ones raise SchemaNotFoundError.
- Per-directive: an unknown tool or a failed LLM call. The agent
  runtime ends in the ERROR phase and raises DirectiveFailedError.
"""


class SovereignError(Exception):
    """Base class for all runtime core errors."""


class CapabilityNotFoundError(SovereignError):
    """A tool id has no registered handler."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Capability [{tool_name}] not found in registry.")


class SchemaNotFoundError(SovereignError):
    """A tool schema lookup found nothing."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Schema not found for: {name}")


class RuntimeBusyError(SovereignError):
    """A directive is already in flight on this runtime."""


class LLMServiceError(SovereignError):
    """The LLM service call failed."""


class VaultError(SovereignError):
    """The record vault could not read or write a collection."""


class DirectiveFailedError(SovereignError):
    """
    A directive was aborted.

    Attributes:
        directive: The user directive that failed
        cause: The underlying exception
    """

    def __init__(self, directive: str, cause: Exception):
        self.directive = directive
        self.cause = cause
        super().__init__(f"Directive failed: {cause}")
