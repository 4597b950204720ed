"""
Sovereign Core - Agent Runtime and Context Compiler
===================================================

An agentic runtime that compiles grounded context for each directive,
negotiates a single tool call with the model and synthesizes the result.

This package provides:
- Agent runtime with an observable directive state machine
- Context compiler built from independent processors
- Memory sources (session log, long-term fragments, artifacts, layers)
- Vector index for semantic retrieval
- Tool registry with layer-gated built-in tools
"""

__version__ = "1.0.0"
