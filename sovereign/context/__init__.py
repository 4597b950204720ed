"""
Context Module
==============

Compiles the working context handed to the model on each turn.

Components:
- models: WorkingContext, CurrentScope, FactChunk, CompiledContext
- processors: Independent context sources (recency, relevance, files, ...)
- knowledge: Knowledge layer composition
- compiler: The processor pipeline
"""

from sovereign.context.compiler import ContextCompiler, build_default_compiler
from sovereign.context.knowledge import KnowledgeLayerProcessor
from sovereign.context.models import (
    CompiledContext,
    CurrentScope,
    FactChunk,
    GroundingSources,
    Role,
    WorkingContext,
)
from sovereign.context.processors import (
    ArtifactProcessor,
    ContextProcessor,
    FactProcessor,
    RecencyProcessor,
    RelevanceProcessor,
    SystemInstructionProcessor,
    ToolSchemaProcessor,
)

__all__ = [
    "ArtifactProcessor",
    "CompiledContext",
    "ContextCompiler",
    "ContextProcessor",
    "CurrentScope",
    "FactChunk",
    "FactProcessor",
    "GroundingSources",
    "KnowledgeLayerProcessor",
    "RecencyProcessor",
    "RelevanceProcessor",
    "Role",
    "SystemInstructionProcessor",
    "ToolSchemaProcessor",
    "WorkingContext",
    "build_default_compiler",
]
