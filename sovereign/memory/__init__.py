"""
Memory System
=============

The sources the context compiler draws on:

1. SESSION: The append-only event log of the current conversation
2. LONG-TERM: Distilled knowledge fragments kept in the record vault
3. ARTIFACTS: Active user files and known tool schemas
4. LAYERS: Toggleable knowledge-layer definitions
5. VAULT: The key-addressable record store everything persists through

Usage:
    from sovereign.memory import LongTermMemory, InMemoryVault, SessionLog

    vault = InMemoryVault()
    memory = LongTermMemory(vault)
    await memory.store("qubic", "Qubic uses proof of useful work", tags=["crypto"])

    session = SessionLog()
    session.append(EventKind.USER_MESSAGE, "tell me about qubic")
"""

from sovereign.memory.artifacts import ArtifactCollection, FileData
from sovereign.memory.layers import KnowledgeLayer, LayerCatalog, STATIC_LAYERS
from sovereign.memory.long_term import LongTermMemory, MemoryRecord, MemoryStore
from sovereign.memory.session import Event, EventKind, SessionLog
from sovereign.memory.vault import FileVault, InMemoryVault, Vault

__all__ = [
    "ArtifactCollection",
    "FileData",
    "KnowledgeLayer",
    "LayerCatalog",
    "STATIC_LAYERS",
    "LongTermMemory",
    "MemoryRecord",
    "MemoryStore",
    "Event",
    "EventKind",
    "SessionLog",
    "FileVault",
    "InMemoryVault",
    "Vault",
]
