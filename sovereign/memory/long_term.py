"""
Long-Term Memory
================

Durable store of distilled knowledge fragments, kept in the record vault.

Long-term memory:
- Persists fragments through the Vault boundary ("artifacts" collection)
- Derives a short summary and tags for each fragment on store
- Answers queries with a naive relevance scan over every fragment

Relevance Scoring:
    Every stored fragment is scored against the query:
    - +10 if the whole query appears in the fragment name/key
    - +5  per tag that appears in the query
    - +2  per query token found in the summary
    - +1  weak fallback if there is no summary but the name matches

    Tokens are the lower-cased, whitespace-separated words of the query;
    words of three characters or fewer are discarded.

    The scan is O(fragments x tokens), fine for a single user's vault.
    SemanticMemory in sovereign.rag keeps the same text-in, ranked-text-out
    contract on top of the vector index.

Record Format:
    {
        "id": "6f1c...",
        "key": "qubic",
        "name": "qubic.txt",
        "type": "text/plain",
        "text": "Qubic uses proof of useful work",
        "summary": "Qubic uses proof of useful work...",
        "tags": ["crypto"],
        "timestamp": 1767225600.0
    }
"""

import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from sovereign.memory.vault import Vault
from sovereign.utils.logger import Logger

logger = Logger("LongTermMemory")

ARTIFACTS_COLLECTION = "artifacts"
DEFAULT_FRAGMENT_TAG = "MEMORY_FRAGMENT"
SUMMARY_LENGTH = 50
MIN_TOKEN_LENGTH = 4


class MemoryStore(ABC):
    """
    Interface for long-term knowledge storage.

    Anything that can rank stored text against a query can back the
    RelevanceProcessor: the keyword scan below, or a vector index.
    """

    @abstractmethod
    async def query(self, text: str, limit: int) -> list[str]:
        """Return up to `limit` formatted fragments, best first."""

    @abstractmethod
    async def store(self, key: str, text: str) -> None:
        """Persist a new fragment."""


@dataclass(frozen=True)
class MemoryRecord:
    """
    A stored knowledge fragment.

    Attributes:
        key: Caller-supplied key
        name: Display name used in query results
        text: The full payload
        summary: Derived summary, None for raw ingested files
        tags: Derived or supplied tags
        timestamp: When the fragment was stored
        id: Vault record id
    """
    key: str
    name: str
    text: str
    summary: str | None
    tags: tuple[str, ...] = ()
    timestamp: float = field(default_factory=time.time)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self) -> dict:
        """Convert to a vault record."""
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "type": "text/plain",
            "text": self.text,
            "summary": self.summary,
            "tags": list(self.tags),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MemoryRecord":
        """Create from a vault record."""
        return cls(
            key=data.get("key", data.get("name", "")),
            name=data.get("name", ""),
            text=data.get("text", ""),
            summary=data.get("summary") or None,
            tags=tuple(data.get("tags", [])),
            timestamp=data.get("timestamp", 0.0),
            id=data["id"],
        )

    def format(self) -> str:
        """Format the record as a query result line."""
        if self.summary:
            return f"[ARTIFACT: {self.name}] Summary: {self.summary}"
        return f"[ARTIFACT: {self.name}] (Raw Data)"


def summarize(text: str) -> str:
    """Derive the ranking summary for a fragment."""
    return text[:SUMMARY_LENGTH] + "..."


def tokenize(text: str) -> list[str]:
    """Split a query into lower-cased tokens, dropping very short words."""
    return [word for word in text.lower().split() if len(word) >= MIN_TOKEN_LENGTH]


def score_record(record: MemoryRecord, query: str, tokens: list[str]) -> int:
    """
    Score a fragment against a query.

    Args:
        record: The stored fragment
        query: The raw query text
        tokens: Pre-computed query tokens

    Returns:
        Relevance score, 0 when nothing matched
    """
    query_lower = query.lower()
    name_lower = record.name.lower()
    name_match = bool(query_lower) and query_lower in name_lower

    score = 0
    if name_match:
        score += 10

    for tag in record.tags:
        if tag and tag.lower() in query_lower:
            score += 5

    if record.summary:
        summary_lower = record.summary.lower()
        for token in tokens:
            if token in summary_lower:
                score += 2
    elif name_match:
        score += 1

    return score


class LongTermMemory(MemoryStore):
    """
    Vault-backed long-term memory with keyword relevance ranking.

    Example:
        memory = LongTermMemory(InMemoryVault())

        await memory.store("qubic", "Qubic uses proof of useful work", tags=["crypto"])

        results = await memory.query("tell me about qubic", limit=3)
        # ["[ARTIFACT: qubic.txt] Summary: Qubic uses proof of useful work..."]
    """

    def __init__(self, vault: Vault):
        """
        Initialize long-term memory.

        Args:
            vault: The record vault to persist fragments in
        """
        self.vault = vault

    async def store(
        self,
        key: str,
        text: str,
        tags: list[str] | tuple[str, ...] = ()
    ) -> None:
        """
        Store a new knowledge fragment.

        Args:
            key: Key for the fragment; its name becomes "<key>.txt"
            text: The fragment text
            tags: Tags for ranking (defaults to MEMORY_FRAGMENT)
        """
        record = MemoryRecord(
            key=key,
            name=f"{key}.txt",
            text=text,
            summary=summarize(text),
            tags=tuple(tags) if tags else (DEFAULT_FRAGMENT_TAG,),
        )
        await self.vault.put(ARTIFACTS_COLLECTION, record.id, record.to_dict())
        logger.info(f"Encoded new memory trace: {key}")

    async def store_artifact(
        self,
        name: str,
        text: str,
        summary: str | None = None,
        tags: list[str] | tuple[str, ...] = ()
    ) -> MemoryRecord:
        """
        Ingest a user file into the vault.

        Files without an analysis summary are kept as raw data and only
        match queries through their name.

        Args:
            name: File name
            text: Decoded file content
            summary: Optional analysis summary
            tags: Optional classification tags

        Returns:
            The stored record
        """
        record = MemoryRecord(
            key=name,
            name=name,
            text=text,
            summary=summary,
            tags=tuple(tags),
        )
        await self.vault.put(ARTIFACTS_COLLECTION, record.id, record.to_dict())
        logger.debug(f"Artifact secured: {name}")
        return record

    async def records(self) -> list[MemoryRecord]:
        """Get every stored fragment, oldest first."""
        rows = await self.vault.get_all_by_index(ARTIFACTS_COLLECTION, "timestamp")
        return [MemoryRecord.from_dict(row) for row in rows]

    async def query(self, text: str, limit: int) -> list[str]:
        """
        Rank every stored fragment against the query.

        Args:
            text: The query text
            limit: Maximum number of results

        Returns:
            Formatted fragments, highest score first. Fragments scoring
            zero are never returned.
        """
        if limit <= 0:
            return []

        start = time.perf_counter()
        tokens = tokenize(text)

        scored: list[tuple[int, MemoryRecord]] = []
        for record in await self.records():
            score = score_record(record, text, tokens)
            if score > 0:
                scored.append((score, record))

        # Stable sort keeps older fragments first on ties
        scored.sort(key=lambda item: item[0], reverse=True)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            f"Query '{text[:50]}' took {elapsed_ms:.2f}ms. Found {len(scored)} matches."
        )

        return [record.format() for _, record in scored[:limit]]

    async def wipe(self) -> None:
        """Delete every fragment. The only way fragments are removed."""
        await self.vault.clear(ARTIFACTS_COLLECTION)
        logger.info("Memory vault wiped")
