"""
RAG (Retrieval Augmented Generation) System
============================================

Semantic retrieval for long-term memory.

LongTermMemory ranks fragments by keyword overlap, which is enough for a
single user's vault. SemanticMemory keeps the exact same contract (text
in, ranked fragment strings out) but ranks by embedding similarity:

1. On store: the fragment is embedded and upserted into the VectorIndex
2. On query: the query is embedded and the index returns the nearest ids
3. Results are formatted like LongTermMemory results

Because both implement MemoryStore, the RelevanceProcessor works with
either one unchanged.

Components:
- embeddings.py: Generate vector embeddings from text
- vectorstore.py: Store and search vectors
"""

from sovereign.memory.long_term import MemoryStore, summarize
from sovereign.memory.vault import Vault
from sovereign.rag.embeddings import EmbeddingGenerator
from sovereign.rag.vectorstore import (
    VECTORS_COLLECTION,
    VectorIndex,
    VectorRecord,
    cosine_similarity,
)
from sovereign.utils.logger import Logger

logger = Logger("SemanticMemory")


class SemanticMemory(MemoryStore):
    """
    Vector-backed long-term memory.

    Example:
        memory = SemanticMemory(EmbeddingGenerator())

        await memory.store("qubic", "Qubic uses proof of useful work")
        await memory.query("useful work consensus", limit=3)
        # ["[ARTIFACT: qubic.txt] Summary: Qubic uses proof of useful work..."]
    """

    def __init__(
        self,
        embeddings: EmbeddingGenerator,
        index: VectorIndex | None = None,
        vault: Vault | None = None,
        min_score: float = 0.0
    ):
        """
        Initialize semantic memory.

        Args:
            embeddings: Embedding generator
            index: Vector index to use (a fresh one by default)
            vault: Optional vault to persist vectors in
            min_score: Results must score strictly above this
        """
        self.embeddings = embeddings
        self.index = index or VectorIndex()
        self.vault = vault
        self.min_score = min_score

    async def load(self) -> None:
        """Restore the index from the vault, if one is configured."""
        if self.vault is not None:
            await self.index.load(self.vault)

    async def store(self, key: str, text: str) -> None:
        """Embed and index a fragment."""
        embedding = await self.embeddings.generate(text)
        metadata = {
            "name": f"{key}.txt",
            "summary": summarize(text),
            "text": text,
        }
        self.index.upsert(key, embedding, metadata)

        if self.vault is not None:
            record = self.index.get(key)
            await self.vault.put(VECTORS_COLLECTION, key, record.to_dict())

        logger.info(f"Indexed memory trace: {key}")

    async def query(self, text: str, limit: int) -> list[str]:
        """Return up to `limit` fragments ranked by similarity."""
        if limit <= 0 or len(self.index) == 0:
            return []

        query_embedding = await self.embeddings.generate(text)
        results = []
        for record_id, score in self.index.search(query_embedding, limit):
            if score <= self.min_score:
                continue
            record = self.index.get(record_id)
            name = record.metadata.get("name", record_id)
            summary = record.metadata.get("summary")
            if summary:
                results.append(f"[ARTIFACT: {name}] Summary: {summary}")
            else:
                results.append(f"[ARTIFACT: {name}] (Raw Data)")

        logger.debug(f"Semantic query returned {len(results)} fragments")
        return results


__all__ = [
    "SemanticMemory",
    "EmbeddingGenerator",
    "VectorIndex",
    "VectorRecord",
    "cosine_similarity",
]
