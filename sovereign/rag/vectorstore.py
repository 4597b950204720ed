"""
Vector Index
============

Similarity search over embedded records.

How Vector Search Works:
1. Store records with their embedding vectors
2. When searching, compute cosine similarity between the query and every
   stored vector
3. Return the top-k (id, score) pairs

Cosine Similarity:
    cos(A, B) = (A . B) / (||A|| * ||B||)
    - 1 means identical direction (most similar)
    - 0 means unrelated
    - -1 means opposite direction

Degenerate input never raises: vectors of different length, empty
vectors and zero vectors all score exactly 0.

There is no eviction; the index grows until the caller deletes records.
Records can be saved to and loaded from the record vault ("vectors"
collection).
"""

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from sovereign.memory.vault import Vault
from sovereign.utils.logger import Logger

logger = Logger("VectorIndex")

VECTORS_COLLECTION = "vectors"


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Cosine similarity between two vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        A value in [-1, 1]; 0.0 for mismatched lengths or zero magnitude
    """
    a = np.asarray(vec_a, dtype=float)
    b = np.asarray(vec_b, dtype=float)

    if a.ndim != 1 or b.ndim != 1 or a.shape != b.shape or a.size == 0:
        return 0.0

    magnitude = float(np.linalg.norm(a) * np.linalg.norm(b))
    if magnitude == 0.0 or not np.isfinite(magnitude):
        return 0.0

    score = float(np.dot(a, b) / magnitude)
    # Floating point error can push identical vectors past 1.0
    return float(np.clip(score, -1.0, 1.0))


@dataclass
class VectorRecord:
    """
    A record stored in the index.

    Attributes:
        id: Unique identifier
        embedding: Fixed-length vector
        metadata: Optional extra data (source id, content, ...)
    """
    id: str
    embedding: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to a vault record."""
        return {
            "id": self.id,
            "embedding": self.embedding,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "VectorRecord":
        """Create from a vault record."""
        return cls(
            id=data["id"],
            embedding=list(data["embedding"]),
            metadata=data.get("metadata", {}),
        )


class VectorIndex:
    """
    In-memory cosine-similarity index.

    Example:
        index = VectorIndex()

        index.upsert("chunk_1", [0.1, -0.2, 0.7], {"source": "notes.md"})
        index.upsert("chunk_2", [0.9, 0.1, 0.0])

        index.search([0.1, -0.2, 0.6], limit=1)
        # [("chunk_1", 0.99...)]
    """

    def __init__(self):
        self._records: dict[str, VectorRecord] = {}

    def upsert(
        self,
        record_id: str,
        embedding: Sequence[float],
        metadata: dict[str, Any] | None = None
    ) -> None:
        """
        Insert or replace a record by id.

        Calling twice with the same arguments leaves the index unchanged.
        """
        self._records[record_id] = VectorRecord(
            id=record_id,
            embedding=[float(x) for x in embedding],
            metadata=dict(metadata or {}),
        )

    def search(
        self,
        query_embedding: Sequence[float],
        limit: int = 10,
        filter_metadata: dict[str, Any] | None = None
    ) -> list[tuple[str, float]]:
        """
        Score every record against the query.

        Args:
            query_embedding: The query vector
            limit: Maximum number of results
            filter_metadata: Optional exact-match metadata filter

        Returns:
            (id, score) pairs sorted by descending score
        """
        if limit <= 0 or not self._records:
            return []

        results: list[tuple[str, float]] = []
        for record in self._records.values():
            if filter_metadata and not all(
                record.metadata.get(k) == v for k, v in filter_metadata.items()
            ):
                continue
            results.append((record.id, cosine_similarity(record.embedding, query_embedding)))

        results.sort(key=lambda item: item[1], reverse=True)
        return results[:limit]

    def get(self, record_id: str) -> VectorRecord | None:
        """Get a record by id."""
        return self._records.get(record_id)

    def delete(self, record_id: str) -> bool:
        """Delete a record. Returns True if it existed."""
        return self._records.pop(record_id, None) is not None

    def clear(self) -> None:
        """Remove every record."""
        self._records.clear()

    async def save(self, vault: Vault) -> None:
        """Write every record to the vault."""
        for record in self._records.values():
            await vault.put(VECTORS_COLLECTION, record.id, record.to_dict())
        logger.debug(f"Saved {len(self._records)} vectors")

    async def load(self, vault: Vault) -> None:
        """Replace the index contents with the vault's records."""
        self._records = {}
        for data in await vault.get_all(VECTORS_COLLECTION):
            record = VectorRecord.from_dict(data)
            self._records[record.id] = record
        logger.debug(f"Loaded {len(self._records)} vectors")

    def __len__(self) -> int:
        return len(self._records)
