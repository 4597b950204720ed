"""Unit tests for the vector index and cosine similarity."""

from __future__ import annotations

import pytest

from sovereign.memory import InMemoryVault
from sovereign.rag import VectorIndex, cosine_similarity
from sovereign.rag.vectorstore import VECTORS_COLLECTION


# ---------------------------------------------------------------------------
# cosine_similarity
# ---------------------------------------------------------------------------


class TestCosineSimilarity:
    def test_identical_vectors_score_one(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors_score_zero(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors_score_minus_one(self):
        assert cosine_similarity([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(-1.0)

    def test_length_mismatch_scores_zero(self):
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0

    def test_zero_vector_scores_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0

    def test_empty_vectors_score_zero(self):
        assert cosine_similarity([], []) == 0.0

    def test_score_is_bounded(self):
        score = cosine_similarity([0.1] * 50, [0.1] * 50)
        assert -1.0 <= score <= 1.0


# ---------------------------------------------------------------------------
# VectorIndex
# ---------------------------------------------------------------------------


class TestVectorIndex:
    def test_search_orders_by_descending_score(self):
        index = VectorIndex()
        index.upsert("far", [0.0, 1.0])
        index.upsert("near", [1.0, 0.1])
        index.upsert("exact", [1.0, 0.0])

        results = index.search([1.0, 0.0], limit=3)

        assert [record_id for record_id, _ in results] == ["exact", "near", "far"]
        assert results[0][1] == pytest.approx(1.0)

    def test_search_respects_limit(self):
        index = VectorIndex()
        for i in range(5):
            index.upsert(f"r{i}", [1.0, float(i)])

        assert len(index.search([1.0, 0.0], limit=2)) == 2

    def test_search_on_empty_index(self):
        assert VectorIndex().search([1.0, 0.0]) == []

    def test_upsert_replaces_by_id(self):
        index = VectorIndex()
        index.upsert("a", [1.0, 0.0], {"v": 1})
        index.upsert("a", [0.0, 1.0], {"v": 2})

        assert len(index) == 1
        assert index.get("a").metadata == {"v": 2}
        assert index.search([0.0, 1.0], limit=1)[0] == ("a", pytest.approx(1.0))

    def test_mismatched_dimension_scores_zero_without_raising(self):
        index = VectorIndex()
        index.upsert("short", [1.0])
        index.upsert("ok", [1.0, 0.0])

        results = dict(index.search([1.0, 0.0]))

        assert results["short"] == 0.0
        assert results["ok"] == pytest.approx(1.0)

    def test_filter_metadata(self):
        index = VectorIndex()
        index.upsert("a", [1.0, 0.0], {"source": "notes.md"})
        index.upsert("b", [1.0, 0.0], {"source": "plan.md"})

        results = index.search([1.0, 0.0], filter_metadata={"source": "plan.md"})

        assert [record_id for record_id, _ in results] == ["b"]

    def test_delete_and_clear(self):
        index = VectorIndex()
        index.upsert("a", [1.0])
        index.upsert("b", [1.0])

        assert index.delete("a") is True
        assert index.delete("a") is False
        index.clear()
        assert len(index) == 0

    @pytest.mark.asyncio
    async def test_save_and_load_through_vault(self):
        vault = InMemoryVault()
        index = VectorIndex()
        index.upsert("a", [0.5, 0.5], {"name": "a.txt"})
        await index.save(vault)

        assert len(await vault.get_all(VECTORS_COLLECTION)) == 1

        restored = VectorIndex()
        await restored.load(vault)
        assert restored.get("a").embedding == [0.5, 0.5]
        assert restored.get("a").metadata == {"name": "a.txt"}
