"""Unit tests for long-term memory ranking."""

from __future__ import annotations

import pytest

from sovereign.memory import InMemoryVault, LongTermMemory, MemoryRecord
from sovereign.memory.long_term import (
    ARTIFACTS_COLLECTION,
    DEFAULT_FRAGMENT_TAG,
    score_record,
    summarize,
    tokenize,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_summarize_truncates_and_marks(self):
        text = "x" * 80
        assert summarize(text) == "x" * 50 + "..."

    def test_tokenize_drops_short_words(self):
        assert tokenize("Tell me about the Qubic") == ["tell", "about", "qubic"]

    def test_score_name_tag_and_summary(self):
        record = MemoryRecord(
            key="qubic",
            name="qubic.txt",
            text="Qubic uses proof of useful work",
            summary="Qubic uses proof of useful work...",
            tags=("crypto",),
        )
        query = "qubic crypto"
        # Name does not contain the whole query; tag +5; "qubic" and "crypto"
        # tokens: only "qubic" is in the summary, +2
        assert score_record(record, query, tokenize(query)) == 7

    def test_raw_file_matches_by_name_only(self):
        record = MemoryRecord(key="plan.md", name="plan.md", text="...", summary=None)

        assert score_record(record, "plan", tokenize("plan")) == 11
        assert score_record(record, "budget", tokenize("budget")) == 0


# ---------------------------------------------------------------------------
# LongTermMemory
# ---------------------------------------------------------------------------


class TestLongTermMemory:
    @pytest.mark.asyncio
    async def test_store_records_fragment(self, vault: InMemoryVault, memory: LongTermMemory):
        await memory.store("qubic", "Qubic uses proof of useful work")

        rows = await vault.get_all(ARTIFACTS_COLLECTION)
        assert len(rows) == 1
        assert rows[0]["name"] == "qubic.txt"
        assert rows[0]["tags"] == [DEFAULT_FRAGMENT_TAG]
        assert rows[0]["summary"] == "Qubic uses proof of useful work..."

    @pytest.mark.asyncio
    async def test_query_finds_relevant_fragment(self, memory: LongTermMemory):
        await memory.store("qubic", "Qubic uses proof of useful work", tags=["crypto"])
        await memory.store("garden", "Tomatoes need full sun")

        results = await memory.query("tell me about qubic", 3)

        assert results == ["[ARTIFACT: qubic.txt] Summary: Qubic uses proof of useful work..."]

    @pytest.mark.asyncio
    async def test_query_never_returns_zero_scores(self, memory: LongTermMemory):
        await memory.store("garden", "Tomatoes need full sun")

        assert await memory.query("quantum computing", 3) == []

    @pytest.mark.asyncio
    async def test_query_orders_by_score_and_limits(self, memory: LongTermMemory):
        await memory.store("doge", "Dogecoin started as a joke", tags=["crypto"])
        await memory.store("qubic", "Qubic uses proof of useful work", tags=["crypto", "qubic"])
        await memory.store("market", "Crypto markets are volatile", tags=["crypto"])

        results = await memory.query("crypto qubic", 2)

        assert len(results) == 2
        assert results[0].startswith("[ARTIFACT: qubic.txt]")

    @pytest.mark.asyncio
    async def test_store_artifact_without_summary_is_raw(self, memory: LongTermMemory):
        await memory.store_artifact("roadmap.md", "Q1: ship it")

        assert await memory.query("roadmap", 3) == ["[ARTIFACT: roadmap.md] (Raw Data)"]

    @pytest.mark.asyncio
    async def test_zero_limit(self, memory: LongTermMemory):
        await memory.store("qubic", "Qubic uses proof of useful work")

        assert await memory.query("qubic", 0) == []

    @pytest.mark.asyncio
    async def test_wipe(self, memory: LongTermMemory):
        await memory.store("qubic", "Qubic uses proof of useful work")
        await memory.wipe()

        assert await memory.records() == []
