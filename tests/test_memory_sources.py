"""Unit tests for the session log, artifacts and knowledge layer catalog."""

from __future__ import annotations

import pytest

from sovereign.memory import (
    ArtifactCollection,
    FileData,
    KnowledgeLayer,
    LayerCatalog,
    SessionLog,
    STATIC_LAYERS,
)
from sovereign.memory.layers import BUILDER_PROTOCOL, CRYPTO_CONTEXT, STRATEGIC_FUTURISM
from sovereign.memory.session import EventKind


# ---------------------------------------------------------------------------
# SessionLog
# ---------------------------------------------------------------------------


class TestSessionLog:
    def test_append_and_sequence_access(self):
        log = SessionLog()
        log.append(EventKind.USER_MESSAGE, "hello")
        log.append("tool_call", "{}", tool_name="system_navigate")

        assert len(log) == 2
        assert log[-1].kind == EventKind.TOOL_CALL
        assert log[-1].tool_name == "system_navigate"
        assert [e.content for e in log] == ["hello", "{}"]

    def test_recent(self):
        log = SessionLog()
        for i in range(5):
            log.append(EventKind.USER_MESSAGE, str(i))

        assert [e.content for e in log.recent(2)] == ["3", "4"]
        assert log.recent(0) == []

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            SessionLog().append("telepathy", "...")

    def test_events_are_immutable_snapshot(self):
        log = SessionLog()
        log.append(EventKind.USER_MESSAGE, "hello")

        snapshot = log.events
        log.append(EventKind.MODEL_RESPONSE, "hi")

        assert len(snapshot) == 1


# ---------------------------------------------------------------------------
# ArtifactCollection
# ---------------------------------------------------------------------------


class TestArtifactCollection:
    def test_file_round_trip(self):
        assert FileData.from_text("a.md", "héllo").decode() == "héllo"

    @pytest.mark.asyncio
    async def test_unknown_schema_is_empty(self):
        assert await ArtifactCollection().get_schema("weather_api") == {}

    @pytest.mark.asyncio
    async def test_from_registry_mirrors_schemas(self, registry):
        artifacts = ArtifactCollection.from_registry(registry)

        schema = await artifacts.get_schema("system_navigate")

        assert schema["name"] == "system_navigate"
        assert schema["parameters"]["required"] == ["target"]

    @pytest.mark.asyncio
    async def test_register_schema_replaces(self):
        artifacts = ArtifactCollection(schemas={"calculator": {"name": "calculator"}})
        artifacts.register_schema("calculator", {"name": "calculator", "version": 2})

        assert (await artifacts.get_schema("calculator"))["version"] == 2

    @pytest.mark.asyncio
    async def test_files_can_be_added_and_cleared(self):
        artifacts = ArtifactCollection()
        artifacts.add_file(FileData.from_text("a.md", "a"))

        assert len(await artifacts.get_active_artifacts()) == 1
        artifacts.clear_files()
        assert await artifacts.get_active_artifacts() == []


# ---------------------------------------------------------------------------
# LayerCatalog
# ---------------------------------------------------------------------------


class TestLayerCatalog:
    def test_static_layers(self):
        assert set(STATIC_LAYERS) == {BUILDER_PROTOCOL, CRYPTO_CONTEXT, STRATEGIC_FUTURISM}
        assert STATIC_LAYERS[CRYPTO_CONTEXT].label == "Crypto Context"

    @pytest.mark.asyncio
    async def test_static_only_catalog(self):
        catalog = LayerCatalog()

        assert (await catalog.get(BUILDER_PROTOCOL)).label == "Builder Protocol"
        assert await catalog.get("NOPE") is None
        with pytest.raises(RuntimeError):
            await catalog.define(STATIC_LAYERS[BUILDER_PROTOCOL])

    @pytest.mark.asyncio
    async def test_define_override_and_remove(self, vault):
        catalog = LayerCatalog(vault)
        override = KnowledgeLayer(
            id=BUILDER_PROTOCOL,
            label="Builder Protocol v2",
            description="Stricter",
            system_instruction="Ship daily.",
        )

        await catalog.define(override)
        assert (await catalog.get(BUILDER_PROTOCOL)).label == "Builder Protocol v2"
        assert len(await catalog.all()) == 3

        assert await catalog.remove(BUILDER_PROTOCOL) is True
        assert (await catalog.get(BUILDER_PROTOCOL)).label == "Builder Protocol"

    def test_layer_dict_round_trip(self):
        layer = STATIC_LAYERS[STRATEGIC_FUTURISM]

        assert KnowledgeLayer.from_dict(layer.to_dict()) == layer
