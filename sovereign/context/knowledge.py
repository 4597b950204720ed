"""
Knowledge Layer Processor
=========================

Composes behavioural policies into the working context.

For every layer id in CurrentScope.active_layers that the catalog knows,
one system entry is emitted:

    [PROTOCOL_ENGAGED: CRYPTO CONTEXT]
    [ACTIVE LAYER: CRYPTO CONTEXT]
    MODE: ANALYST
    ...

Layers are emitted in sorted id order so the same scope always compiles
to the same history.
"""

from sovereign.context.models import Role, WorkingContext
from sovereign.context.processors import ContextProcessor
from sovereign.memory.layers import LayerCatalog
from sovereign.utils.logger import Logger

logger = Logger("KnowledgeLayerProcessor")


class KnowledgeLayerProcessor(ContextProcessor):
    """Emits one system entry per active knowledge layer."""

    name = "KnowledgeLayerProcessor"

    def __init__(self, catalog: LayerCatalog | None = None):
        self.catalog = catalog or LayerCatalog()

    async def process(self, session, memory, artifacts, scope) -> list[WorkingContext]:
        if not scope.active_layers:
            return []

        entries = []
        for layer_id in sorted(scope.active_layers):
            layer = await self.catalog.get(layer_id)
            if layer is None:
                logger.debug(f"Unknown knowledge layer: {layer_id}")
                continue

            entries.append(WorkingContext(
                role=Role.SYSTEM,
                content=f"[PROTOCOL_ENGAGED: {layer.label.upper()}]\n{layer.system_instruction}",
            ))

        return entries
