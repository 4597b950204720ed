"""
Knowledge Layers
================

Behavioural policy layers that can be toggled per turn.

A layer bundles a labelled system instruction with the memory tags and
application modes it relates to. Layers are composed by the
KnowledgeLayerProcessor: every active layer contributes one system entry
to the working context, and some layers unlock extra tools.

Static layers ship with the package. Custom layers are persisted in the
vault's "layers" collection and override static ones with the same id.

Which layers are active is never global state: callers pass the active
ids in CurrentScope.active_layers.
"""

from dataclasses import dataclass
from textwrap import dedent

from sovereign.memory.vault import Vault
from sovereign.utils.logger import Logger

logger = Logger("LayerCatalog")

LAYERS_COLLECTION = "layers"

BUILDER_PROTOCOL = "BUILDER_PROTOCOL"
CRYPTO_CONTEXT = "CRYPTO_CONTEXT"
STRATEGIC_FUTURISM = "STRATEGIC_FUTURISM"


@dataclass(frozen=True)
class KnowledgeLayer:
    """
    A toggleable policy layer.

    Attributes:
        id: Stable identifier (e.g. "BUILDER_PROTOCOL")
        label: Human-readable label
        description: Short description of the policy
        system_instruction: Instruction text injected when active
        memory_tags: Memory tags the layer relates to
        active_modes: Application modes where the layer applies
    """
    id: str
    label: str
    description: str
    system_instruction: str
    memory_tags: tuple[str, ...] = ()
    active_modes: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to a vault record."""
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "system_instruction": self.system_instruction,
            "memory_tags": list(self.memory_tags),
            "active_modes": list(self.active_modes),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "KnowledgeLayer":
        """Create from a vault record."""
        return cls(
            id=data["id"],
            label=data.get("label", data["id"]),
            description=data.get("description", ""),
            system_instruction=data.get("system_instruction", ""),
            memory_tags=tuple(data.get("memory_tags", [])),
            active_modes=tuple(data.get("active_modes", [])),
        )


STATIC_LAYERS: dict[str, KnowledgeLayer] = {
    BUILDER_PROTOCOL: KnowledgeLayer(
        id=BUILDER_PROTOCOL,
        label="Builder Protocol",
        description="Execution-first framework. High speed, low fluff.",
        system_instruction=dedent("""\
            [ACTIVE LAYER: BUILDER PROTOCOL]
            MODE: EXECUTION
            1. BIAS FOR ACTION: Do not explain the code unless asked. Write it.
            2. NO FLUFF: Responses must be terse, technical, and immediately actionable.
            3. SHIP IT: If a solution is 80% complete, ship it and iterate."""),
        memory_tags=("code", "architecture", "prototyping"),
        active_modes=("CODE_STUDIO", "PROCESS_MAP"),
    ),
    CRYPTO_CONTEXT: KnowledgeLayer(
        id=CRYPTO_CONTEXT,
        label="Crypto Context",
        description="Deep market analysis, Dogecoin & Qubic focus.",
        system_instruction=dedent("""\
            [ACTIVE LAYER: CRYPTO CONTEXT]
            MODE: ANALYST
            1. FOCUS: Dogecoin (DOGE), Qubic (QUBIC), and Macro Trends.
            2. TONE: Objective, data-driven, wary of volatility.
            3. CONTEXT: Understand 'Proof of Useful Work' (Qubic) vs 'Proof of Work' (Doge)."""),
        memory_tags=("crypto", "finance", "market_data", "qubic", "doge"),
        active_modes=("DASHBOARD", "DISCOVERY", "BIBLIOMORPHIC"),
    ),
    STRATEGIC_FUTURISM: KnowledgeLayer(
        id=STRATEGIC_FUTURISM,
        label="Futurism",
        description="Long-term horizon scanning and strategic implications.",
        system_instruction=dedent("""\
            [ACTIVE LAYER: STRATEGIC FUTURISM]
            MODE: VISIONARY
            1. SCOPE: 5-10 year horizon.
            2. DOMAINS: AI Singularity, Energy Transition, Sovereign Compute.
            3. METHOD: First Principles thinking."""),
        memory_tags=("strategy", "ai_trends", "energy"),
        active_modes=("DISCOVERY", "BICAMERAL"),
    ),
}


class LayerCatalog:
    """
    Resolves layer ids to definitions.

    Example:
        catalog = LayerCatalog(vault)

        await catalog.define(KnowledgeLayer(
            id="OPS_ONCALL",
            label="On-Call",
            description="Incident response posture",
            system_instruction="Prioritise mitigation over root cause.",
        ))

        layer = await catalog.get("OPS_ONCALL")
    """

    def __init__(
        self,
        vault: Vault | None = None,
        static_layers: dict[str, KnowledgeLayer] | None = None
    ):
        """
        Initialize the catalog.

        Args:
            vault: Vault holding custom layers; None means static only
            static_layers: Built-in layers (defaults to STATIC_LAYERS)
        """
        self.vault = vault
        self._static = dict(STATIC_LAYERS if static_layers is None else static_layers)

    async def get(self, layer_id: str) -> KnowledgeLayer | None:
        """
        Look up a layer. Persisted definitions win over static ones.

        Returns:
            The layer, or None if unknown
        """
        if self.vault is not None:
            record = await self.vault.get(LAYERS_COLLECTION, layer_id)
            if record:
                return KnowledgeLayer.from_dict(record)
        return self._static.get(layer_id)

    async def all(self) -> list[KnowledgeLayer]:
        """Get every known layer, static first then custom."""
        layers = dict(self._static)
        if self.vault is not None:
            for record in await self.vault.get_all(LAYERS_COLLECTION):
                layer = KnowledgeLayer.from_dict(record)
                layers[layer.id] = layer
        return list(layers.values())

    async def define(self, layer: KnowledgeLayer) -> None:
        """
        Persist a custom layer.

        Raises:
            RuntimeError: If the catalog has no vault
        """
        if self.vault is None:
            raise RuntimeError("Layer catalog has no vault to persist definitions in")
        await self.vault.put(LAYERS_COLLECTION, layer.id, layer.to_dict())
        logger.info(f"Defined knowledge layer: {layer.id}")

    async def remove(self, layer_id: str) -> bool:
        """Remove a custom layer. Static layers cannot be removed."""
        if self.vault is None:
            return False
        return await self.vault.delete(LAYERS_COLLECTION, layer_id)
