"""
Embedding Generation
====================

Generates vector embeddings from text using OpenAI's embedding models.

Texts with similar meanings get similar vectors, which lets SemanticMemory
rank fragments by meaning instead of by shared keywords.

Caching:
    Embeddings are cached by md5 of the text so repeated queries and
    re-stored fragments do not cost another API call.
"""

import hashlib
from typing import Sequence

from openai import AsyncOpenAI

from sovereign.utils.config import get_config
from sovereign.utils.logger import Logger

logger = Logger("Embeddings")

MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class EmbeddingGenerator:
    """
    Generates text embeddings using OpenAI's API.

    Example:
        generator = EmbeddingGenerator()  # key and model from config

        vector = await generator.generate("proof of useful work")
        vectors = await generator.generate_batch(["first", "second"])
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: AsyncOpenAI | None = None
    ):
        """
        Initialize the embedding generator.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY, ignored when a client is given)
            model: Embedding model (defaults to OPENAI_EMBEDDING_MODEL)
            client: Pre-built async client
        """
        settings = get_config().openai
        api_key = api_key or settings.api_key
        model = model or settings.embedding_model

        if client is None and not api_key:
            raise ValueError("OpenAI api_key is required to generate embeddings")
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.model = model
        self._cache: dict[str, list[float]] = {}

        logger.info(f"Embedding generator initialized with model: {model}")

    def _hash_text(self, text: str) -> str:
        return hashlib.md5(text.encode()).hexdigest()

    async def generate(self, text: str) -> list[float]:
        """
        Generate an embedding for a single text.

        Returns:
            Vector embedding as a list of floats
        """
        cache_key = self._hash_text(text)
        if cache_key in self._cache:
            logger.debug("Embedding cache hit")
            return self._cache[cache_key]

        response = await self.client.embeddings.create(model=self.model, input=text)
        embedding = list(response.data[0].embedding)
        self._cache[cache_key] = embedding

        logger.debug(f"Generated embedding (dim={len(embedding)})")
        return embedding

    async def generate_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Generate embeddings for multiple texts with one API call.

        Cached texts are skipped; results keep the input order.
        """
        if not texts:
            return []

        results: list[list[float] | None] = []
        pending: list[tuple[int, str]] = []

        for i, text in enumerate(texts):
            cached = self._cache.get(self._hash_text(text))
            results.append(cached)
            if cached is None:
                pending.append((i, text))

        if pending:
            logger.debug(f"Generating {len(pending)} embeddings (batch)")
            response = await self.client.embeddings.create(
                model=self.model,
                input=[text for _, text in pending]
            )
            for (index, text), item in zip(pending, response.data):
                embedding = list(item.embedding)
                results[index] = embedding
                self._cache[self._hash_text(text)] = embedding

        return [r for r in results if r is not None]

    def clear_cache(self) -> None:
        """Clear the embedding cache."""
        self._cache.clear()

    @property
    def dimension(self) -> int:
        """Embedding dimension for the configured model."""
        return MODEL_DIMENSIONS.get(self.model, 1536)
