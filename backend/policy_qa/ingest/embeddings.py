"""Embedding gateway."""

from __future__ import annotations

from typing import Sequence

from openai import AsyncOpenAI

from policy_qa.core.capability import Capability, Configured, Unconfigured
from policy_qa.core.errors import CapabilityUnavailableError
from policy_qa.core.logging import get_logger

logger = get_logger(__name__)


class EmbeddingGateway:
    """Produce ``vector_size``-long embeddings through an optional OpenAI client."""

    def __init__(
        self,
        capability: Capability[AsyncOpenAI],
        model: str,
        vector_size: int,
        batch_size: int = 64,
    ) -> None:
        self._capability = capability
        self.model = model
        self.vector_size = vector_size
        self.batch_size = max(1, batch_size)

    @property
    def available(self) -> bool:
        return isinstance(self._capability, Configured)

    async def embed(self, text: str) -> list[float]:
        vectors = await self.embed_many([text])
        return vectors[0]

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        capability = self._capability
        if isinstance(capability, Unconfigured):
            raise CapabilityUnavailableError("embedding")
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = list(texts[start : start + self.batch_size])
            response = await capability.client.embeddings.create(model=self.model, input=batch)
            ordered = sorted(response.data, key=lambda item: item.index)
            vectors.extend([list(item.embedding) for item in ordered])
        logger.debug("Embedded %s texts with %s", len(texts), self.model)
        return vectors

    async def vectors_for(self, texts: Sequence[str]) -> list[list[float]]:
        """Real embeddings when configured, zero vectors otherwise."""
        if isinstance(self._capability, Configured):
            return await self.embed_many(texts)
        return [self.zero_vector() for _ in texts]

    def zero_vector(self) -> list[float]:
        return [0.0] * self.vector_size


__all__ = ["EmbeddingGateway"]
