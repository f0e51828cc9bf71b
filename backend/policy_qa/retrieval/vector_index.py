"""Qdrant-backed vector index."""

from __future__ import annotations

from typing import Any, Sequence

from qdrant_client import AsyncQdrantClient, models

from policy_qa.core.errors import VectorDimensionError
from policy_qa.core.logging import get_logger
from policy_qa.models.entities import FALLBACK_SCORE, IndexConfig, IndexedPoint, RetrievedHit
from policy_qa.utils.time import now_ms

logger = get_logger(__name__)

_DISTANCES = {"Cosine": models.Distance.COSINE}


class IdAllocator:
    """Monotonic point ids for one ingestion run.

    Ids are unique within the run only. Two runs seeded in the same
    millisecond, or running concurrently, can hand out overlapping ids.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._next = now_ms() if seed is None else seed
        if self._next < 0:
            raise ValueError("id seed must be non-negative")

    def allocate(self, count: int = 1) -> list[int]:
        ids = list(range(self._next, self._next + count))
        self._next += count
        return ids

    @property
    def next_id(self) -> int:
        return self._next


class IndexManager:
    """Owns a single collection inside a Qdrant instance."""

    def __init__(self, client: AsyncQdrantClient, config: IndexConfig) -> None:
        self.client = client
        self.config = config

    @property
    def collection(self) -> str:
        return self.config.collection_name

    async def ensure_collection(self) -> bool:
        """Create the collection when absent. Returns True if it was created.

        An existing collection is used as-is; its vector size and distance
        are not compared against the configuration.
        """
        if await self.client.collection_exists(self.collection):
            return False
        await self.client.create_collection(
            collection_name=self.collection,
            vectors_config=models.VectorParams(
                size=self.config.vector_size,
                distance=_DISTANCES[self.config.distance],
            ),
        )
        logger.info(
            "Created collection %s",
            self.collection,
            extra={"ctx_vector_size": self.config.vector_size, "ctx_distance": self.config.distance},
        )
        return True

    async def upsert(self, points: Sequence[IndexedPoint]) -> None:
        if not points:
            return
        for point in points:
            if len(point.vector) != self.config.vector_size:
                raise VectorDimensionError(self.config.vector_size, len(point.vector))
        await self.client.upsert(
            collection_name=self.collection,
            points=[
                models.PointStruct(id=point.id, vector=list(point.vector), payload=point.chunk.to_payload())
                for point in points
            ],
            wait=True,
        )

    async def search(self, vector: Sequence[float], limit: int = 5) -> list[RetrievedHit]:
        if len(vector) != self.config.vector_size:
            raise VectorDimensionError(self.config.vector_size, len(vector))
        response = await self.client.query_points(
            collection_name=self.collection,
            query=list(vector),
            limit=limit,
            with_payload=True,
        )
        hits = [RetrievedHit(payload=_payload(point.payload), score=float(point.score)) for point in response.points]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits

    async def scroll(self, limit: int = 5) -> list[RetrievedHit]:
        records, _next_offset = await self.client.scroll(
            collection_name=self.collection,
            limit=limit,
            with_payload=True,
            with_vectors=False,
        )
        return [RetrievedHit(payload=_payload(record.payload), score=FALLBACK_SCORE) for record in records[:limit]]

    async def count(self) -> int:
        result = await self.client.count(collection_name=self.collection, exact=True)
        return int(result.count)


def _payload(raw: dict[str, Any] | None) -> dict[str, Any]:
    return dict(raw or {})


__all__ = ["IdAllocator", "IndexManager"]
