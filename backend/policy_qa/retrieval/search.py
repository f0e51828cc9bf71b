"""Question-time retrieval."""

from __future__ import annotations

from policy_qa.core.logging import get_logger, log_context
from policy_qa.core.metrics import RETRIEVAL_MODE
from policy_qa.ingest.embeddings import EmbeddingGateway
from policy_qa.models.entities import RetrievalResult
from policy_qa.retrieval.vector_index import IndexManager

logger = get_logger(__name__)

DEFAULT_LIMIT = 5


class Retriever:
    """Semantic search when embeddings are configured, scroll otherwise."""

    def __init__(self, index: IndexManager, embeddings: EmbeddingGateway) -> None:
        self.index = index
        self.embeddings = embeddings

    async def retrieve(self, question: str, limit: int = DEFAULT_LIMIT) -> RetrievalResult:
        if limit <= 0:
            raise ValueError("limit must be positive")
        if self.embeddings.available:
            vector = await self.embeddings.embed(question)
            result = RetrievalResult(mode="semantic", hits=await self.index.search(vector, limit=limit))
        else:
            # Not a similarity search: any stored points, each scored 1.0.
            result = RetrievalResult(mode="fallback", hits=await self.index.scroll(limit=limit))
        RETRIEVAL_MODE.labels(mode=result.mode).inc()
        with log_context(retrieval_mode=result.mode):
            logger.info("Retrieved %s of at most %s hits", len(result.hits), limit)
        return result


__all__ = ["DEFAULT_LIMIT", "Retriever"]
