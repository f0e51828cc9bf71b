"""Administrative routes for Policy QA."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from policy_qa.api.dependencies import get_answer_generator, get_embedding_gateway, get_index_manager
from policy_qa.core.capability import is_configured
from policy_qa.core.metrics import INDEX_SIZE, metrics_response
from policy_qa.ingest.embeddings import EmbeddingGateway
from policy_qa.models.dto import StatsResponse
from policy_qa.retrieval.vector_index import IndexManager

router = APIRouter()


@router.get("/stats", response_model=StatsResponse, summary="Collection and provider status")
async def stats(
    index: IndexManager = Depends(get_index_manager),
    embeddings: EmbeddingGateway = Depends(get_embedding_gateway),
) -> StatsResponse:
    await index.ensure_collection()
    points = await index.count()
    INDEX_SIZE.set(points)
    return StatsResponse(
        collection=index.collection,
        vector_size=index.config.vector_size,
        distance=index.config.distance,
        points=points,
        embeddings=embeddings.available,
        generation=is_configured(get_answer_generator()),
    )


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


__all__ = ["router"]
