"""Indexing API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from policy_qa.api.dependencies import get_app_settings, get_ingest_pipeline
from policy_qa.core.config import Settings
from policy_qa.ingest.pipeline import IngestPipeline
from policy_qa.models.dto import ErrorResponse, IndexResponse

router = APIRouter()


@router.post(
    "/index",
    response_model=IndexResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Index every document in the docs folder",
)
async def index_documents(
    pipeline: IngestPipeline = Depends(get_ingest_pipeline),
    settings: Settings = Depends(get_app_settings),
) -> IndexResponse:
    report = await pipeline.ingest_directory(settings.docs_dir)
    return IndexResponse(indexed_files=report.indexed_files, chunks=report.chunks, note=report.note)
