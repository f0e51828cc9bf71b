"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    ok: Literal[False] = False
    error: str


class IndexResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    indexed_files: int = Field(alias="indexedFiles")
    chunks: int
    note: str | None = None


class AskRequest(BaseModel):
    question: str | None = None


class SourceRef(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file: str
    chunk_index: int = Field(alias="chunkIndex")
    score: float


class AskResponse(BaseModel):
    ok: bool = True
    answer: str
    sources: list[SourceRef]
    snippets: str | None = None
    retrieval: Literal["semantic", "fallback"]


class StatsResponse(BaseModel):
    collection: str
    vector_size: int
    distance: str
    points: int
    embeddings: bool
    generation: bool


__all__ = [
    "ErrorResponse",
    "IndexResponse",
    "AskRequest",
    "SourceRef",
    "AskResponse",
    "StatsResponse",
]
