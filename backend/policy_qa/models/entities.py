"""Internal dataclasses for documents, chunks and index points."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

# Sentinel relevance for hits that did not come from a similarity search.
FALLBACK_SCORE = 1.0

RetrievalMode = Literal["semantic", "fallback"]


@dataclass(slots=True)
class Document:
    source_file: str
    text: str


@dataclass(frozen=True, slots=True)
class Chunk:
    source_file: str
    chunk_index: int
    text: str

    def to_payload(self) -> dict[str, Any]:
        return {"file": self.source_file, "chunkIndex": self.chunk_index, "text": self.text}


@dataclass(frozen=True, slots=True)
class IndexedPoint:
    id: int
    vector: list[float]
    chunk: Chunk


@dataclass(slots=True)
class RetrievedHit:
    """A stored chunk returned for a query.

    ``payload`` is the raw point payload so that points written by other
    tools (or with missing keys) still render.
    """

    payload: dict[str, Any]
    score: float = FALLBACK_SCORE

    @property
    def source_file(self) -> str | None:
        value = self.payload.get("file")
        return str(value) if value is not None else None

    @property
    def chunk_index(self) -> int | None:
        value = self.payload.get("chunkIndex")
        return int(value) if value is not None else None

    @property
    def text(self) -> str:
        return str(self.payload.get("text") or "")


@dataclass(frozen=True, slots=True)
class IndexConfig:
    collection_name: str
    vector_size: int
    distance: Literal["Cosine"] = "Cosine"

    def __post_init__(self) -> None:
        if self.vector_size <= 0:
            raise ValueError("vector_size must be positive")


@dataclass(slots=True)
class RetrievalResult:
    mode: RetrievalMode
    hits: list[RetrievedHit] = field(default_factory=list)


__all__ = [
    "FALLBACK_SCORE",
    "RetrievalMode",
    "Document",
    "Chunk",
    "IndexedPoint",
    "RetrievedHit",
    "IndexConfig",
    "RetrievalResult",
]
