"""Formatting retrieved chunks for the answer prompt."""

from __future__ import annotations

from typing import Any, Sequence

from policy_qa.models.entities import RetrievedHit

SEPARATOR = "\n---\n"


def build_context(hits: Sequence[RetrievedHit]) -> str:
    """Render hits as numbered, attributed source blocks in input order."""
    blocks: list[str] = []
    for position, hit in enumerate(hits, start=1):
        file_label = hit.source_file or "unknown"
        chunk_label = hit.chunk_index if hit.chunk_index is not None else "?"
        blocks.append(f"Source {position} | file: {file_label} | chunk: {chunk_label}\n")
        blocks.append(f"{hit.text}\n")
        blocks.append(f"{SEPARATOR}\n")
    return "".join(blocks)


def to_sources(hits: Sequence[RetrievedHit]) -> list[dict[str, Any]]:
    return [
        {
            "file": hit.source_file or "unknown",
            "chunkIndex": hit.chunk_index if hit.chunk_index is not None else 0,
            "score": hit.score,
        }
        for hit in hits
    ]


__all__ = ["build_context", "to_sources"]
