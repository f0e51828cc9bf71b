"""Chunking utilities."""

from __future__ import annotations

import re
from typing import Iterator

from policy_qa.models.entities import Chunk

_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")
_JOINER = "\n"


def chunk_text(text: str, max_chars: int = 900) -> list[str]:
    """Split text into paragraph-aligned chunks of at most ``max_chars``.

    Paragraphs are packed greedily in document order. A paragraph is never
    split, so one longer than ``max_chars`` becomes an oversized chunk of its own.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    if not text.strip():
        return []

    chunks: list[str] = []
    buffer = ""
    for paragraph in _iter_paragraphs(text):
        if buffer and len(buffer) + len(_JOINER) + len(paragraph) > max_chars:
            chunks.append(buffer)
            buffer = ""
        buffer = f"{buffer}{_JOINER}{paragraph}" if buffer else paragraph

    if buffer:
        chunks.append(buffer)
    return chunks


def _iter_paragraphs(text: str) -> Iterator[str]:
    for part in _PARAGRAPH_BREAK_RE.split(text):
        paragraph = part.strip()
        if paragraph:
            yield paragraph


def build_chunks(source_file: str, text: str, max_chars: int = 900) -> list[Chunk]:
    """Attach source metadata and ordinal position to raw chunk texts."""
    return [
        Chunk(source_file=source_file, chunk_index=index, text=piece)
        for index, piece in enumerate(chunk_text(text, max_chars=max_chars))
    ]


__all__ = ["chunk_text", "build_chunks"]
