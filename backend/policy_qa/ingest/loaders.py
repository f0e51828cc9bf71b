"""Plain-text document loading."""

from __future__ import annotations

from pathlib import Path

from policy_qa.core.errors import DocumentSourceError
from policy_qa.models.entities import Document

SUPPORTED_SUFFIXES = (".md", ".txt")


def list_document_paths(docs_dir: Path) -> list[Path]:
    """Return the supported files directly inside ``docs_dir``, sorted by name.

    A missing folder and a folder without any supported file are both
    reported as ``DocumentSourceError``.
    """
    if not docs_dir.is_dir():
        raise DocumentSourceError(docs_dir)
    paths = sorted(
        (path for path in docs_dir.iterdir() if path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES),
        key=lambda path: path.name,
    )
    if not paths:
        raise DocumentSourceError(docs_dir)
    return paths


def load_document(path: Path) -> Document:
    raw = path.read_bytes()
    return Document(source_file=path.name, text=raw.decode("utf-8", errors="ignore"))


__all__ = ["SUPPORTED_SUFFIXES", "list_document_paths", "load_document"]
