"""Common ingestion data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

ZERO_VECTOR_NOTE = "Indexed with zero-vectors (no OpenAI key). Re-index later for real search."


@dataclass(slots=True)
class FileOutcome:
    """Result for a single indexed file."""

    source_file: str
    chunks: int


@dataclass(slots=True)
class IngestReport:
    """Aggregated outcome of one ingestion run."""

    placeholder_vectors: bool
    files: list[FileOutcome] = field(default_factory=list)

    @property
    def indexed_files(self) -> int:
        return len(self.files)

    @property
    def chunks(self) -> int:
        return sum(item.chunks for item in self.files)

    @property
    def note(self) -> str | None:
        return ZERO_VECTOR_NOTE if self.placeholder_vectors else None


__all__ = ["ZERO_VECTOR_NOTE", "FileOutcome", "IngestReport"]
