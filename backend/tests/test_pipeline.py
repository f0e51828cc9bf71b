"""Tests for the ingest pipeline."""

from pathlib import Path

import pytest

from policy_qa.core.capability import Unconfigured
from policy_qa.core.errors import DocumentSourceError
from policy_qa.ingest.embeddings import EmbeddingGateway
from policy_qa.ingest.loaders import list_document_paths
from policy_qa.ingest.pipeline import IngestPipeline
from policy_qa.ingest.types import ZERO_VECTOR_NOTE
from policy_qa.retrieval.vector_index import IndexManager

from conftest import TEST_DIM


class RecordingIndex(IndexManager):
    """Keeps a copy of every upserted point."""

    def __init__(self, inner: IndexManager) -> None:
        super().__init__(inner.client, inner.config)
        self.points = []

    async def upsert(self, points) -> None:
        self.points.extend(points)
        await super().upsert(points)


def test_only_markdown_and_text_files_are_listed(docs_dir: Path) -> None:
    (docs_dir / "UPPER.TXT").write_text("shouting", encoding="utf-8")
    (docs_dir / "nested").mkdir()
    (docs_dir / "nested" / "deep.md").write_text("ignored", encoding="utf-8")
    names = [path.name for path in list_document_paths(docs_dir)]
    assert names == ["UPPER.TXT", "remote.txt", "vacation.md"]


def test_missing_docs_folder(tmp_path: Path) -> None:
    with pytest.raises(DocumentSourceError, match="docs folder not found"):
        list_document_paths(tmp_path / "absent")


def test_folder_without_supported_files(tmp_path: Path) -> None:
    docs = tmp_path / "scans"
    docs.mkdir()
    (docs / "handbook.pdf").write_bytes(b"%PDF-1.4")
    (docs / "nested").mkdir()
    (docs / "nested" / "policy.md").write_text("not listed", encoding="utf-8")
    with pytest.raises(DocumentSourceError, match="docs folder not found"):
        list_document_paths(docs)


@pytest.mark.asyncio
async def test_degraded_ingest_writes_zero_vectors(docs_dir: Path, index: IndexManager) -> None:
    recording = RecordingIndex(index)
    gateway = EmbeddingGateway(Unconfigured(), model="m", vector_size=TEST_DIM)
    report = await IngestPipeline(recording, gateway, max_chars=900).ingest_directory(docs_dir, id_seed=10)

    assert report.indexed_files == 2
    assert report.placeholder_vectors is True
    assert report.note == ZERO_VECTOR_NOTE
    assert recording.points
    assert all(point.vector == [0.0] * TEST_DIM for point in recording.points)
    assert await index.count() == len(recording.points)


@pytest.mark.asyncio
async def test_ids_increase_across_files(docs_dir: Path, index: IndexManager, embedding_gateway) -> None:
    recording = RecordingIndex(index)
    report = await IngestPipeline(recording, embedding_gateway, max_chars=50).ingest_directory(docs_dir, id_seed=0)

    ids = [point.id for point in recording.points]
    assert ids == list(range(len(ids)))
    assert report.note is None
    assert report.chunks == len(ids)
    by_file = {}
    for point in recording.points:
        by_file.setdefault(point.chunk.source_file, []).append(point.chunk.chunk_index)
    assert all(indices == list(range(len(indices))) for indices in by_file.values())


@pytest.mark.asyncio
async def test_empty_document_contributes_nothing(tmp_path: Path, index: IndexManager) -> None:
    docs = tmp_path / "only-empty"
    docs.mkdir()
    (docs / "blank.md").write_text("\n\n   \n", encoding="utf-8")
    gateway = EmbeddingGateway(Unconfigured(), model="m", vector_size=TEST_DIM)
    report = await IngestPipeline(index, gateway).ingest_directory(docs)

    assert report.indexed_files == 1
    assert report.chunks == 0
    assert await index.count() == 0


@pytest.mark.asyncio
async def test_failed_file_keeps_earlier_files(docs_dir: Path, index: IndexManager) -> None:
    class FailingOnRemote(IndexManager):
        async def upsert(self, points) -> None:
            if points and points[0].chunk.source_file == "vacation.md":
                raise ConnectionError("qdrant went away")
            await super().upsert(points)

    gateway = EmbeddingGateway(Unconfigured(), model="m", vector_size=TEST_DIM)
    failing = FailingOnRemote(index.client, index.config)
    with pytest.raises(ConnectionError):
        await IngestPipeline(failing, gateway).ingest_directory(docs_dir)

    hits = await index.scroll(limit=10)
    assert {hit.source_file for hit in hits} == {"remote.txt"}
