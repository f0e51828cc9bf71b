"""Ingest pipeline orchestration."""

from __future__ import annotations

import time
from pathlib import Path

from policy_qa.core.logging import get_logger, log_context
from policy_qa.core.metrics import INDEX_SIZE, INGEST_DURATION
from policy_qa.ingest.chunker import build_chunks
from policy_qa.ingest.embeddings import EmbeddingGateway
from policy_qa.ingest.loaders import list_document_paths, load_document
from policy_qa.ingest.types import FileOutcome, IngestReport
from policy_qa.models.entities import IndexedPoint
from policy_qa.retrieval.vector_index import IdAllocator, IndexManager

logger = get_logger(__name__)


class IngestPipeline:
    """Coordinate loading, chunking, embeddings, and upserts."""

    def __init__(
        self,
        index: IndexManager,
        embeddings: EmbeddingGateway,
        max_chars: int = 900,
    ) -> None:
        self.index = index
        self.embeddings = embeddings
        self.max_chars = max_chars

    async def ingest_directory(self, docs_dir: Path, id_seed: int | None = None) -> IngestReport:
        """Index every supported file in ``docs_dir``.

        Files are upserted one at a time; if a file fails, the files before it
        stay indexed and the error propagates.
        """
        placeholder = not self.embeddings.available
        vectors = "placeholder" if placeholder else "embedded"
        with log_context(collection=self.index.collection, vectors=vectors):
            started = time.perf_counter()
            await self.index.ensure_collection()
            paths = list_document_paths(docs_dir)
            if placeholder:
                logger.warning("No embedding provider configured; indexing %s files with zero vectors", len(paths))

            report = IngestReport(placeholder_vectors=placeholder)
            ids = IdAllocator(id_seed)
            for path in paths:
                report.files.append(await self._ingest_file(path, ids))

            INGEST_DURATION.labels(vectors=vectors).observe(time.perf_counter() - started)
            await self._update_index_metric()
            logger.info("Indexed %s files as %s chunks", report.indexed_files, report.chunks)
        return report

    async def _ingest_file(self, path: Path, ids: IdAllocator) -> FileOutcome:
        document = load_document(path)
        chunks = build_chunks(document.source_file, document.text, max_chars=self.max_chars)
        if not chunks:
            logger.warning("Document %s produced no chunks", path)
            return FileOutcome(source_file=document.source_file, chunks=0)

        vectors = await self.embeddings.vectors_for([chunk.text for chunk in chunks])
        point_ids = ids.allocate(len(chunks))
        points = [
            IndexedPoint(id=point_id, vector=vector, chunk=chunk)
            for point_id, vector, chunk in zip(point_ids, vectors, chunks)
        ]
        await self.index.upsert(points)
        logger.debug("Upserted %s chunks for %s", len(points), document.source_file)
        return FileOutcome(source_file=document.source_file, chunks=len(points))

    async def _update_index_metric(self) -> None:
        INDEX_SIZE.set(await self.index.count())


__all__ = ["IngestPipeline"]
