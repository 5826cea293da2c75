"""Ingestion orchestrator — documents in, batched vector records out.

For every document: chunk → embed all chunks in one bulk call → build
:class:`VectorRecord` objects with deterministic IDs → buffer them and
flush to the vector index whenever the buffer reaches ``batch_size``.

Runs are not transactional.  A run that fails after N of M batches leaves
the index partially updated; re-running is the recovery path, and the
deterministic IDs make the replay overwrite rather than duplicate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel

from grounded_rag.config import MAX_INSERT_BATCH_SIZE, Settings
from grounded_rag.ingestion.chunker import chunk_text
from grounded_rag.ingestion.embedder import EmbeddingService
from grounded_rag.ingestion.loader import DocumentStore, iter_documents
from grounded_rag.retrieval.base import VectorIndexBase
from grounded_rag.retrieval.models import VectorRecord

logger = logging.getLogger(__name__)


class IngestionStats(BaseModel):
    """Counters for one :meth:`IngestionPipeline.ingest` run."""

    documents_seen: int = 0
    documents_skipped: int = 0
    documents_failed: int = 0
    chunks_produced: int = 0
    records_written: int = 0
    batches_flushed: int = 0


class IngestionPipeline:
    """Chunk, embed and upsert documents into a vector index.

    Parameters
    ----------
    embedder:
        Embedding service; called once per non-empty document.
    index:
        Target vector index.
    settings:
        Supplies ``chunk_size``, ``chunk_overlap``, ``insert_batch_size``
        and ``continue_on_error``.
    store:
        Optional document store used by :meth:`run`.
    """

    def __init__(
        self,
        embedder: EmbeddingService,
        index: VectorIndexBase,
        settings: Settings,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        if not 1 <= settings.insert_batch_size <= MAX_INSERT_BATCH_SIZE:
            raise ValueError(
                f"insert_batch_size must be in [1, {MAX_INSERT_BATCH_SIZE}], "
                f"got {settings.insert_batch_size}"
            )
        self._embedder = embedder
        self._index = index
        self._store = store
        self.chunk_size = settings.chunk_size
        self.chunk_overlap = settings.chunk_overlap
        self.batch_size = settings.insert_batch_size
        self.continue_on_error = settings.continue_on_error
        self.last_stats = IngestionStats()

    # -- public API -----------------------------------------------------------

    def run(self) -> int:
        """Ingest every document from the configured store."""
        if self._store is None:
            raise ValueError("IngestionPipeline.run() needs a document store")
        logger.info("Starting ingestion process with chunking...")
        return self.ingest(iter_documents(self._store))

    def ingest(self, documents: Iterable[tuple[str, str]]) -> int:
        """Ingest ``(source_key, text)`` pairs and return the records written.

        Every chunk of every non-empty document ends up in exactly one
        insert call; no call carries more than ``batch_size`` records.
        """
        stats = IngestionStats()
        self.last_stats = stats
        pending: list[VectorRecord] = []

        for source_key, text in documents:
            stats.documents_seen += 1
            logger.info("Processing file: %s", source_key)
            try:
                records = self._build_records(source_key, text)
            except Exception:
                if not self.continue_on_error:
                    raise
                stats.documents_failed += 1
                logger.exception("Failed to chunk/embed %s; skipping document", source_key)
                continue

            if not records:
                stats.documents_skipped += 1
                continue
            stats.chunks_produced += len(records)

            for record in records:
                pending.append(record)
                if len(pending) >= self.batch_size:
                    self._flush(pending, stats)
                    pending = []

        if pending:
            self._flush(pending, stats, final=True)

        logger.info(
            "Ingestion complete: %d records in %d batches from %d documents "
            "(%d skipped, %d failed)",
            stats.records_written,
            stats.batches_flushed,
            stats.documents_seen,
            stats.documents_skipped,
            stats.documents_failed,
        )
        return stats.records_written

    # -- internals ------------------------------------------------------------

    def _build_records(self, source_key: str, text: str) -> list[VectorRecord]:
        chunks = chunk_text(
            text,
            self.chunk_size,
            self.chunk_overlap,
            source_key=source_key,
        )
        logger.info("File %s was split into %d chunks.", source_key, len(chunks))
        if not chunks:
            return []

        vectors = self._embedder.embed([c.text for c in chunks])
        return [VectorRecord.from_chunk(c, v) for c, v in zip(chunks, vectors)]

    def _flush(self, batch: list[VectorRecord], stats: IngestionStats, *, final: bool = False) -> None:
        self._index.insert(batch)
        stats.records_written += len(batch)
        stats.batches_flushed += 1
        if final:
            logger.info("Inserted the final batch of %d vectors.", len(batch))
        else:
            logger.info("Inserted a batch of %d vectors.", len(batch))
