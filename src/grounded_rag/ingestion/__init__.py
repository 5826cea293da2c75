"""
Ingestion — document listing, chunking, embedding and batched upserts.

This module converts raw documents from a document store into vector
records in the vector index.

Public surface
--------------
- :func:`chunk_text` — sentence-aware chunking with character overlap.
- :class:`IngestionPipeline` — the batching orchestrator.
- :class:`DocumentStore`, :class:`LocalDirectoryStore`, :class:`S3DocumentStore`.
- :class:`EmbeddingService`, :class:`HuggingFaceEmbeddingService`.
"""

from grounded_rag.ingestion.chunker import chunk_text, split_sentences
from grounded_rag.ingestion.embedder import EmbeddingService, HuggingFaceEmbeddingService
from grounded_rag.ingestion.loader import (
    DocumentStore,
    LocalDirectoryStore,
    S3DocumentStore,
    iter_documents,
)
from grounded_rag.ingestion.pipeline import IngestionPipeline, IngestionStats

__all__ = [
    "DocumentStore",
    "EmbeddingService",
    "HuggingFaceEmbeddingService",
    "IngestionPipeline",
    "IngestionStats",
    "LocalDirectoryStore",
    "S3DocumentStore",
    "chunk_text",
    "iter_documents",
    "split_sentences",
]
