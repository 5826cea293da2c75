"""Factories that turn :class:`Settings` into wired-up collaborators.

Heavy clients (embedding model, Chroma connection) are imported lazily so
that importing the package has no network or model-download side effects.
"""

from __future__ import annotations

from functools import lru_cache

from grounded_rag.config import Settings
from grounded_rag.errors import ConfigurationError
from grounded_rag.generation.gateway import GenerationGateway
from grounded_rag.generation.pipeline import QueryPipeline
from grounded_rag.ingestion.embedder import EmbeddingService, HuggingFaceEmbeddingService
from grounded_rag.ingestion.loader import DocumentStore, LocalDirectoryStore, S3DocumentStore
from grounded_rag.ingestion.pipeline import IngestionPipeline
from grounded_rag.retrieval.base import VectorIndexBase
from grounded_rag.retrieval.retriever import ContextRetriever


@lru_cache(maxsize=4)
def build_embedder(settings: Settings) -> EmbeddingService:
    return HuggingFaceEmbeddingService(settings.embedding_model)


@lru_cache(maxsize=4)
def build_vector_index(settings: Settings) -> VectorIndexBase:
    if settings.vector_index_backend == "memory":
        from grounded_rag.retrieval.memory_store import InMemoryVectorIndex

        return InMemoryVectorIndex(settings.chroma_collection)

    from grounded_rag.retrieval.chroma_store import ChromaVectorIndex

    return ChromaVectorIndex(
        settings.chroma_collection,
        host=settings.chroma_host,
        port=settings.chroma_port,
    )


def build_document_store(settings: Settings) -> DocumentStore:
    if settings.document_source == "s3":
        if not settings.s3_bucket:
            raise ConfigurationError("Server configuration error: S3_BUCKET is missing.")
        return S3DocumentStore(
            settings.s3_bucket,
            prefix=settings.s3_prefix,
            endpoint_url=settings.s3_endpoint_url or None,
            region=settings.s3_region,
        )

    return LocalDirectoryStore(settings.documents_dir)


def build_query_pipeline(settings: Settings) -> QueryPipeline:
    """Wire the query pipeline; the gateway is built first so a missing
    endpoint fails before any model or index connection is opened."""
    gateway = GenerationGateway(settings)
    retriever = ContextRetriever(
        build_embedder(settings),
        build_vector_index(settings),
        default_k=settings.top_k,
    )
    return QueryPipeline(retriever, gateway)


def build_ingestion_pipeline(settings: Settings) -> IngestionPipeline:
    store = build_document_store(settings)
    return IngestionPipeline(
        build_embedder(settings),
        build_vector_index(settings),
        settings,
        store=store,
    )
