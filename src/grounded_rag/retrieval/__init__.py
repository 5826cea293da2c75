"""
Retrieval — vector search and context assembly.

This module wraps the vector index behind a clean interface so that the
query pipeline never needs to know which backend is serving retrieval.

Public surface
--------------
- :class:`ContextRetriever` — embeds a query and builds the context block.
- :class:`VectorIndexBase` — abstract backend (subclass for Pinecone, etc.).
- :class:`ChromaVectorIndex` — default Chroma backend.
- :class:`InMemoryVectorIndex` — brute-force backend for dev and tests.
- :class:`Chunk`, :class:`VectorRecord`, :class:`RetrievalMatch` — data models.
"""

from grounded_rag.retrieval.base import VectorIndexBase
from grounded_rag.retrieval.memory_store import InMemoryVectorIndex
from grounded_rag.retrieval.models import Chunk, RetrievalMatch, VectorRecord
from grounded_rag.retrieval.retriever import CONTEXT_SEPARATOR, ContextRetriever, assemble_context

__all__ = [
    "CONTEXT_SEPARATOR",
    "ChromaVectorIndex",
    "Chunk",
    "ContextRetriever",
    "InMemoryVectorIndex",
    "RetrievalMatch",
    "VectorIndexBase",
    "VectorRecord",
    "assemble_context",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorIndex to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorIndex":
        from grounded_rag.retrieval.chroma_store import ChromaVectorIndex

        return ChromaVectorIndex
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
