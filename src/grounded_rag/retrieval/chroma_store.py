"""Chroma implementation of the vector-index abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import chromadb

from grounded_rag.retrieval.base import VectorIndexBase
from grounded_rag.retrieval.models import RetrievalMatch, VectorRecord

logger = logging.getLogger(__name__)


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Chroma metadata values must be flat str/int/float/bool."""
    return {k: v for k, v in metadata.items() if isinstance(v, (str, int, float, bool))}


class ChromaVectorIndex(VectorIndexBase):
    """Chroma-backed vector index.

    Records are written with ``upsert`` so that re-ingesting a document
    overwrites its previous chunks instead of duplicating them.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    distance_metric:
        ``cosine`` | ``l2`` | ``ip``; only applied when the collection is created.
    """

    def __init__(
        self,
        collection_name: str,
        *,
        host: str = "localhost",
        port: int = 8000,
        distance_metric: str = "cosine",
    ) -> None:
        super().__init__(collection_name)
        self._host = host
        self._port = port
        self._client = chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": distance_metric},
        )

    # -- VectorIndexBase overrides --------------------------------------------

    def insert(self, records: Sequence[VectorRecord]) -> None:
        if not records:
            return
        self._collection.upsert(
            ids=[r.id for r in records],
            embeddings=[r.values for r in records],
            documents=[str(r.metadata.get("text", "")) for r in records],
            metadatas=[_flatten_metadata(r.metadata) for r in records],
        )

    def query(
        self,
        vector: list[float],
        *,
        top_k: int = 3,
        include_metadata: bool = True,
    ) -> list[RetrievalMatch]:
        include = ["metadatas", "distances"] if include_metadata else ["distances"]
        results = self._collection.query(
            query_embeddings=[vector],
            n_results=top_k,
            include=include,
        )

        ids = (results.get("ids") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]
        metas = (results.get("metadatas") or [[None] * len(ids)])[0]

        matches: list[RetrievalMatch] = []
        for record_id, meta, dist in zip(ids, metas, distances):
            # Chroma returns distances; convert to a 0-1 similarity score.
            score = 1.0 / (1.0 + dist) if dist is not None else None
            matches.append(
                RetrievalMatch(id=record_id, score=score, metadata=dict(meta or {}))
            )
        return matches

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    def delete(self, ids: list[str]) -> None:
        self._collection.delete(ids=ids)
