"""In-process vector index for local development and tests.

Brute-force cosine similarity over a dict keyed by record ID, so inserts
have the same upsert semantics as the real backends.  One instance is
shared by the ingestion and query routes, which run on different worker
threads; every access to the dict goes through ``self._lock``.
"""

from __future__ import annotations

import heapq
import threading
from collections.abc import Sequence

from grounded_rag.retrieval.base import VectorIndexBase
from grounded_rag.retrieval.models import RetrievalMatch, VectorRecord


class InMemoryVectorIndex(VectorIndexBase):
    """Keeps every record in a Python dict and searches by brute force."""

    def __init__(self, collection_name: str = "memory") -> None:
        super().__init__(collection_name)
        self._records: dict[str, VectorRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._records

    def insert(self, records: Sequence[VectorRecord]) -> None:
        with self._lock:
            for record in records:
                self._records[record.id] = record

    def query(
        self,
        vector: list[float],
        *,
        top_k: int = 3,
        include_metadata: bool = True,
    ) -> list[RetrievalMatch]:
        # Score a snapshot so writers are not blocked for the whole scan.
        with self._lock:
            snapshot = list(self._records.values())

        scored = heapq.nlargest(
            top_k,
            ((self._cosine_similarity(vector, r.values), r) for r in snapshot),
            key=lambda item: item[0],
        )
        return [
            RetrievalMatch(
                id=record.id,
                score=score,
                metadata=dict(record.metadata) if include_metadata else {},
            )
            for score, record in scored
        ]

    def health_check(self) -> bool:
        return True

    def delete(self, ids: list[str]) -> None:
        with self._lock:
            for record_id in ids:
                self._records.pop(record_id, None)

    @staticmethod
    def _cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
        numerator = sum(x * y for x, y in zip(a, b))
        denom_a = sum(x * x for x in a) ** 0.5 or 1.0
        denom_b = sum(x * x for x in b) ** 0.5 or 1.0
        return numerator / (denom_a * denom_b)
