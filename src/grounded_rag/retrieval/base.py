"""Abstract base class for vector-index backends.

Adding a new backend (Pinecone, Qdrant, Cloudflare Vectorize …) only
requires subclassing :class:`VectorIndexBase` and implementing the three
abstract methods.  Ingestion and retrieval are backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from grounded_rag.retrieval.models import RetrievalMatch, VectorRecord


class VectorIndexBase(ABC):
    """Backend-agnostic vector-index interface.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / index / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def insert(self, records: Sequence[VectorRecord]) -> None:
        """Write *records*, overwriting any existing record with the same ID.

        Callers keep ``len(records)`` under the backend's per-call limit.
        Raises on failure; there is no partial-success return value.
        """
        ...

    @abstractmethod
    def query(
        self,
        vector: list[float],
        *,
        top_k: int = 3,
        include_metadata: bool = True,
    ) -> list[RetrievalMatch]:
        """Return at most *top_k* nearest records, best match first.

        Parameters
        ----------
        vector:
            Dense query embedding; same dimensionality as the stored records.
        top_k:
            Maximum number of matches.
        include_metadata:
            When ``False`` the matches carry an empty ``metadata`` dict.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def delete(self, ids: list[str]) -> None:
        """Delete records by their IDs.  Optional — raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support delete")
