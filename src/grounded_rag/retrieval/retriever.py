"""Context retriever — query embedding, nearest-neighbour search, context assembly.

Usage::

    from grounded_rag.retrieval.retriever import ContextRetriever

    retriever = ContextRetriever(embedder, index, default_k=3)
    context   = retriever.retrieve("How does re-ingestion avoid duplicates?")

An empty return value is a normal outcome (nothing relevant is stored);
it is passed on to prompt assembly so the model can say it cannot answer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from grounded_rag.ingestion.embedder import EmbeddingService
from grounded_rag.retrieval.base import VectorIndexBase
from grounded_rag.retrieval.models import RetrievalMatch

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n---\n"


def assemble_context(
    matches: Iterable[RetrievalMatch],
    separator: str = CONTEXT_SEPARATOR,
) -> str:
    """Join the stored text of *matches* in ranked order.

    Matches without a non-empty ``text`` metadata field are dropped.
    No re-ranking happens here; the index order is kept as-is.
    """
    return separator.join(m.text for m in matches if m.text)


class ContextRetriever:
    """Embed a query, search the vector index, build the context block.

    Parameters
    ----------
    embedder:
        Embedding service used for the query vector.
    index:
        Vector index holding the ingested chunks.
    default_k:
        Number of matches requested when :meth:`search` gets no ``top_k``.
    """

    def __init__(
        self,
        embedder: EmbeddingService,
        index: VectorIndexBase,
        *,
        default_k: int = 3,
    ) -> None:
        if default_k <= 0:
            raise ValueError(f"default_k must be > 0, got {default_k}")
        self._embedder = embedder
        self._index = index
        self.default_k = default_k

    def search(self, query: str, *, top_k: int | None = None) -> list[RetrievalMatch]:
        """Return the ranked matches for *query*, metadata included."""
        k = self.default_k if top_k is None else top_k
        if k <= 0:
            raise ValueError(f"top_k must be > 0, got {k}")

        vector = self._embedder.embed([query])[0]
        matches = self._index.query(vector, top_k=k, include_metadata=True)
        logger.debug(
            "Vector index returned %d matches (top_k=%d) from %s",
            len(matches),
            k,
            sorted({m.source for m in matches}),
        )
        return matches

    def retrieve(self, query: str, *, top_k: int | None = None) -> str:
        """Return the context block for *query*, possibly ``""``."""
        return assemble_context(self.search(query, top_k=top_k))
