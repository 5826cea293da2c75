"""Embedding service contract and the sentence-transformer implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from grounded_rag.errors import ResponseShapeError

logger = logging.getLogger(__name__)


class EmbeddingService(ABC):
    """Turns texts into fixed-dimension float vectors.

    Subclasses implement :meth:`_embed`; :meth:`embed` validates that one
    vector came back per input text, in order.
    """

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed *texts* in a single bulk call.

        Raises
        ------
        ValueError
            If *texts* is empty.
        ResponseShapeError
            If the backend returned a different number of vectors.
        """
        if not texts:
            raise ValueError("embed() needs at least one text")
        vectors = self._embed(list(texts))
        if len(vectors) != len(texts):
            raise ResponseShapeError(
                f"Embedding service returned {len(vectors)} vectors for {len(texts)} texts"
            )
        return [list(v) for v in vectors]

    @abstractmethod
    def _embed(self, texts: list[str]) -> list[list[float]]: ...


class HuggingFaceEmbeddingService(EmbeddingService):
    """Sentence-transformer embeddings via ``langchain-huggingface``.

    Parameters
    ----------
    model_name:
        HuggingFace model id, e.g. ``BAAI/bge-base-en-v1.5``.
    normalize_embeddings:
        Whether to L2-normalise vectors (recommended for cosine similarity).
    """

    def __init__(self, model_name: str, *, normalize_embeddings: bool = True) -> None:
        from langchain_huggingface import HuggingFaceEmbeddings

        logger.info("Loading embedding model %s", model_name)
        self.model_name = model_name
        self._embedder = HuggingFaceEmbeddings(
            model_name=model_name,
            encode_kwargs={"normalize_embeddings": normalize_embeddings},
        )

    def _embed(self, texts: list[str]) -> list[list[float]]:
        return self._embedder.embed_documents(texts)
