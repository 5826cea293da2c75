"""Domain models shared by the ingestion and query pipelines."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

CHUNK_ID_INFIX = "-chunk-"


class Chunk(BaseModel):
    """A contiguous, size-bounded slice of one document's text.

    Attributes
    ----------
    text:
        The chunk content, whitespace-trimmed.
    source_key:
        Storage key of the document the chunk was cut from.
    index:
        Ordinal position within the document; dense and starting at 0.
    """

    text: str
    source_key: str = ""
    index: int = Field(default=0, ge=0)

    @property
    def record_id(self) -> str:
        """Deterministic vector-record ID, stable across re-ingestion runs."""
        return f"{self.source_key}{CHUNK_ID_INFIX}{self.index}"


class VectorRecord(BaseModel):
    """The unit of storage in the vector index.

    ``metadata`` always carries ``text`` (the chunk content) and ``source``
    (the document key) so that a query result can be turned back into
    context without a second lookup.
    """

    id: str
    values: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: Chunk, values: list[float]) -> VectorRecord:
        return cls(
            id=chunk.record_id,
            values=list(values),
            metadata={
                "text": chunk.text,
                "source": chunk.source_key,
                "chunk_index": chunk.index,
            },
        )


class RetrievalMatch(BaseModel):
    """One ranked hit returned by :meth:`VectorIndexBase.query`."""

    id: str
    score: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        """The stored chunk text, or ``""`` when it is missing or not a string."""
        value = self.metadata.get("text")
        return value if isinstance(value, str) else ""

    @property
    def source(self) -> str:
        return str(self.metadata.get("source", "unknown"))
