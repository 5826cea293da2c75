"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

import pytest

from grounded_rag.config import Settings
from grounded_rag.ingestion.embedder import EmbeddingService
from grounded_rag.retrieval.memory_store import InMemoryVectorIndex
from grounded_rag.retrieval.models import VectorRecord


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes for the external collaborators ────────────────────────────────


class FakeEmbedder(EmbeddingService):
    """Deterministic hash-based vectors; records every bulk call."""

    def __init__(self, dim: int = 8, fail_on: str | None = None) -> None:
        self.dim = dim
        self.fail_on = fail_on
        self.calls: list[list[str]] = []

    def _embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.fail_on is not None and any(self.fail_on in t for t in texts):
            raise RuntimeError("embedding backend unavailable")
        return [self.vector_for(t) for t in texts]

    def vector_for(self, text: str) -> list[float]:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [b / 255.0 for b in digest[: self.dim]]


class RecordingIndex(InMemoryVectorIndex):
    """In-memory index that also remembers every insert batch."""

    def __init__(self) -> None:
        super().__init__("test-collection")
        self.batches: list[list[VectorRecord]] = []
        self.queries: list[dict] = []

    def insert(self, records: Sequence[VectorRecord]) -> None:
        self.batches.append(list(records))
        super().insert(records)

    def query(self, vector, *, top_k=3, include_metadata=True):  # noqa: ANN001, ANN201
        self.queries.append({"vector": vector, "top_k": top_k, "include_metadata": include_metadata})
        return super().query(vector, top_k=top_k, include_metadata=include_metadata)


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        llm_api_endpoint="https://llm.test/v1/chat/completions",
        llm_api_key="sk-test",
        llm_model_name="test-model",
        vector_index_backend="memory",
        chunk_size=60,
        chunk_overlap=10,
        insert_batch_size=5,
        top_k=3,
    )


@pytest.fixture()
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def index() -> RecordingIndex:
    return RecordingIndex()


@pytest.fixture()
def embedder_factory() -> type[FakeEmbedder]:
    """The fake embedder class, for tests that need a failing variant."""
    return FakeEmbedder
