"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

# Hard per-call insert cap of the vector index; batches must stay below it.
MAX_INSERT_BATCH_SIZE = 100


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file.

    Core components never read this ambiently: the HTTP shell builds one
    instance and passes it to every collaborator at construction time.
    """

    # Upstream chat-completion API
    llm_api_endpoint: str = Field(
        default="",
        description=(
            "Full URL of the OpenAI-compatible chat-completion endpoint, e.g. "
            "'https://llm.example.com/v1/chat/completions'. Required for queries."
        ),
    )
    llm_api_key: str = Field(default="", description="Bearer credential for the upstream LLM")
    llm_model_name: str = Field(default="gpt-4o-mini", description="Model identifier sent upstream")
    llm_timeout_seconds: float = Field(default=60.0, gt=0)

    # Embedding
    embedding_model: str = "BAAI/bge-base-en-v1.5"

    # Vector index
    vector_index_backend: Literal["chroma", "memory"] = "chroma"
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "grounded_rag"

    # Document store
    document_source: Literal["directory", "s3"] = "directory"
    documents_dir: str = "./data"
    s3_bucket: str = ""
    s3_prefix: str = ""
    s3_endpoint_url: str = Field(
        default="",
        description="Custom S3 endpoint (Cloudflare R2, MinIO). Empty means AWS.",
    )
    s3_region: str = "auto"

    # Chunking / ingestion
    chunk_size: int = Field(default=300, gt=0)
    chunk_overlap: int = Field(default=50, ge=0)
    insert_batch_size: int = Field(default=50, ge=1, le=MAX_INSERT_BATCH_SIZE)
    continue_on_error: bool = Field(
        default=False,
        description="Log and skip a document whose chunking/embedding fails instead of aborting.",
    )

    # Retrieval
    top_k: int = Field(default=3, gt=0)

    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @model_validator(mode="after")
    def _check_chunking(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings used by the HTTP shell."""
    return Settings()
