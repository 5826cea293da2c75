"""FastAPI application exposing the query and ingestion pipelines.

This module is the only place that maps exceptions to HTTP status codes.
Run locally with::

    uvicorn grounded_rag.serving.app:app --port 8787
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from grounded_rag.config import Settings, get_settings
from grounded_rag.errors import (
    ConfigurationError,
    InvalidInputError,
    ResponseShapeError,
    UpstreamError,
)
from grounded_rag.generation.pipeline import QueryPipeline
from grounded_rag.ingestion.pipeline import IngestionPipeline
from grounded_rag.retrieval.base import VectorIndexBase
from grounded_rag.services import build_ingestion_pipeline, build_query_pipeline, build_vector_index

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ANN201
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    yield


app = FastAPI(
    title="Grounded RAG API",
    version="0.1.0",
    description="Retrieval-augmented question answering over ingested documents.",
    lifespan=lifespan,
)


# ── Request / Response schemas ────────────────────────────────────────
class QueryResponse(BaseModel):
    """Answer returned by the upstream model."""

    answer: str


# ── Dependencies ──────────────────────────────────────────────────────
def get_query_pipeline(settings: Settings = Depends(get_settings)) -> QueryPipeline:
    """Raises :class:`ConfigurationError` before any request processing."""
    return build_query_pipeline(settings)


def get_ingestion_pipeline(settings: Settings = Depends(get_settings)) -> IngestionPipeline:
    return build_ingestion_pipeline(settings)


def get_vector_index(settings: Settings = Depends(get_settings)) -> VectorIndexBase:
    return build_vector_index(settings)


# ── Error mapping ─────────────────────────────────────────────────────
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(ConfigurationError)
async def _configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    return _error(500, str(exc))


@app.exception_handler(InvalidInputError)
async def _invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
    return _error(400, str(exc))


@app.exception_handler(UpstreamError)
async def _upstream_error(request: Request, exc: UpstreamError) -> JSONResponse:
    status_code = exc.status_code if 400 <= exc.status_code <= 599 else 502
    return _error(status_code, exc.body)


@app.exception_handler(ResponseShapeError)
async def _response_shape_error(request: Request, exc: ResponseShapeError) -> JSONResponse:
    logger.error("Upstream response contract mismatch: %s", exc)
    return _error(500, str(exc))


@app.exception_handler(Exception)
async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error while serving %s %s", request.method, request.url.path)
    return _error(500, "Internal server error.")


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
def health(index: VectorIndexBase = Depends(get_vector_index)) -> JSONResponse:
    """Readiness probe: 200 when the vector index answers, 503 otherwise."""
    if index.health_check():
        return JSONResponse(content={"status": "ok"})
    return JSONResponse(status_code=503, content={"status": "unavailable"})


@app.post("/query", response_model=QueryResponse)
async def query(
    request: Request,
    pipeline: QueryPipeline = Depends(get_query_pipeline),
) -> QueryResponse:
    """Answer ``{"query": "..."}`` from the ingested documents."""
    try:
        payload: Any = await request.json()
    except ValueError:
        logger.exception("Request body is not valid JSON")
        return _error(500, "Internal server error: request body is not valid JSON.")

    question = payload.get("query") if isinstance(payload, dict) else None
    result = await run_in_threadpool(pipeline.answer, question)
    return QueryResponse(answer=result.answer)


@app.post("/ingest", response_class=PlainTextResponse)
def ingest(pipeline: IngestionPipeline = Depends(get_ingestion_pipeline)) -> str:
    """Re-ingest every document from the configured store."""
    written = pipeline.run()
    return f"Ingestion process with chunking completed successfully! {written} vectors written."


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("grounded_rag.serving.app:app", host="0.0.0.0", port=8787)
