"""Query pipeline — question in, grounded answer out.

Steps run strictly in sequence::

    query ─► embed ─► vector index ─► context block ─► prompt ─► LLM ─► answer

Each step is a separate collaborator so that every one of them can be
replaced by a fake in tests.  Errors are not caught here; they travel to
the HTTP layer, which is the only place that picks status codes.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from grounded_rag.errors import InvalidInputError
from grounded_rag.generation.gateway import GenerationGateway
from grounded_rag.generation.prompts import build_prompt
from grounded_rag.retrieval.retriever import ContextRetriever

logger = logging.getLogger(__name__)


class QueryResult(BaseModel):
    """Outcome of one :meth:`QueryPipeline.answer` call."""

    answer: str
    context: str
    prompt: str


def validate_query(query: Any) -> str:
    """Return *query* unchanged if it is a non-blank string."""
    if not isinstance(query, str) or not query.strip():
        raise InvalidInputError("Query is required and must be a non-empty string.")
    return query


class QueryPipeline:
    """Retrieve context for a question and ask the upstream model.

    Parameters
    ----------
    retriever:
        Builds the context block.
    gateway:
        Talks to the chat-completion endpoint.
    top_k:
        Overrides the retriever's default number of matches.
    """

    def __init__(
        self,
        retriever: ContextRetriever,
        gateway: GenerationGateway,
        *,
        top_k: int | None = None,
    ) -> None:
        self._retriever = retriever
        self._gateway = gateway
        self.top_k = top_k

    def answer(self, query: Any) -> QueryResult:
        query = validate_query(query)

        context = self._retriever.retrieve(query, top_k=self.top_k)
        if not context:
            logger.info("No context retrieved for query; the model will be told to decline")

        prompt = build_prompt(context, query)
        answer = self._gateway.generate(prompt)
        return QueryResult(answer=answer, context=context, prompt=prompt)
