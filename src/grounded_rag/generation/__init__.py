"""
Generation — prompt rendering and the upstream chat-completion call.

Public API
----------
- :func:`build_prompt` — render context + question into the grounding prompt.
- :class:`GenerationGateway` — one POST to the OpenAI-compatible endpoint.
- :class:`QueryPipeline` — retrieve → prompt → generate.
"""

from grounded_rag.generation.gateway import GenerationGateway, extract_answer
from grounded_rag.generation.pipeline import QueryPipeline, QueryResult, validate_query
from grounded_rag.generation.prompts import FALLBACK_ANSWER, build_prompt

__all__ = [
    "FALLBACK_ANSWER",
    "GenerationGateway",
    "QueryPipeline",
    "QueryResult",
    "build_prompt",
    "extract_answer",
    "validate_query",
]
