"""Exception taxonomy shared by the ingestion and query pipelines.

Core components raise these and never swallow them; only the HTTP layer
(:mod:`grounded_rag.serving.app`) turns them into status codes.
"""

from __future__ import annotations


class RAGError(Exception):
    """Base class for every error raised on purpose by this package."""


class ConfigurationError(RAGError):
    """A required endpoint or credential is missing. Fatal, never retried."""


class InvalidInputError(RAGError, ValueError):
    """The caller supplied a missing, empty or wrongly typed value."""


class UpstreamError(RAGError):
    """The generation service answered with a non-2xx status.

    The status code and body are kept verbatim so the caller can forward
    them (and decide whether a retry makes sense, e.g. on 429).
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Upstream model API returned {status_code}: {body}")


class ResponseShapeError(RAGError):
    """A service answered successfully but with an unexpected envelope.

    This is a contract mismatch between us and the model/proxy, not a
    transient fault, so it must not be retried automatically.
    """
