"""Generation gateway — one call to an OpenAI-compatible chat-completion API.

The upstream endpoint is any server exposing ``POST`` with the
``{model, messages, stream}`` request body and the
``{"choices": [{"message": {"content": ...}}]}`` response envelope
(OpenAI, vLLM, most proxies).  Nothing is retried here: a non-2xx answer
is raised as :class:`UpstreamError` with the body verbatim, and a 2xx
answer without the expected envelope is a :class:`ResponseShapeError`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from grounded_rag.config import Settings
from grounded_rag.errors import ConfigurationError, ResponseShapeError, UpstreamError

logger = logging.getLogger(__name__)


def extract_answer(payload: Any) -> str:
    """Return ``payload["choices"][0]["message"]["content"]``.

    Raises :class:`ResponseShapeError` if any step of the path is missing,
    of the wrong type, or if the content is empty.
    """
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ResponseShapeError(
            "Could not parse the answer from the model's response: "
            "choices[0].message.content not found"
        ) from exc

    if not isinstance(content, str) or not content:
        raise ResponseShapeError(
            "Could not parse the answer from the model's response: "
            f"content is {type(content).__name__} {content!r}"
        )
    return content


class GenerationGateway:
    """Forward a rendered prompt to the upstream LLM and return its answer.

    Parameters
    ----------
    settings:
        Supplies ``llm_api_endpoint`` (required), ``llm_api_key``,
        ``llm_model_name`` and ``llm_timeout_seconds``.
    session:
        Optional :class:`requests.Session` for connection reuse.
    """

    def __init__(self, settings: Settings, *, session: requests.Session | None = None) -> None:
        if not settings.llm_api_endpoint:
            logger.critical("LLM_API_ENDPOINT is not configured")
            raise ConfigurationError("Server configuration error: Model API endpoint is missing.")
        self.endpoint = settings.llm_api_endpoint
        self.model = settings.llm_model_name
        self.timeout = settings.llm_timeout_seconds
        self._api_key = settings.llm_api_key
        self._session = session

    def build_request(self, prompt: str) -> dict[str, Any]:
        """Request body: a single user message, streaming disabled."""
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
        }

    def generate(self, prompt: str) -> str:
        """Send *prompt* upstream and return the first choice's content."""
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        post = self._session.post if self._session is not None else requests.post
        response = post(
            self.endpoint,
            json=self.build_request(prompt),
            headers=headers,
            timeout=self.timeout,
        )

        if not 200 <= response.status_code < 300:
            logger.error(
                "Custom LLM API Error: Status %d %s, Response Body: %s",
                response.status_code,
                response.reason,
                response.text,
            )
            raise UpstreamError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("LLM returned a non-JSON body: %s", response.text)
            raise ResponseShapeError(
                "Could not parse the answer from the model's response: body is not JSON"
            ) from exc

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Received data from LLM: %s", json.dumps(payload, ensure_ascii=False, indent=2))

        try:
            return extract_answer(payload)
        except ResponseShapeError:
            logger.error("Failed to extract answer from LLM response: %s", response.text)
            raise
