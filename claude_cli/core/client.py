"""Chat transport: one user message in, the raw response body out."""

from __future__ import annotations

import logging
from typing import List

import openai
from openai import OpenAI  # type: ignore

from .errors import ApiError

logger = logging.getLogger(__name__)

# Anthropic serves an OpenAI-compatible API under this prefix.
ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1/"
ANTHROPIC_VERSION = "2023-06-01"


def create_client(api_key: str) -> OpenAI:
    """Build an SDK client pointed at the Anthropic endpoint with retries off."""
    return OpenAI(
        api_key=api_key,
        base_url=ANTHROPIC_BASE_URL,
        max_retries=0,
        default_headers={
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        },
    )


class ClaudeClientWrapper:
    """Thin wrapper around the OpenAI Python SDK returning raw bodies."""

    def __init__(self, client: OpenAI):
        self.client = client

    def chat(self, message: str, model: str) -> str:
        """Send *message* as a single user turn and return the response body.

        Any non-success status is raised as :class:`ApiError` carrying the
        body the server sent back.
        """
        logger.debug("sending %d characters to model %s", len(message), model)
        try:
            raw = self.client.chat.completions.with_raw_response.create(
                model=model,
                messages=[{"role": "user", "content": message}],
            )
        except openai.APIStatusError as exc:
            body = exc.response.text
            logger.error("chat request failed with status %s", exc.status_code)
            raise ApiError(
                f"API request failed: {body}", status_code=exc.status_code, body=body
            ) from exc
        except openai.APIError as exc:
            logger.error("chat request failed: %s", exc)
            raise ApiError(f"API request failed: {exc}") from exc

        text = raw.http_response.text
        logger.debug("received %d characters", len(text))
        return text

    def list_models(self) -> List[str]:
        try:
            return [model.id for model in self.client.models.list()]
        except openai.APIStatusError as exc:
            body = exc.response.text
            raise ApiError(
                f"API request failed: {body}", status_code=exc.status_code, body=body
            ) from exc
        except openai.APIError as exc:
            raise ApiError(f"API request failed: {exc}") from exc
