"""Async client for an OpenAI-compatible chat completion endpoint.

The client is built once from :class:`~src.shared.config.LLMConfig` and
passed to whichever step needs a completion.  Each call is a single round
trip; there is no retry.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from src.shared.config import LLMConfig
from src.shared.errors import LLMError

logger = logging.getLogger(__name__)


class LLMClient:
    """Sends a system + user prompt and returns the completion text."""

    def __init__(
        self,
        config: LLMConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or LLMConfig()
        self._transport = transport

    async def complete(self, system: str, user: str, model: str | None = None) -> str:
        """Return the assistant message for a two-message conversation.

        Raises:
            LLMError: If no API key is configured, the request fails, or the
                response has no message content.
        """
        if not self.config.api_key:
            raise LLMError("OPENAI_API_KEY is not set")

        payload: dict[str, Any] = {
            "model": model or self.config.schema_model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        url = self.config.base_url.rstrip("/") + "/chat/completions"
        headers = {"Authorization": f"Bearer {self.config.api_key}"}

        logger.info("Requesting completion from %s (model=%s)", url, payload["model"])
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout, transport=self._transport
            ) as client:
                resp = await client.post(url, json=payload, headers=headers)
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPStatusError as exc:
            raise LLMError(
                f"LLM request failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise LLMError(f"LLM request failed: {exc}") from exc
        except ValueError as exc:
            raise LLMError("LLM response is not valid JSON") from exc

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMError("LLM response has no message content") from exc
        if not isinstance(content, str):
            raise LLMError("LLM response has no message content")
        return content
