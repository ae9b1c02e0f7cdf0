"""OpenAI chat-completions client used by the rewrite engine."""

from __future__ import annotations

import logging
from typing import Any

import openai
from openai import OpenAI

from errors import ModelQuotaExceededError, RewriteError

LOGGER = logging.getLogger(__name__)

_QUOTA_ERROR_CODE = "insufficient_quota"


class OpenAIChatModel:
    """Chat-style completion over the OpenAI SDK.

    Built once at startup and handed to the rewriter; the underlying SDK
    client may be injected for tests.
    """

    def __init__(self, api_key: str | None, model: str, timeout: float = 30.0, client: Any = None) -> None:
        if not api_key and client is None:
            raise RewriteError("OPENAI_API_KEY environment variable is required")
        self.model = model
        self.client = client or OpenAI(api_key=api_key, timeout=timeout)

    def complete(self, messages: list[dict[str, str]], *, temperature: float, max_tokens: int) -> str:
        """Send role-tagged messages and return the reply text (may be empty)."""
        LOGGER.debug("Calling OpenAI model=%s max_tokens=%s", self.model, max_tokens)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            if getattr(exc, "code", None) == _QUOTA_ERROR_CODE:
                raise ModelQuotaExceededError(f"OpenAI quota exceeded: {exc}") from exc
            raise

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise RewriteError(f"Unexpected OpenAI response shape: {response}") from exc
        return (content or "").strip()
