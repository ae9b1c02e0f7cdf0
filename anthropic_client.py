"""Thin wrapper around the Anthropic Messages API."""

from __future__ import annotations

import logging
from typing import Any

import anthropic

from errors import ModelQuotaExceededError, RewriteError

LOGGER = logging.getLogger(__name__)


class ClaudeChatModel:
    """Chat-style completion over the Anthropic SDK.

    Offers the same ``complete`` call as OpenAIChatModel so the rewriter
    does not care which provider is configured.
    """

    def __init__(self, api_key: str | None, model: str, timeout: float = 30.0, client: Any = None) -> None:
        if not api_key and client is None:
            raise RewriteError("ANTHROPIC_API_KEY environment variable is required")
        self.model = model
        self.client = client or anthropic.Anthropic(api_key=api_key, timeout=timeout)

    def complete(self, messages: list[dict[str, str]], *, temperature: float, max_tokens: int) -> str:
        """Call Claude and return the assistant reply as a string.

        A "system" role message is extracted and passed via the Anthropic
        API's dedicated system= parameter.
        """
        system: str | None = None
        filtered: list[dict[str, Any]] = []
        for msg in messages:
            if msg["role"] == "system":
                system = msg["content"]
            else:
                filtered.append({"role": msg["role"], "content": msg["content"]})

        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": filtered,
        }
        if system:
            kwargs["system"] = system

        LOGGER.debug("Calling Claude model=%s max_tokens=%s", self.model, max_tokens)
        try:
            response = self.client.messages.create(**kwargs)
        except anthropic.RateLimitError as exc:
            raise ModelQuotaExceededError(f"Anthropic capacity exceeded: {exc}") from exc
        except anthropic.APIStatusError as exc:
            # 529: API overloaded
            if exc.status_code == 529:
                raise ModelQuotaExceededError(f"Anthropic API overloaded: {exc}") from exc
            raise

        text_blocks = [
            block.text for block in response.content
            if isinstance(getattr(block, "text", None), str)
        ]
        return "".join(text_blocks).strip()
