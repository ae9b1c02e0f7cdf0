"""Client for the article store's REST API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import requests

from errors import (
    ArticleNotFoundError,
    NoPendingArticleError,
    StoreConnectionError,
    StoreError,
    StoreValidationError,
)
from models import Article

REQUEST_TIMEOUT_SECONDS = 30

LOGGER = logging.getLogger(__name__)


class ArticleStoreClient:
    """Reads pending articles from the store and publishes enhanced content.

    Every call is a single synchronous request bounded by ``timeout``;
    nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def fetch_latest_pending(self) -> Article:
        """Newest article that has not been AI-enhanced yet."""
        response = self._request("GET", "/articles/latest")
        if response.status_code == 404:
            raise NoPendingArticleError("No articles pending AI update. All done!")
        return self._article(response, "Failed to fetch article")

    def get_article(self, article_id: int | str) -> Article:
        response = self._request("GET", f"/articles/{article_id}")
        if response.status_code == 404:
            raise ArticleNotFoundError(f"Article {article_id} not found")
        return self._article(response, "Failed to fetch article")

    def publish_ai(self, article_id: int | str, ai_content: str, citations: Sequence[str]) -> Article:
        """Store enhanced content and citations; the store flips is_ai_updated."""
        response = self._request(
            "POST",
            f"/articles/{article_id}/publish-ai",
            json={"ai_content": ai_content, "citations": list(citations)},
        )
        if response.status_code == 404:
            raise ArticleNotFoundError(f"Article {article_id} not found")

        body = _json_or_none(response)
        if isinstance(body, dict) and isinstance(body.get("errors"), dict):
            errors = _normalize_errors(body["errors"])
            messages = ", ".join(msg for field_msgs in errors.values() for msg in field_msgs)
            raise StoreValidationError(f"Validation failed: {messages}", errors=errors)

        return self._article(response, "Failed to publish")

    def health(self) -> dict[str, Any]:
        """Store health payload, e.g. ``{"status": "healthy", ...}``.

        Used as a pre-flight check so an unreachable store fails before Fetch.
        """
        response = self._request("GET", "/health")
        body = _json_or_none(response)
        if not response.ok or not isinstance(body, dict):
            raise StoreError(f"Store health check failed: HTTP {response.status_code}")
        return body

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        LOGGER.debug("Store request %s %s", method, url)
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.ConnectionError as exc:
            raise StoreConnectionError(
                f"Cannot connect to article store API at {self.base_url}. Is it running?"
            ) from exc
        except requests.Timeout as exc:
            raise StoreConnectionError(
                f"Article store API at {self.base_url} timed out after {self.timeout}s"
            ) from exc
        except requests.RequestException as exc:
            raise StoreError(f"Article store request failed: {exc}") from exc

    def _data(self, response: requests.Response, action: str) -> dict[str, Any]:
        """Unwrap ``{"success": true, "data": {...}}`` or raise StoreError."""
        if not response.ok:
            raise StoreError(f"{action}: HTTP {response.status_code}")

        body = _json_or_none(response)
        if not isinstance(body, dict) or not body.get("success") or not isinstance(body.get("data"), dict):
            raise StoreError(f"{action}: invalid API response format")
        return body["data"]

    def _article(self, response: requests.Response, action: str) -> Article:
        try:
            return Article.from_api(self._data(response, action))
        except ValueError as exc:
            raise StoreError(f"{action}: {exc}") from exc


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _normalize_errors(raw: dict[str, Any]) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for field_name, messages in raw.items():
        if isinstance(messages, str):
            messages = [messages]
        if isinstance(messages, list):
            errors[str(field_name)] = [str(msg) for msg in messages]
    return errors
