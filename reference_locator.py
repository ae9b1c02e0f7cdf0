"""Reference discovery: live SerpAPI search or a curated URL list."""

from __future__ import annotations

import logging
from typing import Any

import requests

from config import Settings
from filters import is_low_value_url
from models import ReferenceCandidate

SERPAPI_URL = "https://serpapi.com/search"
SEARCH_QUERY_SUFFIX = " AI chatbot blog"
SEARCH_RESULT_COUNT = 5

LOGGER = logging.getLogger(__name__)

# Known-scrapeable articles about chatbots and AI customer service.
CURATED_REFERENCES: tuple[ReferenceCandidate, ...] = (
    ReferenceCandidate(
        title="Chatbot Best Practices - Intercom",
        url="https://www.ibm.com/topics/chatbots",
    ),
    ReferenceCandidate(
        title="AI Customer Service Guide - IBM",
        url="https://www.salesforce.com/resources/articles/what-is-a-chatbot/",
    ),
    ReferenceCandidate(
        title="Building Better Chatbots - HubSpot",
        url="https://blog.hubspot.com/service/chatbot",
    ),
)


class CuratedReferenceLocator:
    """Returns the fixed curated list regardless of the query."""

    def __init__(self, count: int = 2) -> None:
        self.count = count

    def locate(self, query: str) -> list[ReferenceCandidate]:
        LOGGER.info("Using curated reference URLs (SerpAPI not configured)")
        return list(CURATED_REFERENCES[: self.count])


class SerpApiReferenceLocator:
    """Google results via SerpAPI, degrading to curated URLs when a call fails."""

    def __init__(
        self,
        api_key: str,
        count: int = 2,
        timeout: float = 30.0,
        fallback: CuratedReferenceLocator | None = None,
    ) -> None:
        self.api_key = api_key
        self.count = count
        self.timeout = timeout
        self.fallback = fallback or CuratedReferenceLocator(count)

    def locate(self, query: str) -> list[ReferenceCandidate]:
        LOGGER.info("Using SerpAPI for live search: %s", query)
        try:
            response = requests.get(
                SERPAPI_URL,
                params={
                    "q": query + SEARCH_QUERY_SUFFIX,
                    "api_key": self.api_key,
                    "num": SEARCH_RESULT_COUNT,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            return _parse_organic_results(response.json())[: self.count]
        except (requests.RequestException, ValueError, RuntimeError) as exc:
            LOGGER.warning("SerpAPI search failed, using curated URLs: %s", exc)
            return self.fallback.locate(query)


def build_locator(settings: Settings) -> CuratedReferenceLocator | SerpApiReferenceLocator:
    """Pick the locator strategy once, from SERPAPI_KEY presence."""
    curated = CuratedReferenceLocator(settings.reference_count)
    if not settings.serpapi_key:
        return curated
    return SerpApiReferenceLocator(
        api_key=settings.serpapi_key,
        count=settings.reference_count,
        timeout=settings.request_timeout_seconds,
        fallback=curated,
    )


def _parse_organic_results(payload: Any) -> list[ReferenceCandidate]:
    """Map SerpAPI ``organic_results`` into candidates, skipping low-value links."""
    if not isinstance(payload, dict):
        raise RuntimeError("Unexpected SerpAPI payload shape: expected an object")

    results = payload.get("organic_results") or []
    if not isinstance(results, list):
        raise RuntimeError("Unexpected SerpAPI payload shape: organic_results is not a list")

    candidates: list[ReferenceCandidate] = []
    for item in results:
        if not isinstance(item, dict):
            continue
        link = item.get("link")
        if not isinstance(link, str) or not link.strip() or is_low_value_url(link):
            continue
        title = item.get("title") if isinstance(item.get("title"), str) else ""
        candidates.append(ReferenceCandidate(title=title.strip(), url=link.strip()))
    return candidates
