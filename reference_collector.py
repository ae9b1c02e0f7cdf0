"""Scrape reference candidates into usable reference text."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

import requests

from models import ReferenceCandidate, ScrapedReference
from text_extractor import extract_page

MIN_REFERENCE_CHARS = 200
REQUEST_TIMEOUT_SECONDS = 30
BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "text/html,application/xhtml+xml",
}

FALLBACK_REFERENCE_URL = "https://example.com/ai-best-practices"
FALLBACK_REFERENCE_TITLE = "AI Chatbot Best Practices"
FALLBACK_REFERENCE_CONTENT = (
    "AI chatbots have transformed customer service by providing instant, "
    "24/7 support. Best practices include: understanding user intent through "
    "natural language processing, maintaining context across conversations, "
    "providing graceful handoffs to human agents, and continuously learning "
    "from interactions. The most effective chatbots combine automation "
    "efficiency with a personalized, human-like experience. Key metrics "
    "include resolution rate, customer satisfaction, and response time."
)

LOGGER = logging.getLogger(__name__)


def fetch_page(url: str, timeout: float = REQUEST_TIMEOUT_SECONDS) -> str:
    """GET a page with browser-like headers and return its HTML."""
    response = requests.get(url, headers=BROWSER_HEADERS, timeout=timeout)
    response.raise_for_status()
    return response.text


def fallback_reference() -> ScrapedReference:
    """Built-in reference used when nothing could be scraped."""
    return ScrapedReference(
        url=FALLBACK_REFERENCE_URL,
        title=FALLBACK_REFERENCE_TITLE,
        content=FALLBACK_REFERENCE_CONTENT,
    )


class ReferenceCollector:
    """Drives page fetching and text extraction over ordered candidates.

    Candidates are fetched one at a time with a fixed pause between
    fetches. A failing candidate is logged and skipped; it is never retried.
    """

    def __init__(
        self,
        fetch: Callable[[str], str] | None = None,
        delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.fetch = fetch or fetch_page
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def collect(self, candidates: Sequence[ReferenceCandidate], count: int) -> list[ScrapedReference]:
        """Return between 1 and ``count`` references for the candidates."""
        references: list[ScrapedReference] = []
        fetched = 0

        for candidate in candidates:
            if len(references) >= count:
                break

            if fetched and self.delay_seconds > 0:
                self.sleep(self.delay_seconds)
            fetched += 1

            try:
                LOGGER.info("Scraping reference: %s", candidate.url)
                page = extract_page(self.fetch(candidate.url))
            except Exception as exc:  # any single-page failure is skipped
                LOGGER.warning("Reference scrape failed for %s: %s", candidate.url, exc)
                continue

            if len(page.body) <= MIN_REFERENCE_CHARS:
                LOGGER.warning(
                    "Reference %s yielded only %s characters, skipping",
                    candidate.url,
                    len(page.body),
                )
                continue

            references.append(
                ScrapedReference(
                    url=candidate.url,
                    title=page.title or candidate.title,
                    content=page.body,
                )
            )
            LOGGER.info("Accepted reference %s (%s words)", candidate.url, len(page.body.split()))

        if not references:
            LOGGER.warning("No reference could be scraped; using built-in reference content")
            references.append(fallback_reference())

        return references
