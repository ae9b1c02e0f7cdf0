"""Shared typed models for the enhancement pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Article:
    """Article record as returned by the article store API."""

    article_id: int
    title: str
    content: str
    original_url: str | None = None
    is_ai_updated: bool = False
    ai_content: str | None = None
    citations: tuple[str, ...] = ()
    slug: str | None = None
    scraped_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_api(cls, payload: Any) -> Article:
        """Build an Article from the store's JSON ``data`` object."""
        if not isinstance(payload, dict):
            raise ValueError("Unexpected article payload shape: expected an object")

        article_id = payload.get("id")
        if article_id is None:
            raise ValueError("Article payload is missing 'id'")

        citations = payload.get("citations") or []
        if not isinstance(citations, list):
            citations = []

        return cls(
            article_id=article_id,
            title=_as_str(payload.get("title")) or "",
            content=_as_str(payload.get("content")) or "",
            original_url=_as_str(payload.get("original_url")),
            is_ai_updated=bool(payload.get("is_ai_updated")),
            ai_content=_as_str(payload.get("ai_content")),
            citations=tuple(c for c in citations if isinstance(c, str)),
            slug=_as_str(payload.get("slug")),
            scraped_at=_parse_datetime(payload.get("scraped_at")),
            created_at=_parse_datetime(payload.get("created_at")),
            updated_at=_parse_datetime(payload.get("updated_at")),
        )


@dataclass(frozen=True, slots=True)
class ReferenceCandidate:
    """A title/URL pair proposed by a reference locator."""

    title: str
    url: str


@dataclass(frozen=True, slots=True)
class ScrapedReference:
    """Reference text mined from an external page."""

    url: str
    title: str
    content: str


@dataclass(frozen=True, slots=True)
class ExtractedPage:
    """Best-effort plain text pulled out of an HTML document."""

    title: str
    body: str


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Outcome of one pipeline run."""

    article: Article
    enhanced_content: str
    citations: tuple[str, ...]
    references: tuple[ScrapedReference, ...] = field(default_factory=tuple)
    published: bool = False


def _parse_datetime(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None

    # The store returns ISO-8601 timestamps, usually with a trailing Z.
    value = raw.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _as_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None
