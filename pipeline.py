"""Pipeline orchestrator: Fetch -> Locate -> Collect -> Rewrite -> Publish."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from citations import format_with_citations
from errors import PipelineError
from models import Article, PipelineResult, ReferenceCandidate, ScrapedReference
from reference_collector import ReferenceCollector
from store_client import ArticleStoreClient

LOGGER = logging.getLogger(__name__)


class ReferenceLocator(Protocol):
    def locate(self, query: str) -> list[ReferenceCandidate]: ...


class Rewriter(Protocol):
    def rewrite(self, article: Article, references: Sequence[ScrapedReference]) -> str: ...


def count_words(text: str | None) -> int:
    return len(text.split()) if text else 0


class EnhancementPipeline:
    """Runs the five stages for one article, strictly in order.

    Any stage error propagates and aborts the run before publishing.
    Re-running the pipeline is the only retry mechanism.
    """

    def __init__(
        self,
        store: ArticleStoreClient,
        locator: ReferenceLocator,
        collector: ReferenceCollector,
        rewriter: Rewriter,
        reference_count: int = 2,
    ) -> None:
        self.store = store
        self.locator = locator
        self.collector = collector
        self.rewriter = rewriter
        self.reference_count = reference_count

    def run(self, article_id: int | str | None = None, dry_run: bool = False) -> PipelineResult:
        article = self.fetch(article_id)
        candidates = self.locate(article)
        references = self.collect(candidates)
        enhanced = self.rewrite(article, references)

        citations = tuple(ref.url for ref in references)
        content = format_with_citations(enhanced, citations)

        if dry_run:
            LOGGER.info("[dry-run] Would publish article id=%s with %s citations", article.article_id, len(citations))
            return PipelineResult(
                article=article,
                enhanced_content=content,
                citations=citations,
                references=tuple(references),
                published=False,
            )

        LOGGER.info("Stage 5/5: publishing enhanced article id=%s", article.article_id)
        published = self.store.publish_ai(article.article_id, content, citations)
        LOGGER.info("Published article id=%s (is_ai_updated=%s)", published.article_id, published.is_ai_updated)
        return PipelineResult(
            article=published,
            enhanced_content=content,
            citations=citations,
            references=tuple(references),
            published=True,
        )

    def fetch(self, article_id: int | str | None = None) -> Article:
        if article_id is None:
            LOGGER.info("Stage 1/5: fetching latest pending article")
            article = self.store.fetch_latest_pending()
        else:
            LOGGER.info("Stage 1/5: fetching article id=%s", article_id)
            article = self.store.get_article(article_id)
            if article.is_ai_updated:
                raise PipelineError(f"Article {article_id} has already been enhanced")

        LOGGER.info("Found: %r (%s words)", article.title, count_words(article.content))
        return article

    def locate(self, article: Article) -> list[ReferenceCandidate]:
        LOGGER.info("Stage 2/5: searching for references: %r", article.title)
        candidates = self.locator.locate(article.title)
        LOGGER.info("Found %s reference URLs", len(candidates))
        for index, candidate in enumerate(candidates, start=1):
            LOGGER.info("  %s. %s", index, candidate.url)
        return candidates

    def collect(self, candidates: Sequence[ReferenceCandidate]) -> list[ScrapedReference]:
        LOGGER.info("Stage 3/5: scraping reference articles")
        references = self.collector.collect(candidates, self.reference_count)
        for index, ref in enumerate(references, start=1):
            LOGGER.info("  %s. %s (%s words)", index, ref.title, count_words(ref.content))
        return references

    def rewrite(self, article: Article, references: Sequence[ScrapedReference]) -> str:
        LOGGER.info("Stage 4/5: rewriting article with %s", type(self.rewriter).__name__)
        enhanced = self.rewriter.rewrite(article, references)
        LOGGER.info(
            "Article enhanced: %s -> %s words",
            count_words(article.content),
            count_words(enhanced),
        )
        return enhanced
