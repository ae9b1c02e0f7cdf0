"""CLI entrypoint for the article enhancement pipeline."""

from __future__ import annotations

import argparse
import dataclasses
import functools
import logging
import sys

from dotenv import load_dotenv

from anthropic_client import ClaudeChatModel
from config import Settings, load_settings
from errors import ArticleEnhancerError
from llm_client import OpenAIChatModel
from pipeline import EnhancementPipeline, count_words
from reference_collector import ReferenceCollector, fetch_page
from reference_locator import build_locator
from rewriter import ChatModel, build_rewriter
from store_client import ArticleStoreClient

# Checked in order against the error message; first match wins.
_ERROR_HINTS: tuple[tuple[str, str], ...] = (
    ("No articles pending", "All articles have been processed! Run the scraper to add more."),
    ("OPENAI_API_KEY", "Set OPENAI_API_KEY in your .env file (https://platform.openai.com/api-keys)."),
    ("ANTHROPIC_API_KEY", "Set ANTHROPIC_API_KEY in your .env file."),
    ("Cannot connect", "Make sure the article store API is running (php artisan serve)."),
    ("timed out", "The article store API is slow to respond; check it or raise REQUEST_TIMEOUT_SECONDS."),
    ("Validation failed", "The store rejected the enhanced article; see the field errors above."),
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        description="Enhance the latest stored article with references, AI rewriting and citations",
    )
    parser.add_argument(
        "--article-id",
        default=None,
        help="Enhance this article instead of the latest pending one",
    )
    parser.add_argument(
        "--references",
        type=int,
        default=None,
        help="Number of reference articles to use (overrides REFERENCE_COUNT)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run every stage but skip the publish call",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def hint_for(error: BaseException) -> str | None:
    """One-line actionable hint for a recognizable error message."""
    message = str(error)
    for needle, hint in _ERROR_HINTS:
        if needle in message:
            return hint
    return None


def build_model(settings: Settings) -> ChatModel | None:
    """Model client for the configured provider, or None without a credential."""
    if not settings.model_api_key:
        return None
    if settings.rewrite_provider == "anthropic":
        return ClaudeChatModel(
            api_key=settings.anthropic_api_key,
            model=settings.claude_model,
            timeout=settings.request_timeout_seconds,
        )
    return OpenAIChatModel(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout=settings.request_timeout_seconds,
    )


def build_pipeline(settings: Settings) -> EnhancementPipeline:
    """Wire every stage once; strategies are fixed for the whole run."""
    return EnhancementPipeline(
        store=ArticleStoreClient(settings.store_api_url, timeout=settings.request_timeout_seconds),
        locator=build_locator(settings),
        collector=ReferenceCollector(
            fetch=functools.partial(fetch_page, timeout=settings.request_timeout_seconds),
            delay_seconds=settings.scrape_delay_seconds,
        ),
        rewriter=build_rewriter(build_model(settings)),
        reference_count=settings.reference_count,
    )


def log_configuration(settings: Settings) -> None:
    logging.info("Configuration check:")
    logging.info("  Store API: %s", settings.store_api_url)
    logging.info(
        "  Rewrite provider: %s (%s)",
        settings.rewrite_provider,
        "configured" if settings.model_api_key else "not set, will use template fallback",
    )
    logging.info("  Model: %s", settings.model_name)
    logging.info("  Search: %s", "SerpAPI" if settings.serpapi_key else "curated reference URLs")
    logging.info("  References per article: %s", settings.reference_count)


def run(settings: Settings, article_id: str | None = None, dry_run: bool = False) -> int:
    """Run one pipeline pass and map the outcome to a process exit code."""
    try:
        pipeline = build_pipeline(settings)
        status = pipeline.store.health()
        logging.info("Store API reachable (status=%s)", status.get("status", "unknown"))
        result = pipeline.run(article_id=article_id, dry_run=dry_run)
    except ArticleEnhancerError as exc:
        logging.error("ERROR: %s", exc)
        hint = hint_for(exc)
        if hint:
            logging.info("Hint: %s", hint)
        return 1

    logging.info(
        "Workflow complete%s. article=%r original_words=%s enhanced_words=%s citations=%s",
        " (dry-run, nothing published)" if dry_run else "",
        result.article.title,
        count_words(result.article.content),
        count_words(result.enhanced_content),
        len(result.citations),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute the pipeline."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        settings = load_settings()
    except ArticleEnhancerError as exc:
        logging.error("ERROR: %s", exc)
        return 1

    if args.references is not None:
        if args.references < 1:
            logging.error("ERROR: --references must be at least 1")
            return 1
        settings = dataclasses.replace(settings, reference_count=args.references)

    log_configuration(settings)
    if not settings.model_api_key:
        logging.info("TIP: set a model API key in .env for real AI enhancement")

    return run(settings, article_id=args.article_id, dry_run=args.dry_run)


if __name__ == "__main__":
    sys.exit(main())
