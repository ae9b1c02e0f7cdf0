"""Tests for the five-stage enhancement pipeline."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

import main
from config import Settings
from errors import InsufficientOutputError, NoPendingArticleError, PipelineError
from models import Article, ReferenceCandidate, ScrapedReference
from pipeline import EnhancementPipeline, count_words
from reference_collector import FALLBACK_REFERENCE_URL
from reference_locator import CURATED_REFERENCES
from rewriter import KEY_INSIGHTS_BLOCK

_CONTENT = " ".join(["word"] * 50)
_ARTICLE_JSON = {
    "id": 11,
    "title": "X",
    "content": _CONTENT,
    "is_ai_updated": False,
    "citations": [],
    "created_at": "2024-01-01T00:00:00Z",
    "updated_at": "2024-01-01T00:00:00Z",
}
_REFERENCE_HTML = (
    "<html><body><h1>Reference | Site</h1><article>"
    + "Useful reference material about customer support automation. " * 8
    + "</article></body></html>"
)


def _store_response(status: int, payload: object) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.json.return_value = payload
    return response


def _store_session(latest: MagicMock) -> MagicMock:
    """Healthy store whose article GETs return ``latest`` and whose POST echoes a published article."""

    def request(method: str, url: str, timeout: float, json: dict | None = None) -> MagicMock:
        if url.endswith("/health"):
            return _store_response(200, {"status": "healthy"})
        if method == "GET":
            return latest
        published = {
            **_ARTICLE_JSON,
            "is_ai_updated": True,
            "ai_content": json["ai_content"],
            "citations": json["citations"],
        }
        return _store_response(200, {"success": True, "data": published})

    session = MagicMock()
    session.headers = {}
    session.request.side_effect = request
    return session


def _page_response(html: str) -> MagicMock:
    response = MagicMock()
    response.text = html
    return response


def _settings() -> Settings:
    return Settings(scrape_delay_seconds=0)


def _publish_calls(session: MagicMock) -> list:
    return [c for c in session.request.call_args_list if c.args[0] == "POST"]


# ---------------------------------------------------------------------------
# End-to-end scenarios through main.run with HTTP mocked out
# ---------------------------------------------------------------------------

def test_no_credentials_happy_path_publishes_template_rewrite() -> None:
    session = _store_session(_store_response(200, {"success": True, "data": _ARTICLE_JSON}))

    with patch("store_client.requests.Session", return_value=session), \
         patch("reference_collector.requests.get", return_value=_page_response(_REFERENCE_HTML)) as mock_get:
        exit_code = main.run(_settings())

    assert exit_code == 0
    fetched_urls = [c.args[0] for c in mock_get.call_args_list]
    assert fetched_urls == [c.url for c in CURATED_REFERENCES[:2]]

    publishes = _publish_calls(session)
    assert len(publishes) == 1
    assert publishes[0].args[1].endswith("/articles/11/publish-ai")
    payload = publishes[0].kwargs["json"]
    assert payload["citations"] == [c.url for c in CURATED_REFERENCES[:2]]
    assert payload["ai_content"].startswith(f"{_CONTENT}\n\n---\n\n{KEY_INSIGHTS_BLOCK}")
    assert "## References & Sources" in payload["ai_content"]


def test_no_pending_article_exits_non_zero_without_publishing() -> None:
    session = _store_session(_store_response(404, {"success": False, "message": "No articles pending AI update"}))

    with patch("store_client.requests.Session", return_value=session), \
         patch("reference_collector.requests.get") as mock_get:
        exit_code = main.run(_settings())

    assert exit_code == 1
    assert _publish_calls(session) == []
    mock_get.assert_not_called()


def test_malformed_store_article_exits_non_zero_without_publishing() -> None:
    session = _store_session(_store_response(200, {"success": True, "data": {"title": "X", "content": "c"}}))

    with patch("store_client.requests.Session", return_value=session), \
         patch("reference_collector.requests.get") as mock_get:
        exit_code = main.run(_settings())

    assert exit_code == 1
    assert _publish_calls(session) == []
    mock_get.assert_not_called()


def test_unreachable_store_fails_before_fetch() -> None:
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = requests.ConnectionError("Connection refused")

    hint_for = main.hint_for
    with patch("store_client.requests.Session", return_value=session), \
         patch("main.hint_for", wraps=hint_for) as mock_hint:
        exit_code = main.run(_settings())

    assert exit_code == 1
    session.request.assert_called_once()
    assert session.request.call_args.args[1].endswith("/health")
    assert "running" in hint_for(mock_hint.call_args.args[0])


def test_all_reference_fetches_fail_publishes_single_placeholder_citation() -> None:
    session = _store_session(_store_response(200, {"success": True, "data": _ARTICLE_JSON}))

    with patch("store_client.requests.Session", return_value=session), \
         patch("reference_collector.requests.get", side_effect=requests.HTTPError("503 Service Unavailable")):
        exit_code = main.run(_settings())

    assert exit_code == 0
    payload = _publish_calls(session)[0].kwargs["json"]
    assert payload["citations"] == [FALLBACK_REFERENCE_URL]
    assert payload["ai_content"].count(f"[{FALLBACK_REFERENCE_URL}]") == 1


# ---------------------------------------------------------------------------
# Orchestrator behaviour with stage doubles
# ---------------------------------------------------------------------------

_ARTICLE = Article(article_id=4, title="Chatbots", content="Original content here.")
_REFS = [ScrapedReference(url="https://r.example.com/", title="R", content="r" * 300)]


def _pipeline(**overrides: object) -> tuple[EnhancementPipeline, dict[str, MagicMock]]:
    stages = {
        "store": MagicMock(),
        "locator": MagicMock(),
        "collector": MagicMock(),
        "rewriter": MagicMock(),
    }
    stages["store"].fetch_latest_pending.return_value = _ARTICLE
    stages["store"].publish_ai.return_value = _ARTICLE
    stages["locator"].locate.return_value = [ReferenceCandidate(title="R", url="https://r.example.com/")]
    stages["collector"].collect.return_value = _REFS
    stages["rewriter"].rewrite.return_value = "Rewritten body " * 20
    stages.update(overrides)
    return EnhancementPipeline(reference_count=3, **stages), stages


def test_stages_run_in_order_with_expected_arguments() -> None:
    pipeline, stages = _pipeline()

    result = pipeline.run()

    stages["locator"].locate.assert_called_once_with("Chatbots")
    stages["collector"].collect.assert_called_once_with(stages["locator"].locate.return_value, 3)
    stages["rewriter"].rewrite.assert_called_once_with(_ARTICLE, _REFS)
    article_id, content, citations = stages["store"].publish_ai.call_args.args
    assert article_id == 4
    assert citations == ("https://r.example.com/",)
    assert content.startswith("Rewritten body")
    assert "1. [https://r.example.com/](https://r.example.com/)" in content
    assert result.published is True
    assert result.citations == ("https://r.example.com/",)


def test_rewrite_failure_aborts_before_publish() -> None:
    pipeline, stages = _pipeline()
    stages["rewriter"].rewrite.side_effect = InsufficientOutputError("too short")

    with pytest.raises(InsufficientOutputError):
        pipeline.run()

    stages["store"].publish_ai.assert_not_called()


def test_fetch_failure_stops_all_later_stages() -> None:
    pipeline, stages = _pipeline()
    stages["store"].fetch_latest_pending.side_effect = NoPendingArticleError("No articles pending")

    with pytest.raises(NoPendingArticleError):
        pipeline.run()

    stages["locator"].locate.assert_not_called()
    stages["collector"].collect.assert_not_called()


def test_dry_run_skips_publish() -> None:
    pipeline, stages = _pipeline()

    result = pipeline.run(dry_run=True)

    assert result.published is False
    assert "## References & Sources" in result.enhanced_content
    stages["store"].publish_ai.assert_not_called()


def test_explicit_article_id_is_fetched_by_id() -> None:
    pipeline, stages = _pipeline()
    stages["store"].get_article.return_value = _ARTICLE

    pipeline.run(article_id="4")

    stages["store"].get_article.assert_called_once_with("4")
    stages["store"].fetch_latest_pending.assert_not_called()


def test_already_enhanced_article_is_rejected() -> None:
    pipeline, stages = _pipeline()
    stages["store"].get_article.return_value = Article(
        article_id=4, title="Done", content="c", is_ai_updated=True, ai_content="a", citations=("u",)
    )

    with pytest.raises(PipelineError, match="already been enhanced"):
        pipeline.run(article_id=4)

    stages["locator"].locate.assert_not_called()


@pytest.mark.parametrize("text, expected", [(None, 0), ("", 0), ("  one two\nthree ", 3)])
def test_count_words(text: str | None, expected: int) -> None:
    assert count_words(text) == expected
