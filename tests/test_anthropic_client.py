from unittest.mock import MagicMock

import anthropic
import pytest

from anthropic_client import ClaudeChatModel
from errors import ModelQuotaExceededError, RewriteError


def _client_returning(text: str) -> MagicMock:
    block = MagicMock()
    block.text = text
    response = MagicMock()
    response.content = [block]

    client = MagicMock()
    client.messages.create.return_value = response
    return client


def test_system_message_is_passed_separately() -> None:
    client = _client_returning(" Rewritten. ")
    model = ClaudeChatModel(api_key="key", model="claude-test", client=client)

    result = model.complete(
        [
            {"role": "system", "content": "You are an editor."},
            {"role": "user", "content": "Rewrite this."},
        ],
        temperature=0.7,
        max_tokens=2000,
    )

    assert result == "Rewritten."
    client.messages.create.assert_called_once_with(
        model="claude-test",
        max_tokens=2000,
        temperature=0.7,
        messages=[{"role": "user", "content": "Rewrite this."}],
        system="You are an editor.",
    )


def test_rate_limit_is_translated_to_quota_error() -> None:
    client = MagicMock()
    client.messages.create.side_effect = anthropic.RateLimitError(
        "rate limited", response=MagicMock(), body=None
    )
    model = ClaudeChatModel(api_key="key", model="claude-test", client=client)

    with pytest.raises(ModelQuotaExceededError):
        model.complete([{"role": "user", "content": "Hi"}], temperature=0.7, max_tokens=10)


def test_overloaded_is_translated_to_quota_error() -> None:
    client = MagicMock()
    client.messages.create.side_effect = anthropic.InternalServerError(
        "overloaded", response=MagicMock(status_code=529), body=None
    )
    model = ClaudeChatModel(api_key="key", model="claude-test", client=client)

    with pytest.raises(ModelQuotaExceededError, match="overloaded"):
        model.complete([{"role": "user", "content": "Hi"}], temperature=0.7, max_tokens=10)


def test_other_server_errors_propagate() -> None:
    client = MagicMock()
    client.messages.create.side_effect = anthropic.InternalServerError(
        "boom", response=MagicMock(status_code=500), body=None
    )
    model = ClaudeChatModel(api_key="key", model="claude-test", client=client)

    with pytest.raises(anthropic.InternalServerError):
        model.complete([{"role": "user", "content": "Hi"}], temperature=0.7, max_tokens=10)


def test_missing_api_key_raises() -> None:
    with pytest.raises(RewriteError, match="ANTHROPIC_API_KEY"):
        ClaudeChatModel(api_key=None, model="claude-test")
