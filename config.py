"""Environment-driven settings for the enhancement pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass

from errors import ConfigError

DEFAULT_STORE_API_URL = "http://localhost:8000/api"
DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"
DEFAULT_CLAUDE_MODEL = "claude-opus-4-6"
REWRITE_PROVIDERS = ("openai", "anthropic")


@dataclass(frozen=True, slots=True)
class Settings:
    """Configuration read once at startup."""

    store_api_url: str = DEFAULT_STORE_API_URL
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    anthropic_api_key: str | None = None
    claude_model: str = DEFAULT_CLAUDE_MODEL
    rewrite_provider: str = "openai"
    serpapi_key: str | None = None
    request_timeout_seconds: float = 30.0
    reference_count: int = 2
    scrape_delay_seconds: float = 1.0

    @property
    def model_api_key(self) -> str | None:
        """Credential for the selected rewrite provider, if any."""
        if self.rewrite_provider == "anthropic":
            return self.anthropic_api_key
        return self.openai_api_key

    @property
    def model_name(self) -> str:
        if self.rewrite_provider == "anthropic":
            return self.claude_model
        return self.openai_model


def load_settings() -> Settings:
    """Read Settings from the process environment.

    Call after ``load_dotenv()`` so values from a ``.env`` file are visible.
    """
    provider = (os.getenv("REWRITE_PROVIDER") or "openai").strip().lower()
    if provider not in REWRITE_PROVIDERS:
        raise ConfigError(
            f"REWRITE_PROVIDER must be one of {', '.join(REWRITE_PROVIDERS)}, got {provider!r}"
        )

    reference_count = _env_int("REFERENCE_COUNT", 2)
    if reference_count < 1:
        raise ConfigError(f"REFERENCE_COUNT must be at least 1, got {reference_count}")

    return Settings(
        store_api_url=(os.getenv("LARAVEL_API_URL") or DEFAULT_STORE_API_URL).rstrip("/"),
        openai_api_key=_env_str("OPENAI_API_KEY"),
        openai_model=_env_str("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        anthropic_api_key=_env_str("ANTHROPIC_API_KEY"),
        claude_model=_env_str("CLAUDE_MODEL") or DEFAULT_CLAUDE_MODEL,
        rewrite_provider=provider,
        serpapi_key=_env_str("SERPAPI_KEY"),
        request_timeout_seconds=_env_float("REQUEST_TIMEOUT_SECONDS", 30.0),
        reference_count=reference_count,
        scrape_delay_seconds=_env_float("SCRAPE_DELAY_SECONDS", 1.0),
    )


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else None


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value
