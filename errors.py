"""Exception types raised across the enhancement pipeline."""

from __future__ import annotations


class ArticleEnhancerError(RuntimeError):
    """Base class for every failure that aborts a pipeline run."""


class ConfigError(ArticleEnhancerError):
    """An environment setting could not be parsed."""


class StoreError(ArticleEnhancerError):
    """The article store API failed or answered unexpectedly."""


class NoPendingArticleError(StoreError):
    """Every stored article has already been enhanced."""


class ArticleNotFoundError(StoreError):
    """A requested article id does not exist in the store."""


class StoreConnectionError(StoreError):
    """The article store API could not be reached."""


class StoreValidationError(StoreError):
    """The store rejected a publish payload.

    ``errors`` maps field names to the store's validation messages.
    """

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


class RewriteError(ArticleEnhancerError):
    """The language model call failed."""


class InsufficientOutputError(RewriteError):
    """The language model returned too little text to use."""


class ModelQuotaExceededError(ArticleEnhancerError):
    """The model provider refused the call for quota or capacity reasons.

    Recoverable: the rewriter degrades to the template strategy.
    """


class PipelineError(ArticleEnhancerError):
    """A stage rejected its input."""
