"""Rewrite engine: model-backed enhancement with a template fallback."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from errors import InsufficientOutputError, ModelQuotaExceededError, RewriteError
from models import Article, ScrapedReference

REWRITE_TEMPERATURE = 0.7
REWRITE_MAX_TOKENS = 2000
REFERENCE_EXCERPT_CHARS = 1500
MIN_OUTPUT_CHARS = 100

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert content editor. Your task is to enhance and rewrite articles to make them more comprehensive, engaging, and professional.

RULES:
1. Maintain the original article's core message and intent
2. Incorporate relevant insights from the reference articles
3. Improve clarity, structure, and readability
4. Use professional but accessible language
5. Add helpful examples or explanations where appropriate
6. Keep the enhanced version similar in length (within 50% of original)
7. DO NOT include any meta-commentary like "Here is the rewritten article"
8. Output ONLY the enhanced article content"""

KEY_INSIGHTS_BLOCK = """## Key Insights

This article explores important concepts in modern customer engagement and AI technology. The integration of intelligent chatbots and automated support systems continues to reshape how businesses interact with their customers.

### Main Takeaways

• **Efficiency**: Automated systems handle routine queries, freeing human agents for complex issues
• **Availability**: 24/7 support ensures customers always have access to help
• **Consistency**: AI provides uniform, high-quality responses across all interactions
• **Scalability**: Handle growing customer bases without proportional staff increases

### Looking Forward

As AI technology advances, we can expect even more sophisticated and helpful automated support experiences that seamlessly blend machine efficiency with human empathy."""


class ChatModel(Protocol):
    def complete(self, messages: list[dict[str, str]], *, temperature: float, max_tokens: int) -> str: ...


class TemplateRewriter:
    """Appends the static Key Insights section; performs no synthesis."""

    def rewrite(self, article: Article, references: Sequence[ScrapedReference]) -> str:
        return f"{article.content.strip()}\n\n---\n\n{KEY_INSIGHTS_BLOCK}".strip()


class ModelRewriter:
    """Rewrites the article with one language-model call.

    A quota or capacity refusal degrades to the template strategy; any
    other model failure is fatal.
    """

    def __init__(self, model: ChatModel, fallback: TemplateRewriter | None = None) -> None:
        self.model = model
        self.fallback = fallback or TemplateRewriter()

    def rewrite(self, article: Article, references: Sequence[ScrapedReference]) -> str:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(article, references)},
        ]

        try:
            enhanced = self.model.complete(
                messages,
                temperature=REWRITE_TEMPERATURE,
                max_tokens=REWRITE_MAX_TOKENS,
            ).strip()
        except ModelQuotaExceededError as exc:
            LOGGER.warning("Model quota exceeded, using template enhancement: %s", exc)
            return self.fallback.rewrite(article, references)
        except RewriteError:
            raise
        except Exception as exc:
            raise RewriteError(f"Model error: {exc}") from exc

        if len(enhanced) < MIN_OUTPUT_CHARS:
            raise InsufficientOutputError(
                f"Model returned insufficient content ({len(enhanced)} characters)"
            )
        return enhanced


def build_user_prompt(article: Article, references: Sequence[ScrapedReference]) -> str:
    """Original article plus a bounded excerpt of each reference."""
    reference_context = "\n\n---\n\n".join(
        f"REFERENCE {index} - {ref.title}:\n{ref.content[:REFERENCE_EXCERPT_CHARS]}"
        for index, ref in enumerate(references, start=1)
    )
    return (
        f'Please enhance this article about "{article.title}".\n\n'
        f"ORIGINAL ARTICLE:\n{article.content}\n\n"
        "---\n\n"
        f"REFERENCE ARTICLES FOR STYLE AND INSIGHTS:\n{reference_context}\n\n"
        "---\n\n"
        "Write the enhanced version now:"
    )


def build_rewriter(model: ChatModel | None) -> ModelRewriter | TemplateRewriter:
    """Model-backed when a client was configured, template-backed otherwise."""
    if model is None:
        return TemplateRewriter()
    return ModelRewriter(model)
