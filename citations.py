"""Citation section appended to enhanced articles."""

from __future__ import annotations

from collections.abc import Sequence

CITATIONS_HEADING = "## References & Sources"
AI_DISCLOSURE = (
    "*This article has been enhanced using AI, incorporating insights from the above reference sources.*"
)


def format_with_citations(content: str, citations: Sequence[str]) -> str:
    """Append a numbered markdown list of citation URLs.

    An empty citation list returns ``content`` unchanged.
    """
    if not citations:
        return content

    lines = "\n".join(f"{index}. [{url}]({url})" for index, url in enumerate(citations, start=1))
    return f"{content}\n\n---\n\n{CITATIONS_HEADING}\n\n{lines}\n\n---\n\n{AI_DISCLOSURE}\n"
