"""Best-effort title and body extraction from raw HTML."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from bs4 import BeautifulSoup

from models import ExtractedPage

LOGGER = logging.getLogger(__name__)

MAX_BODY_CHARS = 5000
MIN_SELECTOR_CHARS = 100

# Removed before any extraction runs.
NOISE_SELECTORS: tuple[str, ...] = (
    "script",
    "style",
    "nav",
    "footer",
    "header",
    "aside",
    ".sidebar",
    ".comments",
    ".ad",
    ".advertisement",
)

# Tried in order; the first selector matching at least one element wins.
CONTENT_SELECTORS: tuple[str, ...] = (
    "article",
    ".post-content",
    ".entry-content",
    ".article-body",
    "main",
    ".content",
)

_TITLE_SUFFIX_RE = re.compile(r"\s*[|\-–].*")


def extract_page(html: str) -> ExtractedPage:
    """Extract a plain-text title and body from an HTML document.

    Never raises: unusable markup yields empty strings, which callers must
    check for.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    strip_noise(soup)

    title = extract_title(soup)
    body = normalize_text(extract_body(soup))[:MAX_BODY_CHARS].strip()
    return ExtractedPage(title=title, body=body)


def strip_noise(soup: BeautifulSoup) -> None:
    """Drop scripts, navigation, ads and similar chrome in place."""
    for element in soup.select(", ".join(NOISE_SELECTORS)):
        element.decompose()


def extract_with_selector(soup: BeautifulSoup, selector: str) -> str | None:
    """Return the text of every element matching selector, or None if none match."""
    elements = soup.select(selector)
    if not elements:
        return None
    return "".join(element.get_text() for element in elements)


def extract_paragraphs(soup: BeautifulSoup) -> str:
    """Concatenate the text of every paragraph, separated by blank lines."""
    return "\n\n".join(p.get_text() for p in soup.find_all("p"))


def selector_extractors() -> list[Callable[[BeautifulSoup], str | None]]:
    """One extraction function per entry in CONTENT_SELECTORS, in order."""
    return [
        lambda soup, selector=selector: extract_with_selector(soup, selector)
        for selector in CONTENT_SELECTORS
    ]


def extract_body(soup: BeautifulSoup) -> str:
    content = ""
    for extractor in selector_extractors():
        text = extractor(soup)
        if text is not None:
            content = text
            break

    if len(normalize_text(content)) < MIN_SELECTOR_CHARS:
        LOGGER.debug("Content selectors yielded too little text; using paragraph fallback")
        content = extract_paragraphs(soup)
    return content


def extract_title(soup: BeautifulSoup) -> str:
    """First <h1>, else <title>, with any trailing "| Site Name" removed."""
    title = ""
    heading = soup.find("h1")
    if heading is not None:
        title = heading.get_text()
    if not title.strip() and soup.title is not None:
        title = soup.title.get_text()

    title = " ".join(title.split())
    return _TITLE_SUFFIX_RE.sub("", title).strip()


def normalize_text(text: str) -> str:
    """Collapse whitespace within lines and blank-line runs, then trim."""
    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{2,}", "\n\n", text)
    return text.strip()
