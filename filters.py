"""Heuristic filter for search results that make poor reference articles."""

from __future__ import annotations

from urllib.parse import urlsplit

# Hosts whose pages carry little scrapeable article text (video, short-form
# social). Subdomains such as m.youtube.com match as well.
_LOW_VALUE_DOMAINS: frozenset[str] = frozenset({
    "youtube.com",
    "youtu.be",
    "vimeo.com",
    "tiktok.com",
    "dailymotion.com",
    "instagram.com",
})


def is_low_value_url(url: str) -> bool:
    """Return True if the URL should not be used as a reference.

    Unparseable URLs and non-HTTP schemes are treated as low value.
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return True

    if parts.scheme not in ("http", "https") or not parts.hostname:
        return True

    host = parts.hostname.lower()
    return any(host == domain or host.endswith(f".{domain}") for domain in _LOW_VALUE_DOMAINS)
