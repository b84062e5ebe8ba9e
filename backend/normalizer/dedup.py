from typing import List
from urllib.parse import urlparse

from models.fact_checks import Source

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """
    Comparison key for a url.

    Scheme-insensitive; host lowercased without "www." or a default port;
    trailing slash and fragment dropped; query kept.
    """
    if not url:
        return ""
    try:
        parsed = urlparse(url.strip())
        host = (parsed.hostname or "").lower()
        port = parsed.port
    except ValueError:
        return url.strip().lower()

    if host.startswith("www."):
        host = host[len("www."):]
    if port and port != _DEFAULT_PORTS.get(parsed.scheme.lower()):
        host = f"{host}:{port}"

    path = parsed.path.rstrip("/")
    key = f"{host}{path}"
    if parsed.query:
        key = f"{key}?{parsed.query}"
    return key


def source_key(source: Source) -> str:
    url = source.get("url") or ""
    if url:
        return normalize_url(url)
    return "title:" + (source.get("title") or "").strip().lower()


def dedupe_sources(sources: List[Source], max_sources: int = 3) -> List[Source]:
    """Drop later duplicates, keep first-seen order, cap the list."""
    seen = set()
    unique: List[Source] = []
    for source in sources:
        key = source_key(source)
        if key in seen:
            continue
        seen.add(key)
        unique.append(source)
        if len(unique) >= max_sources:
            break
    return unique
