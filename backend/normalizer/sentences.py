from typing import List

from .patterns import SENTENCE_BREAK, WHITESPACE


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    if not text:
        return ""
    return WHITESPACE.sub(" ", text).strip()


def split_sentences(text: str) -> List[str]:
    """Split on a period followed by whitespace; no terminator means one sentence."""
    normalized = normalize_whitespace(text)
    if not normalized:
        return []
    return SENTENCE_BREAK.split(normalized)


def limit_sentences(text: str, max_sentences: int = 3) -> str:
    normalized = normalize_whitespace(text)
    parts = split_sentences(normalized)
    if len(parts) <= max_sentences:
        return normalized
    return " ".join(parts[:max_sentences])
