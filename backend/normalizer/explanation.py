from typing import Any

from .classifier import Classification, FormatTag

EXPLANATION_KEYS = ("explanation", "summary")


def _coerce_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return " ".join(item.strip() for item in value if isinstance(item, str) and item.strip())
    return ""


def unwrap_placeholder_brackets(block: str) -> str:
    """
    Drop one outer [ ] pair left over from a literal template placeholder.

    "[The claim is false.]" becomes "The claim is false."; a block holding any
    other bracket (e.g. a markdown link) is left alone.
    """
    block = block.strip()
    if len(block) >= 2 and block.startswith("[") and block.endswith("]"):
        inner = block[1:-1]
        if "[" not in inner and "]" not in inner:
            return inner.strip()
    return block


def extract_explanation(classification: Classification) -> str:
    """Return the narrative portion of a classified model output."""
    tag = classification.tag

    if classification.is_json:
        payload = classification.payload or {}
        for key in EXPLANATION_KEYS:
            text = _coerce_text(payload.get(key))
            if text:
                return text
        return ""

    if tag is FormatTag.MARKDOWN_DIVIDED:
        block = "\n".join(classification.lines[:classification.divider_index])
        return unwrap_placeholder_brackets(block)

    if tag is FormatTag.INLINE_LINKS:
        block = "\n".join(line.strip() for line in classification.lines[:classification.source_start])
        return unwrap_placeholder_brackets(block)

    return (classification.text or "").strip()
