from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from utils.parsing import parse_json_object
from .fences import strip_code_fences
from .patterns import DIVIDER, INLINE_DIVIDER, LINK_LINE, VERDICT_LINE

JSON_MARKER_KEYS = ("verdict", "explanation", "summary")


class FormatTag(str, Enum):
    STRICT_JSON = "STRICT_JSON"
    TOOL_JSON = "TOOL_JSON"
    MARKDOWN_DIVIDED = "MARKDOWN_DIVIDED"
    INLINE_LINKS = "INLINE_LINKS"
    PLAIN = "PLAIN"


@dataclass(frozen=True)
class Classification:
    """Shape of a model output plus the landmarks the extractors need."""
    tag: FormatTag
    text: str = ""
    lines: Tuple[str, ...] = ()
    payload: Optional[Dict[str, Any]] = None
    divider_index: Optional[int] = None
    source_start: Optional[int] = None
    inline_source: str = ""
    verdict_hint: Optional[str] = None

    @property
    def is_json(self) -> bool:
        return self.tag in (FormatTag.STRICT_JSON, FormatTag.TOOL_JSON)

    @property
    def is_ambiguous(self) -> bool:
        return self.tag is FormatTag.PLAIN


def split_verdict_line(text: str) -> Tuple[Optional[str], str]:
    """Lift a leading "Verdict: X" line off free-text output."""
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        match = VERDICT_LINE.match(line)
        if not match:
            return None, text
        remaining = "\n".join(lines[:i] + lines[i + 1:]).strip()
        return match.group("verdict").strip(), remaining
    return None, text


def classify_payload(payload: Dict[str, Any]) -> Classification:
    """Tag a pre-parsed function-call argument payload."""
    return Classification(tag=FormatTag.TOOL_JSON, payload=payload)


def classify_format(raw_text: str) -> Classification:
    """
    Decide which known shape a raw model output matches.

    Order: JSON object carrying a verdict/explanation/summary key, then a
    "Sources"/"References" divider line, then the first line that opens with
    a markdown link. Anything else is PLAIN. Never raises.

    The JSON object may be embedded in prose ("Here is my answer: {...}").
    When it carries a marker key it wins and the surrounding prose is
    discarded.
    """
    text = strip_code_fences(raw_text or "")

    payload = parse_json_object(text)
    if payload is not None and any(key in payload for key in JSON_MARKER_KEYS):
        return Classification(tag=FormatTag.STRICT_JSON, text=text, payload=payload)

    verdict_hint, text = split_verdict_line(text)
    lines = tuple(text.splitlines())

    for i, line in enumerate(lines):
        if DIVIDER.match(line):
            return Classification(
                tag=FormatTag.MARKDOWN_DIVIDED,
                text=text,
                lines=lines,
                divider_index=i,
                source_start=i + 1,
                verdict_hint=verdict_hint,
            )
        inline = INLINE_DIVIDER.match(line)
        if inline:
            return Classification(
                tag=FormatTag.MARKDOWN_DIVIDED,
                text=text,
                lines=lines,
                divider_index=i,
                source_start=i + 1,
                inline_source=inline.group("rest").strip(),
                verdict_hint=verdict_hint,
            )

    for i, line in enumerate(lines):
        if LINK_LINE.match(line):
            return Classification(
                tag=FormatTag.INLINE_LINKS,
                text=text,
                lines=lines,
                source_start=i,
                verdict_hint=verdict_hint,
            )

    return Classification(tag=FormatTag.PLAIN, text=text, lines=lines, verdict_hint=verdict_hint)
