import json
import re
from typing import Any, Optional, Dict

# Deeply nested arrays raise RecursionError; oversized integers raise ValueError.
_JSON_ERRORS = (ValueError, RecursionError)


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except _JSON_ERRORS:
        try:
            cleaned = re.sub(r"[\x00-\x1f]", " ", candidate)
            value = json.loads(cleaned)
        except _JSON_ERRORS:
            return None
    return value if isinstance(value, dict) else None


def extract_json_block(text: str) -> Optional[Dict[str, Any]]:
    """Extract the first balanced JSON object embedded in text."""
    if not text or not isinstance(text, str):
        return None

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return _loads_object(text[start : i + 1])
    return None


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse text as a JSON object, falling back to the first embedded object."""
    if not text or not isinstance(text, str):
        return None
    stripped = text.strip()
    if stripped.startswith("{"):
        parsed = _loads_object(stripped)
        if parsed is not None:
            return parsed
    return extract_json_block(stripped)
