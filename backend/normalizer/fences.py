import re

FENCE = "```"

# Info string on the opening fence line, e.g. ```json or ```markdown
_INFO_STRING = re.compile(r"^[A-Za-z0-9_+.-]*[ \t]*\r?\n")


def strip_code_fences(text: str) -> str:
    """
    Remove a code fence that wraps the whole text.

    Only a fence that both opens and closes the trimmed text is removed;
    fences in the middle of the text are body content and stay. Nested
    wrappers are peeled until the text is no longer fence-wrapped, so the
    function is idempotent. The result is always trimmed.
    """
    if not text:
        return ""

    stripped = text.strip()
    while stripped.startswith(FENCE) and stripped.endswith(FENCE):
        if len(stripped) < 2 * len(FENCE):
            return ""
        inner = stripped[len(FENCE):-len(FENCE)]
        inner = _INFO_STRING.sub("", inner, count=1)
        stripped = inner.strip()
    return stripped
