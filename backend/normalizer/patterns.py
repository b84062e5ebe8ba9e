import re

# List bullet ("-", "*", "+", "•") or a short ordinal ("1." / "2)")
BULLET = r"(?:[-*+•]+|\d{1,2}[.)])"

# [Title](https://url), allowing one level of balanced parentheses in the url
_LINK = (
    r"\[(?P<title>[^\[\]]+)\]"
    r"\(\s*(?P<url>https?://[^\s()]*(?:\([^\s()]*\)[^\s()]*)*)\s*\)"
)

MARKDOWN_LINK = re.compile(_LINK, re.IGNORECASE)

BULLETED_LINK = re.compile(r"^\s*" + BULLET + r"\s*[*_]{0,2}" + _LINK, re.IGNORECASE)

LINK_LINE = re.compile(r"^\s*(?:" + BULLET + r"\s*)?[*_]{0,2}" + _LINK, re.IGNORECASE)

BARE_URL = re.compile(r"https?://[^\s<>\[\]\"'`]+", re.IGNORECASE)

LEADING_BULLET = re.compile(r"^\s*" + BULLET + r"\s+")

DIVIDER = re.compile(
    r"^\s*(?:#{1,6}\s*)?[*_]{0,2}\s*(?:sources|references)\s*[*_]{0,2}\s*:?\s*[*_]{0,2}\s*$",
    re.IGNORECASE,
)

# "Sources: [NASA](...)" with the first entry on the divider line itself
INLINE_DIVIDER = re.compile(
    r"^\s*(?:#{1,6}\s*)?[*_]{0,2}\s*(?:sources|references)\s*[*_]{0,2}\s*:\s*[*_]{0,2}\s*(?P<rest>\S.*)$",
    re.IGNORECASE,
)

VERDICT_LINE = re.compile(
    r"^\s*[*_]{0,2}\s*verdict\s*[*_]{0,2}\s*:\s*[*_]{0,2}\s*(?P<verdict>[A-Za-z_ ]+?)\s*[*_]{0,2}\s*$",
    re.IGNORECASE,
)

WHITESPACE = re.compile(r"\s+")

SENTENCE_BREAK = re.compile(r"(?<=\.)\s+")
