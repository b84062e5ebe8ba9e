import re
from typing import Any, Iterable, List, Optional
from urllib.parse import urlparse

from models.fact_checks import Source
from .classifier import Classification, FormatTag
from .patterns import BARE_URL, BULLETED_LINK, LEADING_BULLET, MARKDOWN_LINK, WHITESPACE

_TRAILING_URL_PUNCTUATION = ".,;:!?*_'\""
_EMPTY_BRACKETS = re.compile(r"\(\s*\)|\[\s*\]|<\s*>")
_EDGE_SEPARATORS = " \t-–—:|,;*_"
_HAS_WORD = re.compile(r"\w")


def is_valid_url(url: str) -> bool:
    """True for an absolute http(s) URL with a host."""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
        return parsed.scheme.lower() in ("http", "https") and bool(parsed.hostname)
    except ValueError:
        return False


def hostname_title(url: str) -> str:
    """Lowercased hostname without a leading "www.", or "" for an unusable url."""
    if not is_valid_url(url):
        return ""
    host = (urlparse(url.strip()).hostname or "").lower()
    if host.startswith("www."):
        host = host[len("www."):]
    return host


def clean_bare_url(url: str) -> str:
    """Trim sentence punctuation and unbalanced closing parentheses off a bare url."""
    while url:
        if url[-1] in _TRAILING_URL_PUNCTUATION:
            url = url[:-1]
        elif url[-1] == ")" and url.count(")") > url.count("("):
            url = url[:-1]
        else:
            break
    return url


def clean_title(text: str) -> str:
    if not text:
        return ""
    text = LEADING_BULLET.sub("", text)
    text = _EMPTY_BRACKETS.sub(" ", text)
    text = WHITESPACE.sub(" ", text)
    text = text.strip(_EDGE_SEPARATORS)
    return text if _HAS_WORD.search(text) else ""


def make_source(title: Any, url: Any) -> Optional[Source]:
    """
    Build a well-formed Source, or None when neither a title nor a url survives.

    Invalid urls collapse to "" and a missing title falls back to the url's
    hostname.
    """
    url = url.strip() if isinstance(url, str) else ""
    if not is_valid_url(url):
        url = ""
    title = clean_title(title) if isinstance(title, str) else ""
    if not title:
        title = hostname_title(url)
    if not title:
        return None
    return Source(title=title, url=url)


def parse_source_line(line: str) -> List[Source]:
    """
    Parse one line of a source block.

    First match wins: bulleted markdown link, markdown link anywhere, bare
    url, then the whole line as a title-only entry.
    """
    line = line.strip()
    if not line:
        return []

    bulleted = BULLETED_LINK.match(line)
    if bulleted:
        source = make_source(bulleted.group("title"), bulleted.group("url"))
        return [source] if source else []

    links = list(MARKDOWN_LINK.finditer(line))
    if links:
        parsed = (make_source(m.group("title"), m.group("url")) for m in links)
        return [source for source in parsed if source]

    bare_urls = [clean_bare_url(m.group(0)) for m in BARE_URL.finditer(line)]
    bare_urls = [url for url in bare_urls if is_valid_url(url)]
    if bare_urls:
        # keep punctuation trimmed off the url so "(url)" leaves an empty pair behind
        remainder = BARE_URL.sub(lambda m: " " + m.group(0)[len(clean_bare_url(m.group(0))):], line)
        title = clean_title(remainder) if len(bare_urls) == 1 else ""
        parsed = (make_source(title, url) for url in bare_urls)
        return [source for source in parsed if source]

    source = make_source(line, "")
    return [source] if source else []


def parse_source_block(lines: Iterable[str], urls_only: bool = False) -> List[Source]:
    """Parse a block of source lines; title-only entries survive only when no url was found."""
    sources: List[Source] = []
    for line in lines:
        sources.extend(parse_source_line(line))

    if urls_only or any(source["url"] for source in sources):
        sources = [source for source in sources if source["url"]]
    return sources


def coerce_source(entry: Any) -> Optional[Source]:
    """Coerce a JSON-native source entry (object or string) into a Source."""
    if isinstance(entry, dict):
        title = entry.get("title") or entry.get("name")
        url = entry.get("url") or entry.get("link")
        return make_source(title, url)
    if isinstance(entry, str):
        parsed = parse_source_line(entry)
        return parsed[0] if parsed else None
    return None


def parse_json_sources(value: Any) -> List[Source]:
    if not isinstance(value, list):
        return []
    sources = (coerce_source(entry) for entry in value)
    return [source for source in sources if source]


def extract_sources(classification: Classification) -> List[Source]:
    """Extract sources from the block the classifier pointed at."""
    tag = classification.tag

    if classification.is_json:
        return parse_json_sources((classification.payload or {}).get("sources"))

    if tag is FormatTag.MARKDOWN_DIVIDED:
        block = list(classification.lines[classification.source_start:])
        if classification.inline_source:
            block.insert(0, classification.inline_source)
        return parse_source_block(block)

    if tag is FormatTag.INLINE_LINKS:
        return parse_source_block(classification.lines[classification.source_start:])

    return parse_source_block(classification.lines, urls_only=True)
