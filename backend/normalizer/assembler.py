import re
from typing import Any, List, Optional, Tuple

from config.constants import NORMALIZER_CONFIG, NormalizerConfig
from models.fact_checks import VERDICTS, ClaimCheckResult, Source, VerdictType
from .patterns import WHITESPACE

_ANY_LINK = re.compile(r"\[[^\[\]]*\]\([^)\s]*(?:\([^)\s]*\)[^)\s]*)*\)")


def resolve_verdict(value: Any, config: NormalizerConfig = None) -> Tuple[VerdictType, bool]:
    """
    Map an upstream verdict onto the closed domain.

    Returns the verdict and whether a supplied value had to be replaced.
    Matching is exact and case-sensitive; an absent value is not an error.
    """
    config = config or NORMALIZER_CONFIG
    if value is None or (isinstance(value, str) and not value.strip()):
        return config.DEFAULT_VERDICT, False
    if isinstance(value, str) and value in VERDICTS:
        return value, False
    return config.DEFAULT_VERDICT, True


def _with_marker(body: str, emoji: str, config: NormalizerConfig) -> str:
    """Make body start with `emoji`, replacing a leading marker for another verdict."""
    markers = set()
    for marker in config.VERDICT_EMOJI.values():
        markers.update({marker, marker.rstrip("\ufe0f")})

    # longest first so a variation selector is consumed with its emoji
    for marker in sorted(markers, key=len, reverse=True):
        if body.startswith(marker):
            if marker in (emoji, emoji.rstrip("\ufe0f")):
                return body
            body = body[len(marker):].lstrip()
            break
    return f"{emoji} {body}"


def _strip_attribution(body: str, config: NormalizerConfig) -> str:
    suffix = config.attribution_suffix.strip()
    if suffix and body.endswith(suffix):
        body = body[:-len(suffix)]
    return body.rstrip()


def clip_formatted_response(body: str, config: NormalizerConfig = None) -> str:
    """
    Fit body plus the attribution suffix into the length cap.

    The body is cut at the last whitespace before the budget (or at the
    budget itself when there is none) and never inside a markdown link.
    """
    config = config or NORMALIZER_CONFIG
    suffix = config.attribution_suffix
    limit = config.MAX_FORMATTED_LENGTH
    body = _strip_attribution(body.strip(), config)

    budget = limit - len(suffix)
    if budget <= 0:
        return suffix.strip()[:limit]
    if len(body) <= budget:
        return body + suffix

    cut = budget
    boundaries = [m.start() for m in WHITESPACE.finditer(body, 0, budget + 1)]
    if boundaries and boundaries[-1] >= budget // 2:
        cut = boundaries[-1]

    for link in _ANY_LINK.finditer(body):
        if link.start() >= cut:
            break
        if link.end() > cut:
            cut = link.start()
            break

    return body[:cut].rstrip() + suffix


def build_formatted_response(
    verdict: VerdictType,
    explanation: str,
    supplied: Optional[Any] = None,
    config: NormalizerConfig = None
) -> str:
    config = config or NORMALIZER_CONFIG
    emoji = config.VERDICT_EMOJI.get(verdict, config.VERDICT_EMOJI[config.DEFAULT_VERDICT])

    if isinstance(supplied, str) and supplied.strip():
        body = _with_marker(supplied.strip(), emoji, config)
    else:
        body = f"{emoji} {explanation}"

    return clip_formatted_response(body, config)


def assemble_result(
    verdict: VerdictType,
    explanation: str,
    sources: List[Source],
    formatted_response: Optional[Any] = None,
    config: NormalizerConfig = None
) -> ClaimCheckResult:
    config = config or NORMALIZER_CONFIG
    return ClaimCheckResult(
        verdict=verdict,
        explanation=explanation,
        sources=[Source(title=s["title"], url=s["url"]) for s in sources[:config.MAX_SOURCES]],
        formattedResponse=build_formatted_response(verdict, explanation, formatted_response, config),
    )
