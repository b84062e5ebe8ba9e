from dataclasses import dataclass, field
from typing import Dict

@dataclass(frozen=True)
class LLMConfig:
    REQUEST_TIMEOUT: float = 60.0
    TEMPERATURE: float = 0.0
    MAX_OUTPUT_TOKENS: int = 500

@dataclass(frozen=True)
class NormalizerConfig:
    """Presentation conventions applied by the response normalizer."""
    MAX_SENTENCES: int = 3
    MAX_SOURCES: int = 3
    MAX_FORMATTED_LENGTH: int = 280
    ATTRIBUTION: str = "Fact-CheckIt"
    ATTRIBUTION_SEPARATOR: str = " - via "
    VERDICT_EMOJI: Dict[str, str] = field(default_factory=lambda: {
        "TRUE": "\u2705",
        "FALSE": "\u274c",
        "MISLEADING": "\u26a0\ufe0f",
        "CANNOT_VERIFY": "\U0001f50d",
    })
    DEFAULT_VERDICT: str = "CANNOT_VERIFY"
    FALLBACK_EXPLANATION: str = (
        "We could not extract a clear explanation for this claim, so please "
        "check trusted sources before sharing it."
    )
    FALLBACK_SOURCE_TITLE: str = "No source available"
    FALLBACK_SEARCH_URL: str = "https://en.wikipedia.org/w/index.php?search={query}"
    MAX_SEARCH_QUERY_LENGTH: int = 200

    @property
    def attribution_suffix(self) -> str:
        return f"{self.ATTRIBUTION_SEPARATOR}{self.ATTRIBUTION}"

@dataclass(frozen=True)
class APITimeouts:
    """Timeout configurations for external API calls."""
    WIKIPEDIA: float = 10.0
    SUPABASE: float = 10.0

@dataclass(frozen=True)
class RateLimits:
    """Outbound calls per second, per service."""
    GEMINI: float = 5.0
    WIKIPEDIA: float = 10.0

LLM_CONFIG = LLMConfig()
NORMALIZER_CONFIG = NormalizerConfig()
API_TIMEOUTS = APITimeouts()
RATE_LIMITS_PER_SECOND = RateLimits()
