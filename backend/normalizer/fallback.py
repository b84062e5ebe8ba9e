from typing import Any, List, Optional
from urllib.parse import quote_plus

from config.constants import NORMALIZER_CONFIG, NormalizerConfig
from models.fact_checks import Source
from .sentences import normalize_whitespace
from .sources import coerce_source


class FallbackResolver:
    """Supplies safe defaults when extraction comes back empty. Performs no I/O."""

    def __init__(self, config: NormalizerConfig = None):
        self.config = config or NORMALIZER_CONFIG

    def resolve_explanation(self, explanation: str) -> str:
        if explanation and explanation.strip():
            return explanation
        return self.config.FALLBACK_EXPLANATION

    def resolve_sources(
        self,
        sources: List[Source],
        claim: str = "",
        fallback_reference: Optional[Any] = None
    ) -> List[Source]:
        if sources:
            return sources

        if fallback_reference is not None:
            reference = coerce_source(fallback_reference)
            if reference:
                return [reference]

        return [self.placeholder_source(claim)]

    def placeholder_source(self, claim: str = "") -> Source:
        """Fixed "no source available" entry pointing at a search for the claim."""
        query = normalize_whitespace(claim if isinstance(claim, str) else "")
        query = query[:self.config.MAX_SEARCH_QUERY_LENGTH]
        # lone surrogates cannot be encoded and are dropped
        encoded = quote_plus(query, errors="ignore")
        url = self.config.FALLBACK_SEARCH_URL.format(query=encoded) if encoded else ""
        return Source(title=self.config.FALLBACK_SOURCE_TITLE, url=url)
