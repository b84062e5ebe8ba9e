from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from config import logger
from config.constants import NORMALIZER_CONFIG, NormalizerConfig
from exceptions import NormalizationInputException
from models.fact_checks import ClaimCheckResult, Source
from .assembler import assemble_result, resolve_verdict
from .classifier import Classification, FormatTag, classify_format, classify_payload
from .dedup import dedupe_sources
from .explanation import extract_explanation
from .fallback import FallbackResolver
from .sentences import limit_sentences
from .sources import extract_sources

RawOutput = Union[str, Dict[str, Any], None]

FORMATTED_RESPONSE_KEYS = ("formattedResponse", "formatted_response")


class NormalizationFlag(str, Enum):
    CLASSIFICATION_AMBIGUOUS = "ClassificationAmbiguous"
    EXPLANATION_EMPTY = "ExplanationEmpty"
    SOURCES_EMPTY = "SourcesEmpty"
    VERDICT_UNRECOGNIZED = "VerdictUnrecognized"


@dataclass
class NormalizationReport:
    """Telemetry for one normalization call."""
    tag: FormatTag
    flags: List[NormalizationFlag] = field(default_factory=list)
    extracted_sources: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.tag.value,
            "flags": [flag.value for flag in self.flags],
            "extracted_sources": self.extracted_sources,
        }


class ResponseNormalizer:
    """
    Coerces raw model output into a well-formed ClaimCheckResult.

    Accepts freeform text or, when the upstream call used function calling,
    the call's argument dict. Never raises for either shape: whatever cannot
    be extracted is filled in by the FallbackResolver.
    """

    def __init__(
        self,
        config: NormalizerConfig = None,
        fallback_resolver: FallbackResolver = None
    ):
        self.config = config or NORMALIZER_CONFIG
        self.fallback_resolver = fallback_resolver or FallbackResolver(self.config)

    def normalize(
        self,
        raw: RawOutput,
        claim: str = "",
        fallback_reference: Optional[Any] = None
    ) -> ClaimCheckResult:
        result, _ = self.normalize_with_report(raw, claim, fallback_reference)
        return result

    def normalize_with_report(
        self,
        raw: RawOutput,
        claim: str = "",
        fallback_reference: Optional[Any] = None
    ) -> Tuple[ClaimCheckResult, NormalizationReport]:
        classification = self.classify(raw)
        report = NormalizationReport(tag=classification.tag)

        if classification.is_ambiguous:
            report.flags.append(NormalizationFlag.CLASSIFICATION_AMBIGUOUS)

        explanation = limit_sentences(extract_explanation(classification), self.config.MAX_SENTENCES)
        if not explanation:
            report.flags.append(NormalizationFlag.EXPLANATION_EMPTY)
            explanation = self.fallback_resolver.resolve_explanation(explanation)

        extracted = extract_sources(classification)
        report.extracted_sources = len(extracted)
        sources: List[Source] = dedupe_sources(extracted, self.config.MAX_SOURCES)
        if not sources:
            report.flags.append(NormalizationFlag.SOURCES_EMPTY)
            sources = self.fallback_resolver.resolve_sources(sources, claim, fallback_reference)

        verdict, replaced = resolve_verdict(self._upstream_verdict(classification), self.config)
        if replaced:
            report.flags.append(NormalizationFlag.VERDICT_UNRECOGNIZED)

        result = assemble_result(
            verdict=verdict,
            explanation=explanation,
            sources=sources,
            formatted_response=self._upstream_formatted_response(classification),
            config=self.config,
        )

        if report.flags:
            logger.warning(
                "Normalized %s output with fallbacks: %s",
                classification.tag.value,
                ", ".join(flag.value for flag in report.flags),
            )
        else:
            logger.info(f"Normalized {classification.tag.value} output with {len(sources)} sources.")

        return result, report

    @staticmethod
    def classify(raw: RawOutput) -> Classification:
        if raw is None:
            return classify_format("")
        if isinstance(raw, str):
            return classify_format(raw)
        if isinstance(raw, dict):
            return classify_payload(raw)
        raise NormalizationInputException(type(raw).__name__)

    @staticmethod
    def _upstream_verdict(classification: Classification) -> Any:
        if classification.is_json:
            return (classification.payload or {}).get("verdict")
        return classification.verdict_hint

    @staticmethod
    def _upstream_formatted_response(classification: Classification) -> Optional[Any]:
        if not classification.is_json:
            return None
        payload = classification.payload or {}
        for key in FORMATTED_RESPONSE_KEYS:
            if payload.get(key):
                return payload[key]
        return None


_default_normalizer = ResponseNormalizer()


def normalize_response(
    raw: RawOutput,
    claim: str = "",
    fallback_reference: Optional[Any] = None
) -> ClaimCheckResult:
    """Normalize with the default configuration."""
    return _default_normalizer.normalize(raw, claim, fallback_reference)
