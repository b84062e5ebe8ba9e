from .pipeline import (
    ResponseNormalizer,
    NormalizationFlag,
    NormalizationReport,
    normalize_response,
)
from .classifier import FormatTag, Classification, classify_format, classify_payload
from .fences import strip_code_fences
from .explanation import extract_explanation
from .sentences import limit_sentences
from .sources import extract_sources, parse_source_block, parse_json_sources, hostname_title
from .dedup import dedupe_sources, normalize_url
from .fallback import FallbackResolver
from .assembler import assemble_result, build_formatted_response, clip_formatted_response

__all__ = [
    "ResponseNormalizer",
    "NormalizationFlag",
    "NormalizationReport",
    "normalize_response",
    "FormatTag",
    "Classification",
    "classify_format",
    "classify_payload",
    "strip_code_fences",
    "extract_explanation",
    "limit_sentences",
    "extract_sources",
    "parse_source_block",
    "parse_json_sources",
    "hostname_title",
    "dedupe_sources",
    "normalize_url",
    "FallbackResolver",
    "assemble_result",
    "build_formatted_response",
    "clip_formatted_response",
]
