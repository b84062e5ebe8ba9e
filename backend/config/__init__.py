import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

from .settings import Settings, settings

GEMINI_API_KEY = settings.GEMINI_API_KEY
SUPABASE_URL = settings.SUPABASE_URL
SUPABASE_SERVICE_ROLE_KEY = settings.SUPABASE_SERVICE_ROLE_KEY

GEMINI_MODEL = settings.GEMINI_MODEL
GEMINI_ENDPOINT = settings.GEMINI_ENDPOINT
GEMINI_USE_TOOL_CALL = settings.GEMINI_USE_TOOL_CALL
WIKIPEDIA_API_URL = settings.WIKIPEDIA_API_URL
MAX_CLAIM_LENGTH = settings.MAX_CLAIM_LENGTH
CORS_ALLOW_ORIGINS = settings.CORS_ALLOW_ORIGINS

from .constants import (
    LLM_CONFIG,
    NORMALIZER_CONFIG,
    API_TIMEOUTS,
    RATE_LIMITS_PER_SECOND,
    NormalizerConfig,
)

REQUIRED_KEYS = [
    "GEMINI_API_KEY",
]

OPTIONAL_KEYS = [
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
]

def check_api_keys_on_startup():
    """Check for required API keys on startup."""
    missing_keys = []
    for key_name in REQUIRED_KEYS:
        if not globals().get(key_name):
            missing_keys.append(key_name)

    if missing_keys:
        logger.warning(f"Missing API keys: {', '.join(missing_keys)}")
    else:
        logger.info("All required API keys are configured.")

    missing_optional = [k for k in OPTIONAL_KEYS if not globals().get(k)]
    if missing_optional:
        logger.warning(
            "Supabase not configured (%s). Fact-checks will not be persisted.",
            ", ".join(missing_optional)
        )
    return missing_keys

__all__ = [
    "logger",
    "Settings",
    "settings",
    "GEMINI_API_KEY",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "GEMINI_MODEL",
    "GEMINI_ENDPOINT",
    "GEMINI_USE_TOOL_CALL",
    "WIKIPEDIA_API_URL",
    "MAX_CLAIM_LENGTH",
    "CORS_ALLOW_ORIGINS",
    "check_api_keys_on_startup",
    "LLM_CONFIG",
    "NORMALIZER_CONFIG",
    "API_TIMEOUTS",
    "RATE_LIMITS_PER_SECOND",
    "NormalizerConfig",
]
