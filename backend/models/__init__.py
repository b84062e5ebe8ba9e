from .fact_checks import (
    VerdictType,
    VERDICTS,
    Source,
    ClaimCheckResult,
    FactCheckRecord,
    FactCheckRequest,
)

__all__ = [
    "VerdictType",
    "VERDICTS",
    "Source",
    "ClaimCheckResult",
    "FactCheckRecord",
    "FactCheckRequest",
]
