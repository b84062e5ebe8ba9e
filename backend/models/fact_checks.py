from typing import TypedDict, Literal, List, Optional
from pydantic import BaseModel

VerdictType = Literal["TRUE", "FALSE", "MISLEADING", "CANNOT_VERIFY"]

VERDICTS = ("TRUE", "FALSE", "MISLEADING", "CANNOT_VERIFY")

class Source(TypedDict):
    """A titled reference; url is either empty or an absolute http(s) URL."""
    title: str
    url: str

class ClaimCheckResult(TypedDict):
    """Normalized, renderable outcome of a single fact-check."""
    verdict: VerdictType
    explanation: str
    sources: List[Source]
    formattedResponse: str

class FactCheckRecord(TypedDict, total=False):
    """Row stored in the fact_checks table."""
    short_id: str
    claim: str
    verdict: VerdictType
    summary: str
    reference_url: Optional[str]
    sources: List[Source]
    formatted_response: str
    created_at: str

class FactCheckRequest(BaseModel):
    """Request body for /api/fact-check."""
    claim: str

    model_config = {
        "json_schema_extra": {
            "example": {
                "claim": "The Great Wall of China is visible from space with the naked eye."
            }
        }
    }
