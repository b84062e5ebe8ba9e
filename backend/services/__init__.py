from .llm import call_gemini
from .fact_check_service import FactCheckService

__all__ = [
    "call_gemini",
    "FactCheckService",
]
