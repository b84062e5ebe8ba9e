import asyncio
from typing import Any, Dict, Optional
import config
from api import query_wikipedia
from exceptions import FactCheckException, PersistenceException
from models.fact_checks import ClaimCheckResult, Source
from normalizer import ResponseNormalizer
from prompts import FACT_CHECK_TOOL, SYSTEM_INSTRUCTION, build_fact_check_prompt
from repositories import FactCheckRepository
from .llm import call_gemini


class FactCheckService:
    """Runs one fact-check: reference lookup, LLM call, normalization, persistence."""

    def __init__(
        self,
        normalizer: ResponseNormalizer = None,
        repository: Optional[FactCheckRepository] = None,
        use_tool_call: Optional[bool] = None
    ):
        self.normalizer = normalizer or ResponseNormalizer()
        self.repository = repository
        self.use_tool_call = config.GEMINI_USE_TOOL_CALL if use_tool_call is None else use_tool_call

    async def check_claim(self, claim: str) -> Dict[str, Any]:
        start_time = asyncio.get_running_loop().time()

        reference = await query_wikipedia(claim)
        raw_output = await self._ask_model(claim, reference)

        result, report = self.normalizer.normalize_with_report(raw_output, claim, reference)
        config.logger.info("Normalization report: %s", report.to_dict())

        short_id = await self._persist(claim, result)

        duration = round(asyncio.get_running_loop().time() - start_time, 2)
        config.logger.info(f"Fact-check completed for claim '{claim[:50]}...' in {duration} seconds.")

        return self._build_success_response(result, short_id)

    async def get_fact_check(self, short_id: str) -> Dict[str, Any]:
        if self.repository is None:
            raise PersistenceException("select", "storage is not configured")

        record = await asyncio.to_thread(self.repository.get_by_short_id, short_id)
        return {
            "success": True,
            "claim": record.get("claim"),
            "summary": record.get("summary"),
            "verdict": record.get("verdict"),
            "reference_url": record.get("reference_url"),
            "sources": record.get("sources") or [],
            "formattedResponse": record.get("formatted_response"),
        }

    async def _ask_model(self, claim: str, reference: Optional[Source]) -> Any:
        prompt = build_fact_check_prompt(claim, reference)
        tools = [FACT_CHECK_TOOL] if self.use_tool_call else None

        response = await call_gemini(prompt, system_instruction=SYSTEM_INSTRUCTION, tools=tools)

        if self.use_tool_call and response.get("function_call") is not None:
            return response["function_call"]
        return response.get("text", "")

    async def _persist(self, claim: str, result: ClaimCheckResult) -> Optional[str]:
        if self.repository is None:
            return None
        try:
            return await asyncio.to_thread(self.repository.save, claim, result)
        except FactCheckException as e:
            config.logger.error("Could not persist fact-check: %s", e.message)
            return None

    @staticmethod
    def _build_success_response(result: ClaimCheckResult, short_id: Optional[str]) -> Dict[str, Any]:
        return {
            "success": True,
            "verdict": result["verdict"],
            "explanation": result["explanation"],
            "sources": result["sources"],
            "formattedResponse": result["formattedResponse"],
            "shortId": short_id,
        }
