import json
from typing import Dict, Any, List, Optional
import httpx
from config.constants import LLM_CONFIG, RATE_LIMITS_PER_SECOND
from utils.retry import async_retry
from utils.rate_limiter import get_rate_limiter
from utils.circuit_breaker import circuit_breaker
from exceptions import LLMException

import config

_gemini_limiter = get_rate_limiter("GEMINI", RATE_LIMITS_PER_SECOND.GEMINI)


def _is_recoverable(error: Exception) -> bool:
    return getattr(error, "details", {}).get("recoverable", True)


def build_request_body(
    prompt: str,
    system_instruction: Optional[str] = None,
    tools: Optional[List[Dict[str, Any]]] = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": LLM_CONFIG.TEMPERATURE,
            "maxOutputTokens": LLM_CONFIG.MAX_OUTPUT_TOKENS,
        },
    }
    if system_instruction:
        body["systemInstruction"] = {"parts": [{"text": system_instruction.strip()}]}
    if tools:
        body["tools"] = [{"functionDeclarations": tools}]
        body["toolConfig"] = {
            "functionCallingConfig": {
                "mode": "ANY",
                "allowedFunctionNames": [tool["name"] for tool in tools],
            }
        }
    return body


def parse_gemini_response(data: Any) -> Dict[str, Any]:
    """Pull the text and any function-call arguments out of a generateContent response."""
    text_parts: List[str] = []
    function_call: Optional[Dict[str, Any]] = None
    try:
        if isinstance(data, dict):
            candidates = data.get("candidates", [])
            if isinstance(candidates, list) and candidates:
                parts = candidates[0].get("content", {}).get("parts", [])
                for part in parts if isinstance(parts, list) else []:
                    if not isinstance(part, dict):
                        continue
                    if isinstance(part.get("text"), str):
                        text_parts.append(part["text"])
                    call = part.get("functionCall")
                    if function_call is None and isinstance(call, dict) and isinstance(call.get("args"), dict):
                        function_call = call["args"]
    except (AttributeError, IndexError, TypeError) as e:
        config.logger.error("Error parsing Gemini response structure: %s. Response: %s", e, data)

    return {"raw": data, "text": "".join(text_parts), "function_call": function_call}


@circuit_breaker(
    failure_threshold=5,
    recovery_timeout=60.0,
    expected_exception=LLMException,
    name="gemini_llm"
)
@async_retry(max_attempts=3, exceptions=(LLMException,), retry_if=_is_recoverable)
async def call_gemini(
    prompt: str,
    system_instruction: Optional[str] = None,
    tools: Optional[List[Dict[str, Any]]] = None
) -> Dict[str, Any]:
    """
    Call Gemini generateContent.

    Returns {"raw", "text", "function_call"}; function_call holds the arguments
    of the first functionCall part when tools were offered, else None.
    """
    if not config.GEMINI_API_KEY:
        config.logger.critical("GEMINI_API_KEY not configured.")
        raise LLMException("API key not configured", recoverable=False)

    await _gemini_limiter.acquire()

    headers = {"Content-Type": "application/json", "x-goog-api-key": config.GEMINI_API_KEY}
    body = build_request_body(prompt, system_instruction, tools)
    try:
        async with httpx.AsyncClient(timeout=LLM_CONFIG.REQUEST_TIMEOUT) as client:
            response = await client.post(config.GEMINI_ENDPOINT, headers=headers, json=body)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as e:
        config.logger.error("Gemini HTTP error %s for URL %s: %s", e.response.status_code, e.request.url, e.response.text)
        raise LLMException(f"HTTP {e.response.status_code}", recoverable=e.response.status_code >= 500)
    except httpx.RequestError as e:
        config.logger.error("Gemini request error: %s", str(e))
        raise LLMException(f"Request failed: {str(e)}", recoverable=True)
    except json.JSONDecodeError as e:
        config.logger.error("Gemini returned a non-JSON body: %s", str(e))
        raise LLMException("Malformed response body", recoverable=True)

    parsed = parse_gemini_response(data)
    if not parsed["text"] and parsed["function_call"] is None:
        config.logger.warning("Gemini response carried no text or function call.")
    return parsed
