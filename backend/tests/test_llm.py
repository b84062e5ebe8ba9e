import json
import pytest
from unittest.mock import AsyncMock, patch
from httpx import ConnectError, HTTPStatusError, Request, Response

from exceptions import CircuitBreakerOpenException, LLMException
from prompts import FACT_CHECK_TOOL, build_fact_check_prompt
from services.llm import build_request_body, parse_gemini_response


def _status_error(status_code: int) -> HTTPStatusError:
    request = Request("POST", "https://generativelanguage.googleapis.com/test")
    return HTTPStatusError("Error", request=request, response=Response(status_code, request=request))


class TestBuildRequestBody:
    """Tests for build_request_body."""

    def test_plain_prompt(self):
        body = build_request_body("Is the sky green?")
        assert body["contents"] == [{"role": "user", "parts": [{"text": "Is the sky green?"}]}]
        assert body["generationConfig"]["temperature"] == 0.0
        assert "tools" not in body
        assert "systemInstruction" not in body

    def test_with_tools_and_system_instruction(self):
        body = build_request_body("prompt", system_instruction="  Be precise.  ", tools=[FACT_CHECK_TOOL])
        assert body["systemInstruction"] == {"parts": [{"text": "Be precise."}]}
        assert body["tools"] == [{"functionDeclarations": [FACT_CHECK_TOOL]}]
        assert body["toolConfig"]["functionCallingConfig"] == {
            "mode": "ANY",
            "allowedFunctionNames": ["submit_fact_check"],
        }


class TestPrompt:
    """Tests for prompt construction."""

    def test_claim_embedded(self):
        prompt = build_fact_check_prompt("Bulls hate red")
        assert "'''Bulls hate red'''" in prompt
        assert "Sources:" in prompt
        assert "possibly relevant reference" not in prompt

    def test_reference_hint(self):
        prompt = build_fact_check_prompt("claim", {"title": "Wikipedia: Bull", "url": "https://en.wikipedia.org/wiki/Bull"})
        assert "Wikipedia: Bull (https://en.wikipedia.org/wiki/Bull)" in prompt


class TestParseGeminiResponse:
    """Tests for parse_gemini_response."""

    def test_function_call(self, sample_gemini_response):
        parsed = parse_gemini_response(sample_gemini_response)
        assert parsed["function_call"]["verdict"] == "MISLEADING"
        assert parsed["text"] == ""
        assert parsed["raw"] is sample_gemini_response

    def test_text_parts_joined(self, sample_gemini_text_response):
        parsed = parse_gemini_response(sample_gemini_text_response)
        assert parsed["text"].startswith("```markdown\nBulls")
        assert parsed["text"].endswith("hate-red)\n```")
        assert parsed["function_call"] is None

    @pytest.mark.parametrize("data", [None, {}, {"candidates": []}, {"candidates": [{"content": {"parts": "x"}}]}, [1]])
    def test_malformed(self, data):
        parsed = parse_gemini_response(data)
        assert parsed["text"] == ""
        assert parsed["function_call"] is None


@pytest.mark.asyncio
class TestCallGemini:
    """Tests for call_gemini function."""

    async def test_successful_call(self, mock_env_vars, mock_httpx_client, sample_gemini_text_response):
        from services.llm import call_gemini

        mock_client = mock_httpx_client(sample_gemini_text_response)
        with patch("services.llm.httpx.AsyncClient", return_value=mock_client):
            result = await call_gemini("test prompt")

        assert "Sources:" in result["text"]
        _, kwargs = mock_client.post.call_args
        assert kwargs["headers"]["x-goog-api-key"] == "test_gemini_key"
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "test prompt"

    async def test_function_call(self, mock_env_vars, mock_httpx_client, sample_gemini_response):
        from services.llm import call_gemini

        mock_client = mock_httpx_client(sample_gemini_response)
        with patch("services.llm.httpx.AsyncClient", return_value=mock_client):
            result = await call_gemini("prompt", tools=[FACT_CHECK_TOOL])

        assert result["function_call"]["sources"][0]["title"] == "Britannica"

    async def test_missing_api_key(self, monkeypatch):
        import config
        from services.llm import call_gemini

        monkeypatch.setattr(config, "GEMINI_API_KEY", None)
        with patch("services.llm.httpx.AsyncClient") as mock_client_class:
            with pytest.raises(LLMException) as exc_info:
                await call_gemini("test")

        assert "not configured" in exc_info.value.message
        assert exc_info.value.details["recoverable"] is False
        mock_client_class.assert_not_called()

    async def test_server_error_is_retried(self, mock_env_vars, mock_httpx_client):
        from services.llm import call_gemini

        mock_client = mock_httpx_client(side_effect=_status_error(500))
        with patch("services.llm.httpx.AsyncClient", return_value=mock_client), \
                patch("utils.retry.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(LLMException) as exc_info:
                await call_gemini("test")

        assert "HTTP 500" in exc_info.value.message
        assert mock_client.post.call_count == 3

    async def test_client_error_is_not_retried(self, mock_env_vars, mock_httpx_client):
        from services.llm import call_gemini

        mock_client = mock_httpx_client(side_effect=_status_error(400))
        with patch("services.llm.httpx.AsyncClient", return_value=mock_client), \
                patch("utils.retry.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(LLMException):
                await call_gemini("test")

        assert mock_client.post.call_count == 1

    async def test_connection_error(self, mock_env_vars, mock_httpx_client):
        from services.llm import call_gemini

        mock_client = mock_httpx_client(side_effect=ConnectError("connection refused"))
        with patch("services.llm.httpx.AsyncClient", return_value=mock_client), \
                patch("utils.retry.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(LLMException) as exc_info:
                await call_gemini("test")

        assert "Request failed" in exc_info.value.message

    async def test_non_json_body(self, mock_env_vars, mock_httpx_client):
        from services.llm import call_gemini

        mock_client = mock_httpx_client({})
        response = mock_client.post.return_value
        response.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
        with patch("services.llm.httpx.AsyncClient", return_value=mock_client), \
                patch("utils.retry.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(LLMException) as exc_info:
                await call_gemini("test")

        assert "Malformed" in exc_info.value.message

    async def test_circuit_opens_after_repeated_failures(self, mock_env_vars, mock_httpx_client):
        from services.llm import call_gemini

        mock_client = mock_httpx_client(side_effect=_status_error(403))
        with patch("services.llm.httpx.AsyncClient", return_value=mock_client):
            for _ in range(5):
                with pytest.raises(LLMException):
                    await call_gemini("test")

            with pytest.raises(CircuitBreakerOpenException):
                await call_gemini("test")

        assert mock_client.post.call_count == 5
