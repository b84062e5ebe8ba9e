import pytest
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent))

TEST_ENV = {
    "GEMINI_API_KEY": "test_gemini_key",
    "GEMINI_MODEL": "gemini-2.5-flash",
    "SUPABASE_URL": "",
    "SUPABASE_SERVICE_ROLE_KEY": "",
}

for key, value in TEST_ENV.items():
    os.environ.setdefault(key, value)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Point module-level config at test values."""
    import config
    monkeypatch.setattr(config, "GEMINI_API_KEY", "test_gemini_key")
    return TEST_ENV


@pytest.fixture(autouse=True)
def reset_gemini_breaker():
    """Keep circuit breaker state from leaking between tests."""
    from services.llm import call_gemini
    call_gemini.circuit_breaker.reset()
    yield
    call_gemini.circuit_breaker.reset()


@pytest.fixture
def test_client():
    """Create a TestClient for FastAPI app."""
    from fastapi.testclient import TestClient
    import main
    return TestClient(main.app)


@pytest.fixture
def mock_httpx_client():
    """Factory for a mocked httpx.AsyncClient returning one canned response."""
    def _build(json_data=None, method="post", side_effect=None):
        mock_client = MagicMock()
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = json_data
        mock_response.raise_for_status = MagicMock()
        handler = AsyncMock(return_value=mock_response, side_effect=side_effect)
        setattr(mock_client, method, handler)
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=False)
        return mock_client
    return _build


@pytest.fixture
def markdown_output():
    """Model output following the prompt template."""
    return (
        "Verdict: FALSE\n"
        "The Great Wall is not visible to the naked eye from low Earth orbit. "
        "Astronauts have repeatedly confirmed they could not see it. "
        "Its width is similar to a highway, far too narrow to resolve from that distance. "
        "Pictures claiming otherwise usually show rivers or roads.\n\n"
        "Sources:\n"
        "- [NASA](https://www.nasa.gov/image-article/great-wall/)\n"
        "- [Scientific American](https://www.scientificamerican.com/article/is-chinas-great-wall-visible-from-space/)\n"
        "- [NASA mirror](https://nasa.gov/image-article/great-wall)\n"
    )


@pytest.fixture
def sample_gemini_response():
    """Sample Gemini generateContent response with a function call."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {
                            "functionCall": {
                                "name": "submit_fact_check",
                                "args": {
                                    "verdict": "MISLEADING",
                                    "explanation": "Bulls react to movement, not the color red.",
                                    "sources": [
                                        {"title": "Britannica", "url": "https://www.britannica.com/story/do-bulls-really-hate-red"}
                                    ],
                                },
                            }
                        }
                    ]
                }
            }
        ]
    }


@pytest.fixture
def sample_gemini_text_response():
    """Sample Gemini generateContent response carrying plain text."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "```markdown\nBulls are colorblind to red.\n\nSources:\n"},
                        {"text": "- [Britannica](https://www.britannica.com/story/do-bulls-really-hate-red)\n```"},
                    ]
                }
            }
        ]
    }
