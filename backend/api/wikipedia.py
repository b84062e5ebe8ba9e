from typing import Any, Dict, Optional
from urllib.parse import quote, urljoin
import httpx
import config
from config.constants import API_TIMEOUTS, RATE_LIMITS_PER_SECOND
from models.fact_checks import Source
from utils.retry import async_retry
from utils.rate_limiter import get_rate_limiter

_wikipedia_limiter = get_rate_limiter("WIKIPEDIA", RATE_LIMITS_PER_SECOND.WIKIPEDIA)

USER_AGENT = "Fact-CheckIt/1.0 (reference lookup)"
MAX_QUERY_LENGTH = 300


def article_url(title: str, api_url: Optional[str] = None) -> str:
    base = urljoin(api_url or config.WIKIPEDIA_API_URL, "/wiki/")
    return base + quote(title.replace(" ", "_"), safe="_()',-.")


@async_retry(max_attempts=2, exceptions=(httpx.TransportError,))
async def _search(query: str) -> Dict[str, Any]:
    await _wikipedia_limiter.acquire()

    params = {
        "action": "query",
        "list": "search",
        "srsearch": query,
        "srlimit": 1,
        "format": "json",
    }
    async with httpx.AsyncClient(timeout=API_TIMEOUTS.WIKIPEDIA, headers={"User-Agent": USER_AGENT}) as client:
        r = await client.get(config.WIKIPEDIA_API_URL, params=params)
        r.raise_for_status()
        return r.json()


async def query_wikipedia(claim: str) -> Optional[Source]:
    """
    Look up the Wikipedia article that best matches a claim.

    Returns {title, url} for the top search hit, or None when there is no
    hit or the lookup fails for any reason.
    """
    if not claim or not claim.strip():
        return None

    query = " ".join(claim.split())[:MAX_QUERY_LENGTH]

    try:
        data = await _search(query)
    except httpx.HTTPStatusError as e:
        config.logger.error("Wikipedia API HTTP error %s: %s", e.response.status_code, e.response.text[:200])
        return None
    except httpx.HTTPError as e:
        config.logger.error("Wikipedia API request error: %s", str(e))
        return None
    except ValueError as e:
        config.logger.error("Wikipedia API returned malformed JSON: %s", str(e))
        return None

    query_block = data.get("query") if isinstance(data, dict) else None
    hits = query_block.get("search") if isinstance(query_block, dict) else None
    if not isinstance(hits, list) or not hits or not isinstance(hits[0], dict) or not hits[0].get("title"):
        config.logger.info("No Wikipedia reference found for claim '%s...'", query[:50])
        return None

    title = hits[0]["title"]
    return Source(title=f"Wikipedia: {title}", url=article_url(title))
