import secrets
from typing import Any, Dict, Optional
from supabase import create_client, Client

import config
from exceptions import FactCheckNotFoundException, PersistenceException
from models.fact_checks import ClaimCheckResult, FactCheckRecord

TABLE_NAME = "fact_checks"
SHORT_ID_BYTES = 6
SELECT_COLUMNS = "short_id, claim, verdict, summary, reference_url, sources, formatted_response, created_at"


def generate_short_id() -> str:
    """URL-safe id used in share links (8 characters)."""
    return secrets.token_urlsafe(SHORT_ID_BYTES)


class FactCheckRepository:
    """Stores and retrieves fact-checks in the Supabase fact_checks table."""

    def __init__(self, client: Optional[Client] = None):
        if client is not None:
            self.supabase = client
            return

        if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment variables")

        try:
            self.supabase: Client = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)
            config.logger.info("Supabase fact-check repository initialized")
        except Exception as e:
            config.logger.error(f"Failed to initialize Supabase client: {str(e)}")
            raise

    @staticmethod
    def build_record(short_id: str, claim: str, result: ClaimCheckResult) -> FactCheckRecord:
        sources = result["sources"]
        reference_url = next((s["url"] for s in sources if s["url"]), None)
        return FactCheckRecord(
            short_id=short_id,
            claim=claim,
            verdict=result["verdict"],
            summary=result["explanation"],
            reference_url=reference_url,
            sources=sources,
            formatted_response=result["formattedResponse"],
        )

    def save(self, claim: str, result: ClaimCheckResult) -> str:
        """
        Insert a normalized result and return its short id.

        Raises:
            PersistenceException: If the insert fails
        """
        short_id = generate_short_id()
        record = self.build_record(short_id, claim, result)
        try:
            response = self.supabase.table(TABLE_NAME).insert(dict(record)).execute()
        except Exception as e:
            config.logger.error(f"Error saving fact-check: {str(e)}")
            raise PersistenceException("insert", str(e))

        if not getattr(response, "data", None):
            raise PersistenceException("insert", "no row returned")

        config.logger.info(f"Saved fact-check {short_id} for claim: {claim[:50]}...")
        return short_id

    def get_by_short_id(self, short_id: str) -> Dict[str, Any]:
        """
        Fetch a stored fact-check.

        Raises:
            FactCheckNotFoundException: If no row has this short id
            PersistenceException: If the query fails
        """
        try:
            response = (
                self.supabase.table(TABLE_NAME)
                .select(SELECT_COLUMNS)
                .eq("short_id", short_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            config.logger.error(f"Error fetching fact-check {short_id}: {str(e)}")
            raise PersistenceException("select", str(e))

        if not response.data:
            raise FactCheckNotFoundException(short_id)
        return response.data[0]
