from .fact_check_repository import FactCheckRepository, generate_short_id

__all__ = [
    "FactCheckRepository",
    "generate_short_id",
]
