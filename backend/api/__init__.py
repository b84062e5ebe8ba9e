from .wikipedia import query_wikipedia

__all__ = [
    "query_wikipedia",
]
