from .config import DEFAULT_SEARCH_LIMIT, DatabaseConfig

__all__ = [
    "DEFAULT_SEARCH_LIMIT",
    "DatabaseConfig",
]
