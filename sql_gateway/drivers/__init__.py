"""
Database drivers.

- DatabaseDriver: interface consumed by TableGateway
- SQLiteDriver: standard library sqlite3
- MySQLDriver: PyMySQL
"""

from .base import DatabaseDriver, QueryResult
from .mysql import MySQLDriver
from .sqlite import SQLiteDriver

__all__ = [
    "DatabaseDriver",
    "MySQLDriver",
    "QueryResult",
    "SQLiteDriver",
]
