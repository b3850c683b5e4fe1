"""
SQLite driver built on the standard library sqlite3 module.

Runs in autocommit mode so every statement is its own transaction. SQLite
has no TRUNCATE; the fast clear is rendered as an unqualified DELETE, which
SQLite optimises into a table truncation.
"""

import logging
import sqlite3
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..config import DatabaseConfig
from ..exceptions import ConnectionError, QueryError
from .base import DatabaseDriver, QueryResult

logger = logging.getLogger(__name__)


class SQLiteDriver(DatabaseDriver):
    """Database driver for a SQLite file or in-memory database."""

    def __init__(self, path: str = ":memory:", connection: Optional[sqlite3.Connection] = None):
        """Initialize the driver.

        Args:
            path: Database file path, ":memory:" by default
            connection: Existing connection to use instead of opening one
        """
        self.path = path
        self._connection = connection

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> 'SQLiteDriver':
        return cls(config.sqlite_path or ":memory:")

    @property
    def connection(self) -> sqlite3.Connection:
        """Lazy initialization of the SQLite connection."""
        if self._connection is None:
            try:
                self._connection = sqlite3.connect(self.path, isolation_level=None)
            except sqlite3.Error as e:
                logger.error(f"Failed to open SQLite database '{self.path}': {e}")
                raise ConnectionError(f"Failed to open SQLite database '{self.path}': {e}", e, {'path': self.path}) from e
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def execute(self, sql: str) -> QueryResult:
        logger.debug(f"SQLite execute: {sql}")
        try:
            cursor = self.connection.execute(sql)
            if cursor.description is None:
                return QueryResult(
                    affected_rows=max(cursor.rowcount, 0),
                    last_insert_id=cursor.lastrowid
                )

            rows = [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.error(f"SQLite statement failed: {e}")
            raise QueryError(str(e), sql, e) from e

        # sqlite3 reports no declared types, so describe the first row's values
        field_types = {column[0]: "NULL" for column in cursor.description}
        if rows:
            field_types.update({name: _type_name(value) for name, value in rows[0].items()})

        return QueryResult(rows=rows, field_types=field_types)

    def escape(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return "X'" + bytes(value).hex() + "'"
        if isinstance(value, (datetime, date)):
            value = value.isoformat(sep=' ') if isinstance(value, datetime) else value.isoformat()
        return "'" + str(value).replace("'", "''") + "'"

    def truncate_statement(self, table_name: str) -> str:
        return f"DELETE FROM {self.quote_identifier(table_name)}"

    def insert_defaults_statement(self, table_name: str) -> str:
        return f"INSERT INTO {self.quote_identifier(table_name)} DEFAULT VALUES"

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None


def _type_name(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, int):
        return "INTEGER"
    if isinstance(value, float):
        return "REAL"
    if isinstance(value, bytes):
        return "BLOB"
    return "TEXT"
