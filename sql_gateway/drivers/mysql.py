"""
MySQL driver built on PyMySQL.

Connections are opened lazily in autocommit mode with a dict cursor.
Escaping is delegated to the connection so literals honour its character
set; binary values are rendered as _binary'...' literals.
"""

import logging
from typing import Any, Dict, Optional

import pymysql
import pymysql.cursors
from pymysql.constants import FIELD_TYPE

from ..config import DatabaseConfig
from ..exceptions import ConnectionError, QueryError
from .base import DatabaseDriver, QueryResult

logger = logging.getLogger(__name__)

_FIELD_TYPE_NAMES: Dict[int, str] = {
    code: name for name, code in vars(FIELD_TYPE).items()
    if name.isupper() and isinstance(code, int)
}


class MySQLDriver(DatabaseDriver):
    """Database driver for MySQL and MySQL-compatible servers."""

    def __init__(self, config: DatabaseConfig, connection: Optional[pymysql.connections.Connection] = None):
        """Initialize the driver.

        Args:
            config: Database configuration holding host and credentials
            connection: Existing PyMySQL connection to use instead of opening one
        """
        self.config = config
        self._connection = connection

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> 'MySQLDriver':
        return cls(config)

    @property
    def connection(self) -> pymysql.connections.Connection:
        """Lazy initialization of the MySQL connection."""
        if self._connection is None:
            try:
                self._connection = pymysql.connect(
                    host=self.config.host,
                    port=self.config.port,
                    user=self.config.user,
                    password=self.config.password or "",
                    database=self.config.database,
                    charset=self.config.charset,
                    connect_timeout=int(self.config.connect_timeout_seconds),
                    autocommit=True,
                    cursorclass=pymysql.cursors.DictCursor,
                )
            except pymysql.MySQLError as e:
                logger.error(f"Failed to connect to MySQL at {self.config.host}:{self.config.port}: {e}")
                raise ConnectionError(
                    f"Failed to connect to MySQL: {e}",
                    e,
                    {'host': self.config.host, 'database': self.config.database}
                ) from e
        return self._connection

    def execute(self, sql: str) -> QueryResult:
        logger.debug(f"MySQL execute: {sql}")
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(sql)
                if cursor.description is None:
                    return QueryResult(
                        affected_rows=cursor.rowcount,
                        last_insert_id=cursor.lastrowid
                    )

                rows = list(cursor.fetchall())
                field_types = {
                    column[0]: _FIELD_TYPE_NAMES.get(column[1], str(column[1]))
                    for column in cursor.description
                }
        except pymysql.MySQLError as e:
            logger.error(f"MySQL statement failed: {e}")
            raise QueryError(str(e), sql, e) from e

        return QueryResult(rows=rows, field_types=field_types)

    def escape(self, value: Any) -> str:
        if isinstance(value, (bytearray, memoryview)):
            value = bytes(value)
        return self.connection.escape(value)

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
