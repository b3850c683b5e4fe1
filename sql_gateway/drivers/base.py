"""
Database Driver Interface

The gateway talks to storage only through this interface:

- execute(): one blocking statement, returning a QueryResult or raising
  QueryError with the driver's diagnostic message
- escape(): render a scalar as a complete SQL literal
- quote_identifier() / truncate_statement(): dialect helpers

Connection and session lifecycle belong to the driver; gateways hold a
reference to a driver but never own it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class QueryResult:
    """Result of a single statement."""

    def __init__(
        self,
        rows: Optional[List[Dict[str, Any]]] = None,
        field_types: Optional[Dict[str, str]] = None,
        affected_rows: int = 0,
        last_insert_id: Optional[Any] = None
    ):
        self.rows = rows or []
        self.field_types = field_types or {}
        self.affected_rows = affected_rows
        self.last_insert_id = last_insert_id

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def __repr__(self) -> str:
        return (
            f"QueryResult(rows={len(self.rows)}, affected_rows={self.affected_rows}, "
            f"last_insert_id={self.last_insert_id!r})"
        )


class DatabaseDriver(ABC):
    """Blocking SQL execution primitive used by table gateways."""

    @abstractmethod
    def execute(self, sql: str) -> QueryResult:
        """
        Execute one statement.

        Args:
            sql: Complete statement text, values already escaped

        Returns:
            QueryResult with rows for queries and affected_rows for writes

        Raises:
            QueryError: If the database reports failure
        """
        pass

    @abstractmethod
    def escape(self, value: Any) -> str:
        """Render a scalar value as a SQL literal, quotes included."""
        pass

    def quote_identifier(self, name: str) -> str:
        """Quote a trusted column or table name."""
        return "`" + name.replace("`", "``") + "`"

    def truncate_statement(self, table_name: str) -> str:
        """Statement that empties a table as fast as the dialect allows."""
        return f"TRUNCATE {self.quote_identifier(table_name)}"

    def insert_defaults_statement(self, table_name: str) -> str:
        """Statement inserting one row made only of column defaults."""
        return f"INSERT INTO {self.quote_identifier(table_name)} () VALUES ()"

    def close(self) -> None:
        """Release the underlying connection, if any."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
