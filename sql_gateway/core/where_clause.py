"""
WHERE clause construction from predicate pairs.

Predicate pairs map a column name to a scalar or a collection of scalars.
All pairs are joined by one conjunction:

    {'status': ['a', 'b'], 'owner': 7}, 'AND'
    -> WHERE `status` IN ('a', 'b') AND `owner` = 7

Column names are trusted input. Every value is escaped by the driver at the
moment it is embedded; built clauses are never cached.
"""

import logging
from typing import Any, List, Mapping, Optional

from ..drivers.base import DatabaseDriver
from ..exceptions import InvalidArgumentError
from .key_codec import KeyCodec

logger = logging.getLogger(__name__)

CONJUNCTIONS = ("AND", "OR")

# Rendered when a collection value is empty; no row can satisfy it
UNSATISFIABLE = "FALSE"

_BINARY_TYPES = (bytes, bytearray, memoryview)


def is_collection(value: Any) -> bool:
    """True for list-like values that should become an IN test."""
    return isinstance(value, (list, tuple, set, frozenset))


class WhereClauseBuilder:
    """Builds filter and assignment text for one table."""

    def __init__(self, driver: DatabaseDriver, key_column: Optional[str] = None, key_codec: Optional[KeyCodec] = None):
        """Initialize the builder.

        Args:
            driver: Driver providing value escaping and identifier quoting
            key_column: Name of the table's identifying key column
            key_codec: Codec used to transcode values of the key column
        """
        self.driver = driver
        self.key_column = key_column
        self.key_codec = key_codec

    def build(self, where_pairs: Mapping[str, Any], conjunction: str) -> str:
        """
        Build a WHERE clause.

        Args:
            where_pairs: Column name -> scalar or collection of scalars
            conjunction: "AND" or "OR", case-insensitive

        Returns:
            "WHERE ..." text, or an empty string when there are no pairs

        Raises:
            InvalidArgumentError: If the conjunction is not AND/OR
        """
        condition = self.build_condition(where_pairs, conjunction)
        if not condition:
            return ""
        return f"WHERE {condition}"

    def build_condition(self, where_pairs: Mapping[str, Any], conjunction: str) -> str:
        """Build the condition text without the WHERE keyword."""
        upper_conjunction = self.validate_conjunction(conjunction)

        conditions: List[str] = []
        for attribute, search_value in where_pairs.items():
            column = self.driver.quote_identifier(attribute)

            if is_collection(search_value):
                if len(search_value) == 0:
                    return UNSATISFIABLE
                escaped = [self._escape(attribute, value) for value in search_value]
                conditions.append(f"{column} IN ({', '.join(escaped)})")
            elif search_value is None:
                conditions.append(f"{column} IS NULL")
            else:
                conditions.append(f"{column} = {self._escape(attribute, search_value)}")

        return f" {upper_conjunction} ".join(conditions)

    def build_assignments(self, row: Mapping[str, Any]) -> str:
        """Render "`col` = value, ..." for INSERT ... SET and UPDATE ... SET."""
        return ", ".join(
            f"{self.driver.quote_identifier(column)} = {self._escape(column, value)}"
            for column, value in row.items()
        )

    def build_insert_values(self, row: Mapping[str, Any]) -> str:
        """Render "(`a`, `b`) VALUES (x, y)" for INSERT and REPLACE."""
        columns = ", ".join(self.driver.quote_identifier(column) for column in row)
        values = ", ".join(self._escape(column, value) for column, value in row.items())
        return f"({columns}) VALUES ({values})"

    def storage_key(self, key: Any) -> Any:
        """
        Storage form of a key value.

        bytes-like values are already in storage form; anything else is a
        canonical key and goes through the codec.
        """
        if self.key_codec is None or isinstance(key, _BINARY_TYPES):
            return bytes(key) if isinstance(key, (bytearray, memoryview)) else key
        return self.key_codec.encode(key)

    @staticmethod
    def validate_conjunction(conjunction: str) -> str:
        upper_conjunction = str(conjunction).upper()
        if upper_conjunction not in CONJUNCTIONS:
            raise InvalidArgumentError(f"Invalid conjunction: {conjunction}", argument="conjunction")
        return upper_conjunction

    def _escape(self, attribute: str, value: Any) -> str:
        if attribute == self.key_column:
            value = self.storage_key(value)
        return self.driver.escape(value)
