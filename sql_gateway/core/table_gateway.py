"""
SQL Table Gateway

This module provides the generic table gateway: one object per table that
maps rows to immutable row objects and keeps an identity cache of everything
it has loaded.

Every operation follows the same path:

    key normalize -> cache check -> one batched statement
        -> row object construction -> cache update -> return

The two identifier schemes (auto-increment integers and COMB UUIDs) differ
only in the injected KeyCodec. Callers always pass and receive canonical
keys; the codec produces storage values at the moment a statement is built.

Cache rules:
- every load and create writes the fetched rows into the cache
- key-targeted deletes evict the requested keys whether or not a row existed
- predicate deletes clear the whole cache unless the caller opts out
- update replaces the cached snapshot; a key change evicts the old key
- search results are never cached
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, Union

from ..config import DEFAULT_SEARCH_LIMIT, DatabaseConfig
from ..drivers.base import DatabaseDriver, QueryResult
from ..exceptions import InvalidArgumentError, NotFoundError, QueryError, WriteFailure
from ..models.base import RowObject, RowObjectFactory, model_factory
from .identity_cache import IdentityCache
from .key_codec import KeyCodec, KeyScheme, SequentialKeyCodec, codec_for_scheme
from .where_clause import UNSATISFIABLE, WhereClauseBuilder, is_collection

logger = logging.getLogger(__name__)

ORDER_DIRECTIONS = ("ASC", "DESC")


def map_write_error(
    error: QueryError,
    operation: str,
    table_name: str,
    resource_id: Optional[Any] = None
) -> WriteFailure:
    """Map a driver QueryError raised by a write statement to WriteFailure.

    Args:
        error: The driver error
        operation: The statement kind that failed (e.g. "INSERT", "UPDATE")
        table_name: The table name
        resource_id: Optional canonical key for context

    Returns:
        WriteFailure carrying the driver's diagnostic message
    """
    context = f"{operation} on {table_name}"
    if resource_id is not None:
        context += f" (resource: {resource_id})"

    return WriteFailure(
        f"{context} failed: {error.message}",
        operation=operation,
        table_name=table_name,
        resource_id=resource_id,
        original_error=error
    )


class TableGateway:
    """
    Gateway for one logical table.

    Owns its identity cache and holds a reference to the database driver.
    Not thread-safe: use one gateway per concurrent unit of work or
    synchronise externally.

    Example:
        users = TableGateway(driver, "users", model_factory(User))
        user = users.create({'name': 'a'})
        users.update(user.id, {'name': 'b'})
    """

    def __init__(
        self,
        driver: DatabaseDriver,
        table_name: str,
        row_factory: Union[RowObjectFactory, Type[RowObject]],
        key_codec: Union[KeyCodec, KeyScheme, str, None] = None,
        key_column: Optional[str] = None,
        *,
        evict_on_replace: bool = False,
        order_search_results: bool = True,
        default_search_limit: Optional[int] = None
    ):
        """Initialize table gateway.

        Args:
            driver: Database driver executing the statements
            table_name: Full name of the table
            row_factory: Callable building row objects, or a RowObject subclass
            key_codec: Codec or key scheme; sequential integers by default
            key_column: Identifying key column; "id" or "uuid" by scheme
            evict_on_replace: Evict the cached entry for a replaced row's key
            order_search_results: Honour order_column/order_direction in search().
                Set False to ignore them and return rows in storage order
            default_search_limit: Row limit used by search() without "limit"
        """
        if isinstance(row_factory, type) and issubclass(row_factory, RowObject):
            row_factory = model_factory(row_factory)
        if key_codec is None:
            key_codec = SequentialKeyCodec()
        elif not isinstance(key_codec, KeyCodec):
            key_codec = codec_for_scheme(key_codec)

        self.driver = driver
        self.table_name = table_name
        self.row_factory = row_factory
        self.key_codec = key_codec
        self.key_column = key_column or key_codec.default_column
        self.evict_on_replace = evict_on_replace
        self.order_search_results = order_search_results
        self.default_search_limit = default_search_limit or DEFAULT_SEARCH_LIMIT
        self.cache = IdentityCache(table_name)
        self.where = WhereClauseBuilder(driver, self.key_column, key_codec)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_ids(self, keys: Iterable[Any], use_cache: bool = True) -> Dict[Any, RowObject]:
        """
        Load rows by key, serving cached rows from memory.

        Keys missing from the cache are fetched with a single IN query.

        Args:
            keys: Canonical keys to load
            use_cache: Set False to fetch every key from the database

        Returns:
            Dictionary of canonical key -> row object for every key found.
            Keys with no row are omitted.
        """
        loaded: Dict[Any, RowObject] = {}
        keys_to_fetch: List[Any] = []
        seen = set()

        for key in keys:
            key = self.key_codec.normalize(key)
            cached = self.cache.get(key) if use_cache else None
            if cached is not None:
                loaded[key] = cached
            elif key not in seen:
                seen.add(key)
                keys_to_fetch.append(key)

        if loaded:
            logger.debug(f"Served {len(loaded)} {self.table_name} rows from cache")

        if keys_to_fetch:
            where_clause = self.where.build({self.key_column: keys_to_fetch}, "AND")
            result = self.driver.execute(f"SELECT * FROM {self._table} {where_clause}")

            for key, obj in self._convert_result(result):
                self.cache.put(key, obj)
                loaded[key] = obj

            logger.debug(f"Fetched {len(result.rows)} of {len(keys_to_fetch)} requested {self.table_name} rows")

        return loaded

    def load(self, key: Any, use_cache: bool = True) -> RowObject:
        """
        Load a single row by key.

        Raises:
            NotFoundError: If no row has this key
        """
        objects = self.load_ids([key], use_cache)

        if not objects:
            raise NotFoundError(self.table_name, key)

        return next(iter(objects.values()))

    def load_all(self) -> List[RowObject]:
        """Load every row of the table, replacing the cache contents."""
        self.cache.clear()
        return self._load_query(f"SELECT * FROM {self._table}")

    def load_range(self, offset: int, count: int) -> List[RowObject]:
        """
        Load a page of rows in storage order.

        The offset is positional; it has no relation to key values or
        insertion order.
        """
        return self._load_query(f"SELECT * FROM {self._table} LIMIT {int(offset)}, {int(count)}")

    def load_where_and(self, where_pairs: Mapping[str, Any]) -> List[RowObject]:
        """
        Load rows matching all of the column/value pairs.

        A value may be a collection to match any of its members:
            {'id': [1, 2, 3]} loads rows with id 1, 2 or 3.
        """
        return self._load_where(where_pairs, "AND")

    def load_where_or(self, where_pairs: Mapping[str, Any]) -> List[RowObject]:
        """Load rows matching any of the column/value pairs."""
        return self._load_where(where_pairs, "OR")

    def load_where_explicit(self, where: str) -> List[RowObject]:
        """
        Load rows matching a caller-written condition.

        WARNING: the condition is embedded verbatim and is not escaped.

        Args:
            where: Condition text without the WHERE keyword,
                e.g. "name = 'John Smith'"
        """
        return self._load_query(f"SELECT * FROM {self._table} WHERE {where}")

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def create(self, row: Mapping[str, Any]) -> RowObject:
        """
        Insert a new row and return it as loaded from the database.

        Schemes that generate keys assign one when the row has none. The
        row is re-read after the insert so database defaults are reflected.

        Raises:
            WriteFailure: If the insert fails
        """
        row = dict(row)

        if self.key_codec.generates_keys and row.get(self.key_column) is None:
            row[self.key_column] = self.key_codec.generate()

        key = row.get(self.key_column)
        if key is not None:
            key = self.key_codec.normalize(key)

        if row:
            query = f"INSERT INTO {self._table} {self.where.build_insert_values(row)}"
        else:
            query = self.driver.insert_defaults_statement(self.table_name)

        result = self._execute_write(query, "INSERT", key)

        if key is None:
            key = result.last_insert_id

        logger.info(f"Created {self.table_name} row {key}")
        return self.load(key, use_cache=False)

    def replace(self, row: Mapping[str, Any]) -> int:
        """
        Insert or overwrite a row by its primary or unique key.

        WARNING: a row that does not exist yet is inserted rather than
        reported. The cached entry for the key is left untouched unless the
        gateway was built with evict_on_replace=True.

        Returns:
            Number of rows the database reports as affected

        Raises:
            WriteFailure: If the statement fails
        """
        row = dict(row)
        key = row.get(self.key_column)
        if key is not None:
            key = self.key_codec.normalize(key)

        query = f"REPLACE INTO {self._table} {self.where.build_insert_values(row)}"
        result = self._execute_write(query, "REPLACE", key)

        if self.evict_on_replace and key is not None:
            self.cache.remove(key)

        logger.info(f"Replaced {self.table_name} row {key}")
        return result.affected_rows

    def update(self, key: Any, patch: Mapping[str, Any]) -> RowObject:
        """
        Update columns of one row and return the new snapshot.

        The UPDATE goes straight to the database; the row is never loaded
        and saved back. If the row is cached, the new snapshot is the cached
        one with the patch applied, so values set by the database itself
        (triggers, ON UPDATE defaults) are not reflected. Otherwise, or when
        the patch changes the key, the row is re-read.

        Raises:
            InvalidArgumentError: If the patch is empty
            WriteFailure: If the statement fails (zero affected rows is not a failure)
            NotFoundError: If the row has to be re-read and no longer exists
        """
        if not patch:
            raise InvalidArgumentError(f"Update of {self.table_name} row {key} has no columns", argument="patch")

        key = self.key_codec.normalize(key)
        patch = dict(patch)

        new_key = key
        if patch.get(self.key_column) is not None:
            new_key = self.key_codec.normalize(patch[self.key_column])
        key_changed = new_key != key

        query = (
            f"UPDATE {self._table} SET {self.where.build_assignments(patch)} "
            f"WHERE {self._key_column} = {self._escape_key(key)}"
        )
        self._execute_write(query, "UPDATE", key)

        cached = self.cache.get(key)
        if cached is not None and not key_changed:
            attributes = cached.to_attributes()
            attributes.update(patch)
            attributes[self.key_column] = key
            updated = self.row_factory(attributes, getattr(cached, 'field_types', None) or None)
            self.cache.put(key, updated)
        else:
            updated = self.load(new_key, use_cache=False)

        if key_changed:
            self.cache.remove(key)

        logger.info(f"Updated {self.table_name} row {key}")
        return updated

    def delete(self, key: Any) -> bool:
        """Delete one row; True if exactly one row was removed."""
        return self.delete_ids([key]) == 1

    def delete_ids(self, keys: Iterable[Any]) -> int:
        """
        Delete rows by key in one statement.

        Every requested key is evicted from the cache. Keys with no row are
        not an error.

        Returns:
            Number of rows the database removed
        """
        keys = [self.key_codec.normalize(key) for key in keys]
        if not keys:
            return 0

        query = f"DELETE FROM {self._table} {self.where.build({self.key_column: keys}, 'AND')}"
        result = self._execute_write(query, "DELETE", keys[0] if len(keys) == 1 else None)

        for key in keys:
            self.cache.remove(key)

        logger.info(f"Deleted {result.affected_rows} of {len(keys)} requested {self.table_name} rows")
        return result.affected_rows

    def delete_all(self, transaction_safe: bool = False) -> bool:
        """
        Delete every row and clear the cache.

        Args:
            transaction_safe: Use a slower DELETE that can run inside a
                transaction. The default fast clear causes an implicit commit.
        """
        if transaction_safe:
            query = f"DELETE FROM {self._table}"
        else:
            query = self.driver.truncate_statement(self.table_name)

        self._execute_write(query, "DELETE_ALL")
        self.cache.clear()

        logger.info(f"Cleared table {self.table_name}")
        return True

    def delete_where_and(self, where_pairs: Mapping[str, Any], clear_cache: bool = True) -> int:
        """
        Delete rows matching all of the column/value pairs.

        WARNING: the whole cache is cleared by default, because the deleted
        rows are not individually known. Only pass clear_cache=False when no
        cached row can be affected; delete_ids() is cache-precise instead.

        Returns:
            Number of rows deleted
        """
        return self._delete_where(where_pairs, "AND", clear_cache)

    def delete_where_or(self, where_pairs: Mapping[str, Any], clear_cache: bool = True) -> int:
        """Delete rows matching any of the column/value pairs. See delete_where_and()."""
        return self._delete_where(where_pairs, "OR", clear_cache)

    # ------------------------------------------------------------------
    # Searching
    # ------------------------------------------------------------------

    def search(self, parameters: Mapping[str, Any]) -> List[RowObject]:
        """Search with the standard parameter vocabulary. See advanced_search()."""
        return self.advanced_search(parameters)

    def advanced_search(self, parameters: Mapping[str, Any], where_clauses: Sequence[str] = ()) -> List[RowObject]:
        """
        Search the table. Results are not written to the cache.

        Recognised parameters:
            start_id, end_id: inclusive key bounds
            in_id: collection of keys
            offset, limit: paging; limit defaults to an unbounded sentinel
            order_column, order_direction: ordering, applied only together
                and only when the gateway orders search results

        Args:
            parameters: Search parameters, possibly straight from a request
            where_clauses: Extra condition fragments, embedded verbatim
                and ANDed with the rest. They are not escaped.

        Raises:
            InvalidArgumentError: If in_id is not a collection, or paging or
                ordering parameters are malformed
        """
        clauses = list(where_clauses)

        if parameters.get('start_id') is not None:
            clauses.append(f"{self._key_column} >= {self._escape_key(self.key_codec.coerce(parameters['start_id']))}")

        if parameters.get('end_id') is not None:
            clauses.append(f"{self._key_column} <= {self._escape_key(self.key_codec.coerce(parameters['end_id']))}")

        if parameters.get('in_id') is not None:
            in_ids = parameters['in_id']
            if not is_collection(in_ids):
                raise InvalidArgumentError('"in_id" needs to be a collection of IDs', argument="in_id")
            if in_ids:
                possible_ids = ", ".join(self._escape_key(self.key_codec.coerce(value)) for value in in_ids)
                clauses.append(f"{self._key_column} IN ({possible_ids})")
            else:
                clauses.append(UNSATISFIABLE)

        offset = self._int_parameter(parameters, 'offset', 0)
        limit = self._int_parameter(parameters, 'limit', self.default_search_limit)

        query = f"SELECT * FROM {self._table}"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)

        order_column = parameters.get('order_column')
        order_direction = parameters.get('order_direction')
        ordered = False
        if order_column and order_direction:
            if self.order_search_results:
                direction = str(order_direction).upper()
                if direction not in ORDER_DIRECTIONS:
                    raise InvalidArgumentError(f"Invalid order direction: {order_direction}", argument="order_direction")
                query += f" ORDER BY {self.driver.quote_identifier(order_column)} {direction}"
                ordered = True
            else:
                logger.debug(f"Ignoring search order on {self.table_name}; gateway does not order search results")

        if not ordered and (parameters.get('offset') is not None or parameters.get('limit') is not None):
            logger.warning(f"Paged search on {self.table_name} without ordering; pages follow storage order")

        query += f" LIMIT {offset}, {limit}"

        result = self.driver.execute(query)
        return [obj for _key, obj in self._convert_result(result)]

    # ------------------------------------------------------------------
    # Cache control
    # ------------------------------------------------------------------

    def get_cached(self, key: Any) -> Optional[RowObject]:
        """Return the cached row object for key without touching the database."""
        return self.cache.get(self.key_codec.normalize(key))

    def unset_cache(self, key: Any) -> None:
        """Remove the cache entry for key; absent keys are ignored."""
        self.cache.remove(self.key_codec.normalize(key))

    def empty_cache(self) -> None:
        """Completely empty the cache, e.g. after the table was changed externally."""
        self.cache.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def _table(self) -> str:
        return self.driver.quote_identifier(self.table_name)

    @property
    def _key_column(self) -> str:
        return self.driver.quote_identifier(self.key_column)

    def _escape_key(self, key: Any) -> str:
        return self.driver.escape(self.where.storage_key(key))

    def _load_where(self, where_pairs: Mapping[str, Any], conjunction: str) -> List[RowObject]:
        where_clause = self.where.build(where_pairs, conjunction)
        return self._load_query(f"SELECT * FROM {self._table} {where_clause}".rstrip())

    def _load_query(self, query: str) -> List[RowObject]:
        """Run a SELECT, cache every row and return the row objects in result order."""
        result = self.driver.execute(query)
        objects = []
        for key, obj in self._convert_result(result):
            self.cache.put(key, obj)
            objects.append(obj)
        return objects

    def _delete_where(self, where_pairs: Mapping[str, Any], conjunction: str, clear_cache: bool) -> int:
        where_clause = self.where.build(where_pairs, conjunction)
        if not where_clause:
            logger.warning(f"Predicate delete on {self.table_name} without conditions removes every row")

        result = self._execute_write(f"DELETE FROM {self._table} {where_clause}".rstrip(), "DELETE")

        if clear_cache:
            self.cache.clear()

        logger.info(f"Deleted {result.affected_rows} {self.table_name} rows by predicate")
        return result.affected_rows

    def _convert_result(self, result: QueryResult) -> List[Tuple[Any, RowObject]]:
        """Build (canonical key, row object) pairs from a query result."""
        converted = []
        field_types = result.field_types or None
        for row in result.rows:
            attributes = dict(row)
            key = attributes.get(self.key_column)
            if key is not None:
                key = self.key_codec.decode(key)
                attributes[self.key_column] = key
            converted.append((key, self.row_factory(attributes, field_types)))
        return converted

    def _execute_write(self, query: str, operation: str, resource_id: Optional[Any] = None) -> QueryResult:
        try:
            return self.driver.execute(query)
        except QueryError as e:
            logger.error(f"{operation} on {self.table_name} failed: {e.message}")
            raise map_write_error(e, operation, self.table_name, resource_id) from e

    @staticmethod
    def _int_parameter(parameters: Mapping[str, Any], name: str, default: int) -> int:
        value = parameters.get(name)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f'"{name}" must be an integer, got {value!r}', argument=name, original_error=e) from e

    def __repr__(self) -> str:
        return (
            f"TableGateway(table_name={self.table_name!r}, key_column={self.key_column!r}, "
            f"key_codec={self.key_codec!r}, cached={len(self.cache)})"
        )


def create_table_gateway(
    config: DatabaseConfig,
    driver: DatabaseDriver,
    table_name: str,
    row_factory: Union[RowObjectFactory, Type[RowObject]],
    key_codec: Union[KeyCodec, KeyScheme, str, None] = None,
    **kwargs
) -> TableGateway:
    """
    Factory function to create a TableGateway instance.

    Args:
        config: Database configuration
        driver: Database driver
        table_name: Base table name; the configured prefix is applied
        row_factory: Callable building row objects, or a RowObject subclass
        key_codec: Codec or key scheme
        **kwargs: Further TableGateway keyword arguments

    Returns:
        Configured TableGateway instance
    """
    config.configure_logging()
    kwargs.setdefault('default_search_limit', config.default_search_limit)
    full_table_name = config.get_table_name(table_name)
    return TableGateway(driver, full_table_name, row_factory, key_codec, **kwargs)
