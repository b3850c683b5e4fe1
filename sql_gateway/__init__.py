"""
SQL Table Gateway

Generic table gateways mapping SQL rows to immutable pydantic row objects,
for tables keyed by auto-increment integers or timestamp-ordered UUIDs.
Provides batched loading, a per-gateway identity cache, AND/OR predicate
building and create/replace/update/delete with cache reconciliation.
"""

from .config import DatabaseConfig
from .exceptions import (
    ConnectionError,
    GatewayNotRegisteredError,
    InvalidArgumentError,
    NotFoundError,
    QueryError,
    SqlGatewayError,
    ValidationError,
    WriteFailure,
)
from .models import RowObject, RowObjectFactory, model_factory
from .drivers import DatabaseDriver, MySQLDriver, QueryResult, SQLiteDriver
from .core import (
    GatewayRegistry,
    IdentityCache,
    KeyCodec,
    KeyScheme,
    SequentialKeyCodec,
    TableGateway,
    UuidKeyCodec,
    WhereClauseBuilder,
    codec_for_scheme,
    create_table_gateway,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DatabaseConfig",

    # Exceptions
    "ConnectionError",
    "GatewayNotRegisteredError",
    "InvalidArgumentError",
    "NotFoundError",
    "QueryError",
    "SqlGatewayError",
    "ValidationError",
    "WriteFailure",

    # Row objects
    "RowObject",
    "RowObjectFactory",
    "model_factory",

    # Drivers
    "DatabaseDriver",
    "MySQLDriver",
    "QueryResult",
    "SQLiteDriver",

    # Gateway architecture
    "GatewayRegistry",
    "IdentityCache",
    "KeyCodec",
    "KeyScheme",
    "SequentialKeyCodec",
    "TableGateway",
    "UuidKeyCodec",
    "WhereClauseBuilder",
    "codec_for_scheme",
    "create_table_gateway",
]
