"""
Core gateway components.

- KeyCodec: canonical <-> storage key transcoding (sequential, COMB UUID)
- WhereClauseBuilder: escaped AND/OR filters from predicate pairs
- IdentityCache: per-gateway identity map
- TableGateway: CRUD operations with cache reconciliation
- GatewayRegistry: explicit row type -> gateway lookup
"""

from .identity_cache import IdentityCache
from .key_codec import KeyCodec, KeyScheme, SequentialKeyCodec, UuidKeyCodec, codec_for_scheme
from .registry import GatewayRegistry
from .table_gateway import TableGateway, create_table_gateway, map_write_error
from .where_clause import WhereClauseBuilder

__all__ = [
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
    "map_write_error",
]
