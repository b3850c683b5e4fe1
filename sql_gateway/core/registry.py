"""
Gateway registry.

The host application builds one registry at startup, registers one gateway
per row type and passes the registry to whatever needs table access.
"""

import logging
from typing import Dict, Iterator, Type

from ..exceptions import GatewayNotRegisteredError
from ..models.base import RowObject
from .table_gateway import TableGateway

logger = logging.getLogger(__name__)


class GatewayRegistry:
    """Maps row object types to the gateway serving their table."""

    def __init__(self):
        self._gateways: Dict[Type[RowObject], TableGateway] = {}

    def register(self, row_type: Type[RowObject], gateway: TableGateway) -> TableGateway:
        """
        Register the gateway for a row type.

        Re-registering a type replaces the previous gateway.

        Returns:
            The registered gateway, for chaining at setup time
        """
        if row_type in self._gateways:
            logger.warning(f"Replacing registered gateway for {row_type.__name__}")
        self._gateways[row_type] = gateway
        logger.debug(f"Registered gateway for {row_type.__name__} on table {gateway.table_name}")
        return gateway

    def get(self, row_type: Type[RowObject]) -> TableGateway:
        """
        Return the gateway for a row type.

        Raises:
            GatewayNotRegisteredError: If no gateway was registered for it
        """
        try:
            return self._gateways[row_type]
        except KeyError:
            raise GatewayNotRegisteredError(row_type) from None

    def for_object(self, obj: RowObject) -> TableGateway:
        """Return the gateway serving the table a row object came from."""
        return self.get(type(obj))

    def clear_caches(self) -> None:
        """Empty the identity cache of every registered gateway."""
        for gateway in self._gateways.values():
            gateway.empty_cache()

    def __contains__(self, row_type: Type[RowObject]) -> bool:
        return row_type in self._gateways

    def __iter__(self) -> Iterator[Type[RowObject]]:
        return iter(self._gateways)

    def __len__(self) -> int:
        return len(self._gateways)
