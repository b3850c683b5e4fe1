# Base exception class
from .base import SqlGatewayError

from .domain_exceptions import (
    ConnectionError,
    GatewayNotRegisteredError,
    InvalidArgumentError,
    NotFoundError,
    QueryError,
    ValidationError,
    WriteFailure,
)

__all__ = [
    # Base exception
    "SqlGatewayError",

    # Domain exceptions (alphabetically ordered)
    "ConnectionError",
    "GatewayNotRegisteredError",
    "InvalidArgumentError",
    "NotFoundError",
    "QueryError",
    "ValidationError",
    "WriteFailure",
]
