"""
Domain-Specific Exceptions for the SQL Table Gateway

This module consolidates all exceptions that extend the base SqlGatewayError.

Organized by category:
1. Argument and Validation Errors
2. Resource Not Found Errors
3. Statement Errors (driver-reported failures)
4. Infrastructure Errors
"""

from typing import Any, Dict, Optional

from .base import SqlGatewayError


# =============================================================================
# Argument and Validation Errors
# =============================================================================

class InvalidArgumentError(SqlGatewayError):
    """Raised when a contract violation is detectable without a round trip.

    Used for:
    - Conjunction keywords other than AND/OR
    - Non-collection values where a collection is required (e.g. ``in_id``)
    - Malformed UUID strings
    - Invalid ordering directions
    """

    def __init__(self, message: str, argument: Optional[str] = None, original_error: Optional[Exception] = None):
        """Initialize invalid argument error.

        Args:
            message: Human-readable error message
            argument: Name of the offending argument, if known
            original_error: The original exception that caused this error
        """
        self.argument = argument
        context = {}
        if argument:
            context['argument'] = argument
        super().__init__(message, original_error, context)


class ValidationError(SqlGatewayError):
    """Raised when a row factory cannot build a row object from raw attributes."""

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


# =============================================================================
# Resource Not Found Errors
# =============================================================================

class NotFoundError(SqlGatewayError):
    """Raised when a single-key load finds no row."""

    def __init__(self, table_name: str, key: Any, original_error: Optional[Exception] = None):
        """Initialize not found error.

        Args:
            table_name: Name of the table that was searched
            key: The canonical key that was not found
            original_error: The original exception that caused this error
        """
        self.key = key
        message = f"There is no {table_name} object with id: {key}"
        super().__init__(message, original_error, {'key': key}, table_name=table_name)


class GatewayNotRegisteredError(SqlGatewayError, LookupError):
    """Raised when a registry has no gateway for the requested row type."""

    def __init__(self, row_type: Any):
        self.row_type = row_type
        name = getattr(row_type, '__name__', repr(row_type))
        super().__init__(f"No table gateway registered for {name}", context={'row_type': name})


# =============================================================================
# Statement Errors
# =============================================================================

class QueryError(SqlGatewayError):
    """Raised by a database driver when a statement fails.

    Carries the driver's diagnostic message. Read operations let this
    propagate unmodified; write operations map it to WriteFailure.
    """

    def __init__(self, message: str, sql: Optional[str] = None, original_error: Optional[Exception] = None):
        """Initialize query error.

        Args:
            message: Driver diagnostic message
            sql: The statement that failed
            original_error: The original driver exception
        """
        self.sql = sql
        context = {}
        if sql:
            context['sql'] = sql
        super().__init__(message, original_error, context)


class WriteFailure(SqlGatewayError):
    """Raised when an insert, replace, update or delete reports failure.

    Used for:
    - Constraint violations on insert/replace
    - Failed UPDATE/DELETE statements
    - TRUNCATE/DELETE failures when clearing a table

    Zero affected rows is not a failure.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table_name: Optional[str] = None,
        resource_id: Optional[Any] = None,
        original_error: Optional[Exception] = None
    ):
        """Initialize write failure.

        Args:
            message: Human-readable error message including the driver diagnostic
            operation: The statement kind that failed (e.g. "INSERT")
            table_name: The table the statement targeted
            resource_id: Canonical key of the affected row, if known
            original_error: The original exception that caused this error
        """
        self.operation = operation
        self.resource_id = resource_id
        context = {}
        if operation:
            context['operation'] = operation
        if resource_id is not None:
            context['resource_id'] = resource_id
        super().__init__(message, original_error, context, table_name=table_name)


# =============================================================================
# Infrastructure Errors
# =============================================================================

class ConnectionError(SqlGatewayError):
    """Raised when a driver cannot open a connection to the database.

    Used for:
    - Network connectivity issues
    - Authentication/authorization failures
    - Missing or unreadable database files
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        """Initialize connection error.

        Args:
            message: Human-readable error message
            original_error: The original exception that caused this error
            context: Additional context information (e.g., host, database)
        """
        super().__init__(message, original_error, context)
