from typing import Any, Dict, Optional


class SqlGatewayError(Exception):
    """Base exception for all table gateway errors.

    Errors raised on behalf of a gateway name the table they concern; the
    table name is always the first entry of the rendered context.

    Attributes:
        message: Human-readable error message
        original_error: The exception that caused this error (if any)
        table_name: The table the failing operation targeted (if any)
        context: Additional context information about the error
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        table_name: Optional[str] = None
    ):
        self.message = message
        self.original_error = original_error
        self.table_name = table_name
        self.context = {'table_name': table_name} if table_name else {}
        self.context.update(context or {})
        super().__init__(message)

    @property
    def root_cause(self) -> Optional[BaseException]:
        """The innermost wrapped error, e.g. the driver exception behind a WriteFailure."""
        cause = self.original_error
        while isinstance(cause, SqlGatewayError) and cause.original_error is not None:
            cause = cause.original_error
        return cause

    def __str__(self) -> str:
        error_str = self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            error_str += f" (Context: {context_str})"
        return error_str

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, table_name={self.table_name!r}, "
            f"original_error={self.original_error!r})"
        )
