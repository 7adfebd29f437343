"""
Domain exceptions

Raised by services and mapped to JSON responses by the handlers in main.py.
"""


class BackendError(Exception):
    """Raised when the data platform rejects or fails a request. The message is shown verbatim."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @classmethod
    def from_exception(cls, exc: Exception) -> "BackendError":
        # postgrest APIError keeps the platform text in .message
        message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
        return cls(message)


class UnknownTableError(Exception):
    """Raised when a table name is not in the table registry."""

    def __init__(self, table: str):
        super().__init__(f"Unknown table: {table}")
        self.table = table


class ReadOnlyTableError(Exception):
    """Raised when a mutation targets a table registered as read-only."""

    def __init__(self, table: str):
        super().__init__(f"Table `{table}` is read-only")
        self.table = table


class QueryValidationError(Exception):
    """Raised when query text is rejected before any backend round-trip."""
    pass


class FunctionError(Exception):
    """Error returned by a function endpoint as {"error": message}."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
