"""
Custom exceptions for the ff-search package.

Every error raised by the query builder, the access guard and the search
orchestrator derives from FFSearchError so callers can catch one type.
"""


class FFSearchError(Exception):
    """Base exception for all ff-search errors."""

    pass


class QueryBuildError(FFSearchError):
    """Raised when a query builder invariant is violated before execution."""

    pass


class ValidationError(FFSearchError):
    """Raised when a required search or query parameter is missing."""

    pass


class AccessDeniedError(FFSearchError):
    """Raised when a table or column is not on its allow list."""

    def __init__(self, identifier: str, kind: str = "column"):
        self.identifier = identifier
        self.kind = kind
        super().__init__(f"{kind.capitalize()} not allowed: {identifier}")


class DatabaseError(FFSearchError):
    """Raised when the driver fails to connect, prepare, bind or execute."""

    def __init__(self, message: str, query: str = None):
        self.query = query
        super().__init__(message)


class StateError(FFSearchError):
    """Raised when an operation needs state that has not been set yet."""

    pass


class SearchError(FFSearchError):
    """Raised when a multi-column search fails for any reason."""

    prefix = "Search Exception: "

    def __init__(self, message: str = ""):
        super().__init__(f"{self.prefix}{message}")


class ConfigurationError(FFSearchError):
    """Raised when connection settings are missing or invalid."""

    def __init__(self, message: str, missing: list = None):
        self.missing = missing or []

        if missing:
            message = f"{message}: {', '.join(missing)}"

        super().__init__(message)
