"""
ff-search: fluent MySQL query building and multi-column full-text search
for Fenixflow applications.

Features:
- Fluent SELECT builder with positional parameter binding
- MATCH ... AGAINST predicates with summed relevance ordering
- Table and column allow lists guarding every identifier
- Per-column full-text search with pagination and cost reporting
- Structured logging via structlog
"""

# Version is read from package metadata (pyproject.toml is the single source of truth)
try:
    from importlib.metadata import version

    __version__ = version("ff-search")
except Exception:
    __version__ = "0.1.0"

from .config import DatabaseSettings
from .db import SQL, AllowList, DataAccessGuard, MySQL, MySQLQueryBuilder, QueryBuilder
from .db.query_builder import LogicGate, SearchModifier
from .exceptions import (
    AccessDeniedError,
    ConfigurationError,
    DatabaseError,
    FFSearchError,
    QueryBuildError,
    SearchError,
    StateError,
    ValidationError,
)
from .log import configure_logging, get_logger
from .search import ColumnResult, Pagination, Search, SearchResults

__all__ = [
    # Version
    "__version__",
    # Configuration
    "DatabaseSettings",
    "configure_logging",
    "get_logger",
    # Database
    "SQL",
    "MySQL",
    "QueryBuilder",
    "MySQLQueryBuilder",
    "LogicGate",
    "SearchModifier",
    "AllowList",
    "DataAccessGuard",
    # Search
    "Search",
    "SearchResults",
    "ColumnResult",
    "Pagination",
    # Exceptions
    "FFSearchError",
    "QueryBuildError",
    "ValidationError",
    "AccessDeniedError",
    "DatabaseError",
    "StateError",
    "SearchError",
    "ConfigurationError",
]
