"""
Database connection, query building and access control modules.
"""

from .access import AllowList, DataAccessGuard
from .mysql import MySQL
from .query_builder import MySQLQueryBuilder, QueryBuilder, SearchModifier
from .sql import SQL

__all__ = [
    "SQL",
    # MySQL
    "MySQL",
    # Query building
    "QueryBuilder",
    "MySQLQueryBuilder",
    "SearchModifier",
    # Access control
    "AllowList",
    "DataAccessGuard",
]
