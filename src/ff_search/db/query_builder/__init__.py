"""
Query builder module for SELECT and full-text SQL generation.

Provides the QueryBuilder base class and the MySQL implementation.
"""

from .base import QueryBuilder
from .clauses import Clause, LogicGate, MatchExpression, SearchModifier
from .mysql import PERFORMANCE_QUERY, MySQLQueryBuilder

__all__ = [
    "QueryBuilder",
    "MySQLQueryBuilder",
    "Clause",
    "LogicGate",
    "MatchExpression",
    "SearchModifier",
    "PERFORMANCE_QUERY",
]
