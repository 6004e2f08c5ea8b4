"""
Fluent SELECT query builder.

Accumulates clause fragments and renders them into one statement with ``?``
placeholders plus the ordered list of values to bind. A builder is single-use:
configure it, call ``execute()`` once, then read the row count or the rendered
query. Create a new builder for every query.

Example:
    builder = MySQLQueryBuilder(db)
    cursor = (
        builder.select(["id", "track"])
        .from_("tracks")
        .where("artist", "=", "Miles Davis")
        .and_("year", "<", "1960")
        .order(["year DESC"])
        .limit(0, 10)
        .execute()
    )
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from ...exceptions import DatabaseError, QueryBuildError
from ...log import get_logger
from .clauses import PLACEHOLDER, Clause, LogicGate


class QueryBuilder(ABC):
    """Dialect-independent part of the fluent query builder."""

    def __init__(self, connection, logger=None):
        """
        Initialize builder.

        Args:
            connection: Connection provider exposing ``cursor()`` and ``status_cursor()``
            logger: Optional logger instance
        """
        self.connection = connection
        self.logger = logger or get_logger(__name__)

        self.table: str = ""
        self.columns: List[str] = []
        self.where_clauses: List[Clause] = []
        self.group_by: List[str] = []
        self.order_by: List[str] = []
        self.joins: List[str] = []
        self.offset: int = 0
        self.count: int = 0

        self._query: str = ""
        self._bind_values: List[Any] = []
        self._cursor = None

    # ==================== Accumulators ====================

    def select(self, columns: List[str]) -> "QueryBuilder":
        """Append columns or expressions to the select list."""
        self.columns.extend(columns)
        return self

    def from_(self, table: str) -> "QueryBuilder":
        """Set the table to select from."""
        self.table = table
        return self

    def group(self, columns: List[str]) -> "QueryBuilder":
        """Append GROUP BY columns."""
        self.group_by.extend(columns)
        return self

    def order(self, expressions: List[str]) -> "QueryBuilder":
        """Append ORDER BY expressions, e.g. ``["year DESC"]``."""
        self.order_by.extend(expressions)
        return self

    def join(self, joins: List[str]) -> "QueryBuilder":
        """
        Append join fragments.

        Fragments are inserted verbatim, e.g.
        ``["LEFT JOIN albums ON albums.id = tracks.album_id"]``.
        """
        self.joins.extend(joins)
        return self

    def limit(self, offset: int, count: int) -> "QueryBuilder":
        """Set the page window. A count of 0 means no LIMIT clause."""
        if offset < 0 or count < 0:
            raise QueryBuildError(f"Invalid limit {offset}, {count}: values must be non-negative")
        self.offset = offset
        self.count = count
        return self

    def where(
        self,
        column: str,
        operator: str,
        value: Any,
        logic_gate: str = "",
        search_modifier: str = "",
    ) -> "QueryBuilder":
        """
        Append a WHERE predicate.

        The first predicate always renders as ``WHERE``; later ones need an
        explicit ``AND`` or ``OR``.

        Args:
            column: Column or expression on the left-hand side
            operator: Comparison operator (=, <, <=, >=, <>, LIKE, AGAINST...)
            value: Value bound to the placeholder
            logic_gate: AND | OR (ignored for the first predicate)
            search_modifier: Full-text mode; when set, the column is treated as a
                MATCH expression and the placeholder renders as ``(? <mode>)``

        Raises:
            QueryBuildError: If a later predicate has no gate or an invalid one
        """
        return self._append_clause(
            column, operator, value, logic_gate, search_modifier, is_match=bool(search_modifier)
        )

    def _append_clause(
        self,
        column: str,
        operator: str,
        value: Any,
        logic_gate: str,
        search_modifier: str = "",
        is_match: bool = False,
    ) -> "QueryBuilder":
        if not self.where_clauses:
            gate = LogicGate.WHERE
        elif not logic_gate:
            raise QueryBuildError("Please specify a logic gate for subsequent where clauses")
        else:
            gate = LogicGate.parse(logic_gate)
            if gate is LogicGate.WHERE:
                raise QueryBuildError("Logic gate 'WHERE' is only valid for the first clause")

        self.where_clauses.append(
            Clause(column, operator, value, gate, search_modifier, is_match=is_match)
        )
        return self

    def and_(self, column: str, operator: str, value: Any) -> "QueryBuilder":
        return self.where(column, operator, value, LogicGate.AND)

    def or_(self, column: str, operator: str, value: Any) -> "QueryBuilder":
        return self.where(column, operator, value, LogicGate.OR)

    # ==================== Rendering ====================

    def _select_additions(self) -> Tuple[List[str], List[Any]]:
        """Extra select expressions and their bind values, appended after the columns."""
        return [], []

    def _order_additions(self) -> List[str]:
        """Extra ORDER BY expressions, appended after the configured ones."""
        return []

    @abstractmethod
    def _render_limit(self) -> str:
        """Render the LIMIT clause for the configured window."""

    def build_query(self) -> Tuple[str, List[Any]]:
        """
        Render the statement and its bind values.

        Render order: SELECT, FROM, joins, WHERE, GROUP BY, ORDER BY, LIMIT.
        Bind values follow placeholder order in the rendered text. Calling this
        more than once yields the same result.

        Returns:
            Tuple of (query, values)
        """
        extra_columns, values = self._select_additions()
        columns = self.columns + extra_columns
        order_by = self.order_by + self._order_additions()

        query_parts = [f"SELECT {', '.join(columns)}", f"FROM {self.table}"]

        if self.joins:
            query_parts.append(" ".join(self.joins))

        for clause in self.where_clauses:
            query_parts.append(clause.render())
            values.append(clause.value)

        if self.group_by:
            query_parts.append(f"GROUP BY {', '.join(self.group_by)}")

        if order_by:
            query_parts.append(f"ORDER BY {', '.join(order_by)}")

        if self.count > 0:
            query_parts.append(self._render_limit())

        query = " ".join(query_parts)
        self._query = query
        self._bind_values = values
        return query, list(values)

    # ==================== Execution ====================

    def execute(self):
        """
        Render, prepare, bind and execute the statement.

        Returns:
            The live cursor holding the result set

        Raises:
            QueryBuildError: If table, select list or where clause is missing
            DatabaseError: If the driver fails
        """
        if not self.table:
            raise QueryBuildError("Table not defined")
        if not self.columns:
            raise QueryBuildError("Columns to query not defined")
        if not self.where_clauses:
            raise QueryBuildError("Where clause empty")

        query, values = self.build_query()

        placeholders = query.count(PLACEHOLDER)
        if placeholders != len(values):
            raise QueryBuildError(
                f"Query has {placeholders} placeholders but {len(values)} bind values"
            )

        self.logger.debug("query_built", query=query, bind_count=len(values))

        cursor = None
        try:
            cursor = self.connection.cursor()
            cursor.execute(query, tuple(values))
        except Exception as e:
            self.logger.error("query_failed", query=query, error=str(e), exc_info=True)
            if cursor is not None:
                cursor.close()
            raise DatabaseError(f"Query execution failed: {e}", query=query) from e

        self._cursor = cursor
        return cursor

    def get_row_count(self) -> int:
        """Return the row count reported by the driver for the executed query."""
        if self._cursor is None:
            raise QueryBuildError("Failed to get row count. No query was performed.")
        return self._cursor.rowcount

    def close(self) -> None:
        """Close the cursor of the executed query, if any."""
        if self._cursor is not None:
            self._cursor.close()

    @abstractmethod
    def get_performance(self) -> Dict[str, Any]:
        """Return the engine's cost report for the last query."""

    # ==================== Diagnostics ====================

    def get_last_query(self) -> str:
        return self._query

    def get_bind_values(self) -> List[Any]:
        return list(self._bind_values)

    def to_string(self, with_parameters: bool = True) -> str:
        """
        Return the rendered query.

        With ``with_parameters`` each bind value is quoted and substituted into
        its placeholder. The result is for logs and debugging only, never
        execute it.
        """
        if not self._query:
            return ""
        if not with_parameters or not self._bind_values:
            return self._query

        values = iter(self._bind_values)
        return re.sub(
            re.escape(PLACEHOLDER),
            lambda _: _quote_literal(next(values)),
            self._query,
            count=len(self._bind_values),
        )

    def __str__(self) -> str:
        return self.to_string(with_parameters=False)


def _quote_literal(value: Any) -> str:
    return "'" + str(value).replace("'", "''") + "'"
