"""
MySQL query builder implementation.

Handles MySQL-specific SQL generation:
- MATCH ... AGAINST full-text predicates with relevance scores
- ``LIMIT offset, count`` pagination
- ``SHOW STATUS`` cost probe
"""

from typing import Any, Dict, List, Tuple

from ...exceptions import DatabaseError
from .base import QueryBuilder
from .clauses import LogicGate, MatchExpression, SearchModifier

PERFORMANCE_QUERY = "SHOW STATUS LIKE 'Last_Query_Cost'"


class MySQLQueryBuilder(QueryBuilder):
    """MySQL-specific query builder with full-text search support."""

    def __init__(self, connection, logger=None):
        super().__init__(connection, logger=logger)
        self.matches: List[MatchExpression] = []

    def match(
        self,
        columns: List[str],
        value: str,
        search_modifier: str,
        logic_gate: str = "",
        include_relevance: bool = True,
    ) -> "MySQLQueryBuilder":
        """
        Add a full-text MATCH ... AGAINST predicate.

        The value is wrapped in ``*`` wildcards for partial matching. When
        ``include_relevance`` is set, the match score is added to the select
        list as ``relevanceN`` (with the search term echoed as
        ``relevanceNTerm``) and the summed scores order the results.

        Args:
            columns: Columns covered by a FULLTEXT index
            value: Search term
            search_modifier: One of the SearchModifier modes
            logic_gate: AND | OR; defaults to AND after the first clause
            include_relevance: Whether to select and order by the match score

        Raises:
            QueryBuildError: If the search modifier or logic gate is invalid
        """
        modifier = SearchModifier.parse(search_modifier)

        if self.where_clauses and not logic_gate:
            logic_gate = LogicGate.AND

        expression = MatchExpression(
            columns=tuple(columns),
            value=f"*{value}*",
            search_modifier=modifier,
            include_relevance=include_relevance,
        )
        self._append_clause(
            expression.expression,
            "AGAINST",
            expression.value,
            logic_gate,
            modifier.value,
            is_match=True,
        )
        self.matches.append(expression)
        return self

    def _select_additions(self) -> Tuple[List[str], List[Any]]:
        columns, values = [], []
        for index, match in enumerate(self.matches):
            if not match.include_relevance:
                continue
            columns.append(match.relevance_select(index))
            values.append(match.value)
            columns.append(match.term_select(index))
            values.append(match.value)
        return columns, values

    def _order_additions(self) -> List[str]:
        # Sum of every emitted relevance score, best match first
        aliases = [
            MatchExpression.relevance_alias(index)
            for index, match in enumerate(self.matches)
            if match.include_relevance
        ]
        if not aliases:
            return []
        return [f"{'+'.join(aliases)} DESC"]

    def _render_limit(self) -> str:
        return f"LIMIT {self.offset}, {self.count}"

    def get_performance(self) -> Dict[str, Any]:
        """
        Return the optimizer's cost estimate for the last query on this connection.

        Runs on the provider's unprepared ``status_cursor()``.

        Returns:
            The raw ``SHOW STATUS`` row, e.g.
            ``{"Variable_name": "Last_Query_Cost", "Value": "10.499"}``,
            or an empty dict if the engine reports nothing
        """
        cursor = None
        try:
            cursor = self.connection.status_cursor()
            cursor.execute(PERFORMANCE_QUERY)
            row = cursor.fetchone()
        except Exception as e:
            self.logger.error("performance_probe_failed", error=str(e))
            raise DatabaseError(f"Performance probe failed: {e}", query=PERFORMANCE_QUERY) from e
        finally:
            if cursor is not None:
                cursor.close()

        return dict(row) if row else {}
