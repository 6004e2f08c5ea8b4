"""
Multi-column full-text search.

Each searched column gets its own MATCH ... AGAINST query and its own
COUNT(*) query, so every column reports its own relevance ranking and
pagination. Columns are then ranked by how many rows matched.

Limitations:
- Only one table per search (joins are allowed)
- Requires a FULLTEXT index on every searched column
"""

import time
from typing import Any, Dict, List, Optional

from ..db.access import DataAccessGuard
from ..exceptions import FFSearchError, SearchError, ValidationError
from ..log import get_logger
from .models import ColumnResult, Pagination, SearchResults


class Search:
    """
    Fluent search over several full-text indexed columns.

    Usage:
        guard = DataAccessGuard(db, tables=["tracks"], columns=["id", "track", "artist"])
        results = (
            Search(guard)
            .search("tracks", ["Miles", "Davis"])
            .columns(["track", "artist"])
            .select(["id", "track", "artist"])
            .limit(0, 10)
            .execute()
        )
    """

    def __init__(self, guard: DataAccessGuard, select: Optional[List[str]] = None, logger=None):
        """
        Initialize search.

        Args:
            guard: Data access guard that validates identifiers and runs queries
            select: Columns to return for each match
            logger: Optional logger instance
        """
        self.guard = guard
        self.logger = logger or get_logger(__name__)

        self.table: str = ""
        self.search_terms: List[str] = []
        self.search_columns: List[str] = []
        self.select_columns: List[str] = list(select or [])
        self.offset: int = 0
        self.count: int = 0
        self.order_by: List[str] = []
        self.joins: List[str] = []

        self._results: Optional[SearchResults] = None

    # ==================== Configuration ====================

    def search(self, table: str, search_terms: List[str]) -> "Search":
        self.table = table
        self.search_terms = list(search_terms)
        return self

    def columns(self, columns: List[str]) -> "Search":
        """Set the full-text indexed columns to search, one query each."""
        self.search_columns = list(columns)
        return self

    def select(self, select: List[str]) -> "Search":
        """Set the columns to return for each match."""
        self.select_columns = list(select)
        return self

    def limit(self, offset: int, count: int) -> "Search":
        self.offset = offset
        self.count = count
        return self

    def order(self, order: List[str]) -> "Search":
        """
        Set ORDER BY expressions applied before the relevance ordering.

        Without them, rows come back by summed relevance, best first.
        """
        self.order_by = list(order)
        return self

    def join(self, join: List[str]) -> "Search":
        self.joins = list(join)
        return self

    # ==================== Execution ====================

    def _validate(self) -> None:
        if not self.table:
            raise ValidationError("Could not run search, no table provided")
        if not self.search_columns:
            raise ValidationError("Could not run search, no columns provided")
        if not self.search_terms:
            raise ValidationError("Could not run search, no search terms provided")
        if not self.select_columns:
            raise ValidationError("Could not run search, no select columns provided")

    def execute(self) -> Dict[str, Any]:
        """
        Run the search.

        Returns:
            The result envelope as a dict

        Raises:
            ValidationError: If table, columns, search terms or select columns are unset
            SearchError: If any per-column query fails; no partial results are kept
        """
        self._validate()

        started = time.perf_counter()
        try:
            results = [self._search_column(column) for column in self.search_columns]
        except FFSearchError as e:
            self.logger.error("search_failed", table=self.table, error=str(e), exc_info=True)
            raise SearchError(str(e)) from e

        results.sort(key=lambda result: result.total_entries, reverse=True)

        self._results = SearchResults(
            results=results,
            performance=time.perf_counter() - started,
            columns=list(self.search_columns),
        )
        self.logger.info(
            "search_completed",
            table=self.table,
            columns=self.search_columns,
            terms=len(self.search_terms),
            elapsed=self._results.performance,
        )
        return self._results.to_dict()

    def _search_column(self, column: str) -> ColumnResult:
        started = time.perf_counter()

        self.guard.match_against(
            self.table, self.select_columns, [column], self.search_terms
        ).limit(self.offset, self.count).order(self.order_by).join(self.joins)
        try:
            items = self.guard.execute()
            query = self.guard.get_last_query()
            result_total = self.guard.get_row_count()
            performance = self.guard.get_performance()
        finally:
            self.guard.close()

        # Unlimited count for pagination
        self.guard.match_count(self.table, [column], self.search_terms).join(self.joins)
        try:
            rows = self.guard.execute()
        finally:
            self.guard.close()
        total = int(rows[0]["count"]) if rows else 0

        pagination = None
        if total > 0:
            pagination = Pagination.from_total(total, self.count, self.offset)

        elapsed = time.perf_counter() - started
        self.logger.debug(
            "column_searched",
            column=column,
            result_total=result_total,
            total=total,
            elapsed=elapsed,
        )

        return ColumnResult(
            column=column,
            items=items,
            query=query,
            performance=performance,
            result_total=result_total,
            elapsed=elapsed,
            pagination=pagination,
        )

    # ==================== Results ====================

    def get_results(self) -> Dict[str, Any]:
        """Return the last result envelope, or an empty dict if no search ran."""
        if self._results is None:
            return {}
        return self._results.to_dict()

    def get_search_query(self) -> str:
        """Return the statement most recently rendered by the data layer."""
        return self.guard.get_last_query()
