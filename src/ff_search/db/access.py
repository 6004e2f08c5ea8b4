"""
Allow-list gate between caller-supplied identifiers and the query builder.

Table and column names cannot be bound as parameters, so every identifier a
caller passes in is checked against an allow list before it reaches SQL.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Optional, Union

from ..exceptions import AccessDeniedError, DatabaseError, StateError, ValidationError
from ..log import get_logger
from .query_builder import LogicGate, MySQLQueryBuilder, SearchModifier

COUNT_SELECT = "COUNT(*) as count"


@dataclass(frozen=True)
class AllowList:
    """
    Set of permitted identifiers.

    ``names`` is None for an unrestricted list; otherwise only the listed
    names are accepted.
    """

    names: Optional[FrozenSet[str]] = None

    WILDCARD: ClassVar[str] = "*"

    @classmethod
    def unrestricted(cls) -> "AllowList":
        return cls(None)

    @classmethod
    def restricted_to(cls, names: Iterable[str]) -> "AllowList":
        return cls(frozenset(names))

    @classmethod
    def from_names(cls, names: Optional[Iterable[str]]) -> "AllowList":
        """Build from a plain list: empty, None or ``["*"]`` mean unrestricted."""
        names = list(names or [])
        if not names or names == [cls.WILDCARD]:
            return cls.unrestricted()
        return cls.restricted_to(names)

    @property
    def is_unrestricted(self) -> bool:
        return self.names is None

    def allows(self, name: str) -> bool:
        return self.names is None or name in self.names


AllowListLike = Union[AllowList, Iterable[str], None]


def _as_allow_list(value: AllowListLike) -> AllowList:
    if isinstance(value, AllowList):
        return value
    return AllowList.from_names(value)


class DataAccessGuard:
    """
    Validates identifiers and builds the canned search queries.

    Usage:
        guard = DataAccessGuard(db, tables=["tracks"], columns=["track", "artist"])
        guard.match_against("tracks", ["track"], ["track", "artist"], ["Miles", "Davis"])
        rows = guard.execute()
    """

    def __init__(
        self,
        connection,
        tables: AllowListLike = None,
        columns: AllowListLike = None,
        logger=None,
    ):
        """
        Initialize guard.

        Args:
            connection: Connection provider handed to every builder
            tables: Permitted table names (empty or ``["*"]`` = any)
            columns: Permitted column names (empty or ``["*"]`` = any)
            logger: Optional logger instance
        """
        self.connection = connection
        self.logger = logger or get_logger(__name__)
        self.table_allow_list = _as_allow_list(tables)
        self.column_allow_list = _as_allow_list(columns)
        self._query: Optional[MySQLQueryBuilder] = None

    def set_allow_list(self, tables: AllowListLike, columns: AllowListLike) -> None:
        """Replace both allow lists."""
        self.table_allow_list = _as_allow_list(tables)
        self.column_allow_list = _as_allow_list(columns)

    # ==================== Validation ====================

    def is_table_valid(self, table: str) -> bool:
        if not self.table_allow_list.allows(table):
            self.logger.warning("access_denied", kind="table", identifier=table)
            raise AccessDeniedError(table, kind="table")
        return True

    def is_column_valid(self, column: str) -> bool:
        if not self.column_allow_list.allows(column):
            self.logger.warning("access_denied", kind="column", identifier=column)
            raise AccessDeniedError(column, kind="column")
        return True

    def _validate(self, table: str, *column_lists: List[str]) -> None:
        self.is_table_valid(table)
        for columns in column_lists:
            for column in columns:
                self.is_column_valid(column)

    @staticmethod
    def _require_terms(search_terms: List[str]) -> None:
        if not search_terms:
            raise ValidationError(
                "Failed to perform database query - no search parameters provided"
            )

    def _new_query(self) -> MySQLQueryBuilder:
        self._query = MySQLQueryBuilder(self.connection, logger=self.logger)
        return self._query

    # ==================== Query shapes ====================

    def search_like_query(
        self, table: str, columns: List[str], search_terms: List[str]
    ) -> MySQLQueryBuilder:
        """
        Build a LIKE search: every column must contain every term.

        Args:
            table: Table to search
            columns: Columns to select and search
            search_terms: Terms, each wrapped as ``%term%``

        Returns:
            Configured, unexecuted builder
        """
        self._validate(table, columns)
        self._require_terms(search_terms)

        query = self._new_query().select(columns).from_(table)
        for column in columns:
            for term in search_terms:
                query.where(column, "LIKE", f"%{term}%", LogicGate.AND)
        return query

    def match_against(
        self,
        table: str,
        select: List[str],
        columns: List[str],
        search_terms: List[str],
        include_relevance: bool = True,
    ) -> MySQLQueryBuilder:
        """
        Build a boolean-mode full-text search: any term may match.

        Args:
            table: Table to search
            select: Columns to return
            columns: Columns covered by the FULLTEXT index
            search_terms: Terms, one MATCH predicate each, joined with OR
            include_relevance: Whether to select and order by relevance

        Returns:
            Configured, unexecuted builder
        """
        self._validate(table, select, columns)
        self._require_terms(search_terms)

        query = self._new_query().select(select).from_(table)
        for term in search_terms:
            query.match(columns, term, SearchModifier.BOOLEAN, LogicGate.OR, include_relevance)
        return query

    def match_count(
        self, table: str, columns: List[str], search_terms: List[str]
    ) -> MySQLQueryBuilder:
        """Build a ``COUNT(*)`` over the rows ``match_against`` would find."""
        self._validate(table, columns)
        self._require_terms(search_terms)

        query = self._new_query().select([COUNT_SELECT]).from_(table)
        for term in search_terms:
            query.match(
                columns, term, SearchModifier.BOOLEAN, LogicGate.OR, include_relevance=False
            )
        return query

    # ==================== Execution ====================

    def execute(self) -> List[Dict[str, Any]]:
        """
        Execute the most recently built query.

        Returns:
            All rows as dictionaries

        Raises:
            DatabaseError: If no query was built or execution fails
        """
        if self._query is None:
            raise DatabaseError("Failed to perform database query - no query set")

        try:
            cursor = self._query.execute()
            rows = cursor.fetchall()
        except Exception as e:
            raise DatabaseError(
                f"Failed to perform database query: {e}", query=self._query.get_last_query()
            ) from e

        return [dict(row) for row in rows]

    def _pending(self) -> MySQLQueryBuilder:
        if self._query is None:
            raise StateError("No query set")
        return self._query

    def get_last_query(self) -> str:
        return self._pending().get_last_query()

    def get_row_count(self) -> int:
        return self._pending().get_row_count()

    def get_performance(self) -> Dict[str, Any]:
        return self._pending().get_performance()

    def close(self) -> None:
        """Close the cursor of the pending query."""
        if self._query is not None:
            self._query.close()
