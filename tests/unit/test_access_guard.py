"""
Unit tests for allow lists and the DataAccessGuard query shapes.
"""

import pytest
from structlog.testing import capture_logs

from ff_search.db import AllowList, DataAccessGuard
from ff_search.exceptions import AccessDeniedError, DatabaseError, StateError, ValidationError


class TestAllowList:
    """Test allow list construction and membership."""

    @pytest.mark.parametrize("names", [None, [], ["*"]])
    def test_unrestricted_forms(self, names):
        allow_list = AllowList.from_names(names)

        assert allow_list.is_unrestricted
        assert allow_list.allows("anything")

    def test_restricted_list(self):
        allow_list = AllowList.from_names(["tracks", "albums"])

        assert not allow_list.is_unrestricted
        assert allow_list.allows("tracks")
        assert not allow_list.allows("users")

    def test_wildcard_among_names_is_literal(self):
        """Test that ``*`` only means "any" when it is the whole list."""
        allow_list = AllowList.from_names(["*", "tracks"])

        assert allow_list.allows("*")
        assert not allow_list.allows("users")

    def test_restricted_to_empty_allows_nothing(self):
        assert not AllowList.restricted_to([]).allows("tracks")


class TestValidation:
    """Test identifier validation."""

    def test_table_denied(self, connection):
        guard = DataAccessGuard(connection, tables=["tracks"])

        with pytest.raises(AccessDeniedError, match="Table not allowed: users") as exc_info:
            guard.is_table_valid("users")

        assert exc_info.value.identifier == "users"
        assert exc_info.value.kind == "table"

    def test_column_denied(self, connection):
        guard = DataAccessGuard(connection, columns=["track"])

        assert guard.is_column_valid("track") is True
        with pytest.raises(AccessDeniedError, match="Column not allowed: password"):
            guard.is_column_valid("password")

    def test_denial_is_logged(self, connection):
        """Test that rejected identifiers emit a warning event."""
        with capture_logs() as logs:
            guard = DataAccessGuard(connection, tables=["tracks"])
            with pytest.raises(AccessDeniedError):
                guard.is_table_valid("users")

        assert logs[0]["event"] == "access_denied"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["identifier"] == "users"

    def test_set_allow_list_replaces_both(self, connection):
        guard = DataAccessGuard(connection, tables=["tracks"], columns=["track"])

        guard.set_allow_list(["albums"], AllowList.unrestricted())

        assert guard.is_table_valid("albums")
        assert guard.is_column_valid("anything")
        with pytest.raises(AccessDeniedError):
            guard.is_table_valid("tracks")

    def test_denied_identifier_never_reaches_driver(self, connection):
        guard = DataAccessGuard(connection, columns=["track"])

        with pytest.raises(AccessDeniedError, match="artist"):
            guard.match_against("tracks", ["track"], ["artist"], ["Miles"])

        assert connection.executed == []

    def test_select_columns_validated(self, connection):
        guard = DataAccessGuard(connection, columns=["track"])

        with pytest.raises(AccessDeniedError, match="Column not allowed: secret"):
            guard.match_against("tracks", ["secret"], ["track"], ["Miles"])


class TestQueryShapes:
    """Test the canned LIKE, MATCH and COUNT query shapes."""

    def test_search_like_query(self, connection):
        guard = DataAccessGuard(connection)

        query = guard.search_like_query("tracks", ["label"], ["Blue Note"])

        assert query.build_query() == (
            "SELECT label FROM tracks WHERE label LIKE ?",
            ["%Blue Note%"],
        )

    def test_search_like_query_every_column_and_term(self, connection):
        """Test that every column must contain every term."""
        guard = DataAccessGuard(connection)

        query = guard.search_like_query("tracks", ["track", "artist"], ["Miles", "Davis"])

        assert query.build_query() == (
            "SELECT track, artist FROM tracks "
            "WHERE track LIKE ? AND track LIKE ? AND artist LIKE ? AND artist LIKE ?",
            ["%Miles%", "%Davis%", "%Miles%", "%Davis%"],
        )

    @pytest.mark.parametrize("shape", ["search_like_query", "match_count"])
    def test_empty_terms_rejected(self, connection, shape):
        guard = DataAccessGuard(connection)

        with pytest.raises(ValidationError, match="no search parameters provided"):
            getattr(guard, shape)("tracks", ["track"], [])

    def test_match_against_empty_terms_rejected(self, connection):
        guard = DataAccessGuard(connection)

        with pytest.raises(ValidationError, match="no search parameters provided"):
            guard.match_against("tracks", ["track"], ["track"], [])

    def test_match_against_joins_terms_with_or(self, connection):
        guard = DataAccessGuard(connection)

        query, values = guard.match_against(
            "tracks", ["id", "track"], ["track"], ["Miles", "Davis"]
        ).build_query()

        assert query.startswith("SELECT id, track, MATCH (track) AGAINST (? IN BOOLEAN MODE)")
        assert (
            "WHERE MATCH (track) AGAINST (? IN BOOLEAN MODE) "
            "OR MATCH (track) AGAINST (? IN BOOLEAN MODE)"
        ) in query
        assert query.endswith("ORDER BY `relevance0`+`relevance1` DESC")
        assert values[-2:] == ["*Miles*", "*Davis*"]

    def test_match_against_without_relevance(self, connection):
        guard = DataAccessGuard(connection)

        query, _ = guard.match_against(
            "tracks", ["id"], ["track"], ["Miles"], include_relevance=False
        ).build_query()

        assert query == "SELECT id FROM tracks WHERE MATCH (track) AGAINST (? IN BOOLEAN MODE)"

    def test_match_count(self, connection):
        guard = DataAccessGuard(connection, columns=["track"])

        query, values = guard.match_count("tracks", ["track"], ["Miles", "Davis"]).build_query()

        assert query == (
            "SELECT COUNT(*) as count FROM tracks "
            "WHERE MATCH (track) AGAINST (? IN BOOLEAN MODE) "
            "OR MATCH (track) AGAINST (? IN BOOLEAN MODE)"
        )
        assert values == ["*Miles*", "*Davis*"]

    def test_each_shape_replaces_pending_query(self, connection):
        guard = DataAccessGuard(connection)

        first = guard.match_against("tracks", ["id"], ["track"], ["Miles"])
        second = guard.match_count("tracks", ["track"], ["Miles"])

        assert first is not second
        second.build_query()
        assert guard.get_last_query().startswith("SELECT COUNT(*) as count")


class TestExecute:
    """Test execution and post-execution accessors."""

    def test_execute_without_query(self, connection):
        guard = DataAccessGuard(connection)

        with pytest.raises(DatabaseError, match="no query set"):
            guard.execute()

    def test_execute_returns_dict_rows(self, tracks_connection):
        guard = DataAccessGuard(tracks_connection)
        guard.match_against("tracks", ["id", "artist"], ["artist"], ["Miles"])

        rows = guard.execute()

        assert len(rows) == 2
        assert all(isinstance(row, dict) for row in rows)
        assert rows[0]["artist"] == "Miles Davis"
        assert guard.get_row_count() == 2

    def test_execute_failure_wrapped(self, connection):
        error = RuntimeError("Can't find FULLTEXT index matching the column list")
        connection.fail_on("MATCH (track)", error)
        guard = DataAccessGuard(connection)
        guard.match_against("tracks", ["id"], ["track"], ["Miles"])

        with pytest.raises(DatabaseError, match="^Failed to perform database query:") as exc_info:
            guard.execute()

        assert "FULLTEXT" in str(exc_info.value)
        assert exc_info.value.query.startswith("SELECT id")

    def test_accessors_need_a_query(self, connection):
        guard = DataAccessGuard(connection)

        with pytest.raises(StateError):
            guard.get_last_query()
        with pytest.raises(StateError):
            guard.get_row_count()
        with pytest.raises(StateError):
            guard.get_performance()

    def test_get_performance_after_execute(self, tracks_connection):
        guard = DataAccessGuard(tracks_connection)
        guard.match_against("tracks", ["id"], ["track"], ["Miles"])
        guard.execute()

        assert guard.get_performance()["Variable_name"] == "Last_Query_Cost"

    def test_close_closes_query_cursor(self, tracks_connection):
        guard = DataAccessGuard(tracks_connection)
        guard.match_against("tracks", ["id"], ["track"], ["Miles"])
        guard.execute()

        guard.close()

        assert tracks_connection.cursors[0].closed is True
