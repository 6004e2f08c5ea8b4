"""
Shared fixtures for ff-search tests.

FakeConnection stands in for the MySQL connection provider: it records every
executed statement and answers by statement shape, so tests run without a
database server.
"""

import re

import pytest

from ff_search.log import configure_logging

_MATCH_COLUMNS = re.compile(r"MATCH \(([^)]*)\)")


class FakeCursor:
    """DB-API cursor returning scripted dictionary rows."""

    def __init__(self, connection, prepared=True):
        self.connection = connection
        self.prepared = prepared
        self.rowcount = -1
        self.closed = False
        self._rows = []

    def execute(self, query, params=()):
        self.connection.executed.append((query, tuple(params)))
        for fragment, error in self.connection.failures.items():
            if fragment in query:
                raise error
        self._rows = list(self.connection.respond(query))
        self.rowcount = len(self._rows)

    def fetchall(self):
        return list(self._rows)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        self.closed = True


class FakeConnection:
    """
    Connection provider double.

    Args:
        rows: Column name -> rows returned by searches on that column
        counts: Column name -> value returned by COUNT(*) queries on that column
        cost: Value reported by the performance probe
    """

    def __init__(self, rows=None, counts=None, cost="12.5"):
        self.rows = rows or {}
        self.counts = counts or {}
        self.cost = cost
        self.failures = {}
        self.executed = []
        self.cursors = []
        self.connected = False

    def fail_on(self, fragment, error):
        """Raise ``error`` whenever a statement containing ``fragment`` executes."""
        self.failures[fragment] = error

    def cursor(self):
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def status_cursor(self):
        cursor = FakeCursor(self, prepared=False)
        self.cursors.append(cursor)
        return cursor

    def respond(self, query):
        if query.startswith("SHOW STATUS"):
            return [{"Variable_name": "Last_Query_Cost", "Value": self.cost}]

        match = _MATCH_COLUMNS.search(query)
        column = match.group(1) if match else None

        if "COUNT(*)" in query:
            return [{"count": self.counts.get(column, 0)}]
        return self.rows.get(column, [])

    @property
    def queries(self):
        return [query for query, _ in self.executed]

    def __enter__(self):
        self.connected = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.connected = False


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Drop log output during tests."""
    configure_logging(format="null", use_env=False)


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def tracks_connection():
    """Connection with search results for the ``tracks`` table."""
    return FakeConnection(
        rows={
            "track": [
                {"id": 1, "track": "So What", "artist": "Miles Davis", "relevance0": 0.5},
            ],
            "artist": [
                {"id": 1, "track": "So What", "artist": "Miles Davis", "relevance0": 2.1},
                {"id": 2, "track": "Freddie Freeloader", "artist": "Miles Davis"},
            ],
        },
        counts={"track": 1, "artist": 42},
    )


@pytest.fixture
def make_connection():
    """Factory for connections with custom rows and counts."""
    return FakeConnection
