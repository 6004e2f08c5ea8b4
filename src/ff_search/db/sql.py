"""
Base class for database connection providers.

A provider owns one connection and hands out cursors. The query builder only
ever calls ``cursor()`` and ``status_cursor()``, so any object with those
methods can stand in for it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from ..log import get_logger


@dataclass
class SQL(ABC):
    """
    Abstract connection provider.

    :param dbname: Database name.
    :param user: Database username.
    :param password: Database password.
    :param host: Database host.
    :param port: Database port.
    """

    dbname: str
    user: str
    password: str
    host: str
    port: int
    connection: Optional[Any] = field(default=None, repr=False)
    logger: Any = field(default=None, repr=False)

    db_type = "sql"

    def __post_init__(self):
        if self.logger is None:
            self.logger = get_logger(__name__, db_type=self.db_type)

    @abstractmethod
    def connect(self) -> None:
        """Open the connection if it is not open yet."""

    @abstractmethod
    def cursor(self) -> Any:
        """Return a cursor accepting ``?`` placeholders and yielding mapping rows."""

    def status_cursor(self) -> Any:
        """Return a cursor for unparameterized diagnostic statements."""
        return self.cursor()

    def close_connection(self) -> None:
        """Close the connection if one is open."""
        if self.connection:
            self.connection.close()
            self.connection = None
            self.logger.debug("connection_closed", dbname=self.dbname)

    def __enter__(self) -> "SQL":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_connection()
