"""
MySQL implementation of the SQL base class.

Opens a single mysql.connector connection (utf8mb4, errors raised as
exceptions) and hands out server-side prepared cursors that bind ``?``
placeholders positionally and return rows as dictionaries.
"""

from dataclasses import dataclass
from typing import Any

import mysql.connector

from ..config import DatabaseSettings
from ..exceptions import DatabaseError
from .sql import SQL


@dataclass
class MySQL(SQL):
    """
    Direct MySQL connection without pooling.

    :param dbname: Database name.
    :param user: Database username.
    :param password: Database password.
    :param host: Database host.
    :param port: Database port (default: 3306).
    :param charset: Connection character set (default: utf8mb4).
    :param connection_timeout: Seconds to wait when connecting (default: 10).
    """

    db_type = "mysql"

    port: int = 3306
    charset: str = "utf8mb4"
    connection_timeout: int = 10

    @classmethod
    def from_settings(cls, settings: DatabaseSettings, **kwargs: Any) -> "MySQL":
        """Build a connection provider from DatabaseSettings."""
        return cls(
            dbname=settings.database,
            user=settings.user,
            password=settings.password.get_secret_value(),
            host=settings.host,
            port=settings.port,
            charset=settings.charset,
            connection_timeout=settings.connection_timeout,
            **kwargs,
        )

    def connect(self) -> None:
        """
        Establish a connection to the MySQL database.

        :raises DatabaseError: If connecting fails.
        """
        if self.connection:
            return

        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                database=self.dbname,
                user=self.user,
                password=self.password,
                charset=self.charset,
                connection_timeout=self.connection_timeout,
                autocommit=True,
            )
            self.logger.info("connected", host=self.host, dbname=self.dbname)
        except mysql.connector.Error as e:
            self.logger.error("connect_failed", host=self.host, dbname=self.dbname, error=str(e))
            raise DatabaseError(f"DB Connect error: {e}") from e

    def cursor(self) -> Any:
        """Return a prepared cursor that yields dictionary rows."""
        if not self.connection:
            self.connect()
        return self.connection.cursor(prepared=True, dictionary=True)

    def status_cursor(self) -> Any:
        """Return an unprepared dictionary cursor for ``SHOW STATUS`` probes."""
        if not self.connection:
            self.connect()
        return self.connection.cursor(dictionary=True)
