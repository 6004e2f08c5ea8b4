"""
Connection settings for ff-search.

Settings come from explicit arguments or from the DB_* environment variables
that the hosting application already exports.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .exceptions import ConfigurationError

# Environment variable -> settings field
ENV_VARS = {
    "DB_HOST": "host",
    "DB_PORT": "port",
    "DB_NAME": "database",
    "DB_USER": "user",
    "DB_PASS": "password",
    "DB_CHARSET": "charset",
}

REQUIRED_ENV_VARS = ("DB_HOST", "DB_NAME", "DB_USER")


class DatabaseSettings(BaseModel):
    """MySQL connection settings."""

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(default=3306, gt=0, lt=65536)
    database: str
    user: str
    password: SecretStr = SecretStr("")
    charset: str = "utf8mb4"
    connection_timeout: int = Field(default=10, gt=0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatabaseSettings":
        """
        Build settings from DB_* environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            DatabaseSettings instance

        Raises:
            ConfigurationError: If a required variable is missing or a value is invalid
        """
        environ = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_ENV_VARS if not environ.get(name)]
        if missing:
            raise ConfigurationError("Missing database environment variables", missing=missing)

        values = {field: environ[name] for name, field in ENV_VARS.items() if environ.get(name)}
        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(f"Invalid database settings: {e}") from e
