"""
Logging configuration for ff-search.

Structured logging through structlog, configured from arguments or FF_LOG_*
environment variables. Loggers are scoped: each one carries a ``logger``
context key naming the component that emitted the event.
"""

import logging
import os
from typing import Any

import structlog
from structlog.typing import FilteringBoundLogger, Processor

_DEFAULT_CONFIG: dict[str, Any] = {
    "level": "INFO",
    "format": "console",
    "add_timestamp": True,
    "colors": True,
}

_GLOBAL_CONFIG: dict[str, Any] = dict(_DEFAULT_CONFIG)

_FORMATS = ("console", "json", "null", "none")


def configure_logging(
    level: str | None = None,
    format: str | None = None,
    add_timestamp: bool | None = None,
    colors: bool | None = None,
    use_env: bool = True,
) -> None:
    """
    Configure global logging settings.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (console, json, null)
        add_timestamp: Whether to include ISO timestamps
        colors: Whether to use colors in console output
        use_env: Whether to read FF_LOG_* environment variables first
    """
    if use_env:
        _GLOBAL_CONFIG.update(_load_env_config())

    # Explicit arguments win over the environment
    if level is not None:
        _GLOBAL_CONFIG["level"] = level.upper()
    if format is not None:
        _GLOBAL_CONFIG["format"] = format.lower()
    if add_timestamp is not None:
        _GLOBAL_CONFIG["add_timestamp"] = add_timestamp
    if colors is not None:
        _GLOBAL_CONFIG["colors"] = colors

    if _GLOBAL_CONFIG["format"] not in _FORMATS:
        raise ValueError(f"Unknown log format: {_GLOBAL_CONFIG['format']}")

    _configure_structlog()


def _load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config = {}

    if level := os.getenv("FF_LOG_LEVEL"):
        config["level"] = level.upper()

    if format := os.getenv("FF_LOG_FORMAT"):
        config["format"] = format.lower()

    if add_timestamp := os.getenv("FF_LOG_ADD_TIMESTAMP"):
        config["add_timestamp"] = add_timestamp.lower() in ("true", "1", "yes")

    if colors := os.getenv("FF_LOG_COLORS"):
        config["colors"] = colors.lower() in ("true", "1", "yes")

    return config


def _drop_event(logger: Any, method_name: str, event_dict: dict) -> dict:
    raise structlog.DropEvent


def _build_processors() -> list[Processor]:
    format = _GLOBAL_CONFIG.get("format", "console")
    if format in ("null", "none"):
        return [_drop_event]

    processors: list[Processor] = [structlog.stdlib.add_log_level]

    if _GLOBAL_CONFIG.get("add_timestamp", True):
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=_GLOBAL_CONFIG.get("colors", True)))

    return processors


def _configure_structlog() -> None:
    """Configure structlog based on global settings."""
    level = getattr(logging, _GLOBAL_CONFIG.get("level", "INFO"), logging.INFO)

    structlog.configure(
        processors=_build_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str, **context: Any) -> FilteringBoundLogger:
    """
    Get a scoped logger.

    Args:
        name: Logger name/scope, usually the module's ``__name__``
        **context: Extra key-value pairs bound to every event

    Example:
        logger = get_logger(__name__, table="tracks")
        logger.info("search_completed", columns=2)
    """
    return structlog.get_logger(name).bind(logger=name, **context)


def get_config() -> dict[str, Any]:
    """Get current global configuration."""
    return _GLOBAL_CONFIG.copy()


def reset_config() -> None:
    """Reset configuration to defaults."""
    _GLOBAL_CONFIG.clear()
    _GLOBAL_CONFIG.update(_DEFAULT_CONFIG)
    _configure_structlog()
