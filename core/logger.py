"""
Logging setup shared by the service process and the CLI.

Module loggers come from `get_logger()` (stdlib). Components that log with
key/value fields use `structlog.get_logger()`; `setup_logging()` routes those
events through the same stdlib handler so both end up in one stream.
"""

import logging
import sys
from typing import Optional

import structlog

# Application packages, kept at the configured base level.
APP_LOGGERS = (
    "routers",
    "services",
    "infrastructure",
    "dependencies",
    "core",
    "cli",
)

# Request lines from the HTTP transport would drown the hook logs.
QUIET_LOGGERS = (
    "uvicorn.access",
    "fastapi",
    "httpx",
    "httpcore",
)


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """
    Configure the root logger and the structlog bridge.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string, overrides include_timestamp
        include_timestamp: Prefix records with the wall-clock time
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if format_string is None:
        format_string = "%(name)s - %(levelname)s - %(message)s"
        if include_timestamp:
            format_string = "%(asctime)s - " + format_string

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    configure_specific_loggers(numeric_level)
    configure_structlog()

    logging.getLogger(__name__).debug("Logging configured with level: %s", level)


def configure_structlog() -> None:
    """Send structlog events to stdlib loggers, rendered as `event key=value`."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_specific_loggers(base_level: int) -> None:
    """Pin application loggers to the base level and quiet noisy libraries."""
    for logger_name in APP_LOGGERS:
        logging.getLogger(logger_name).setLevel(base_level)

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(base_level, logging.WARNING))

    logging.getLogger("uvicorn.error").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_debug_mode(enabled: bool = True) -> None:
    """
    Toggle DEBUG on the application loggers without touching third parties.

    Args:
        enabled: DEBUG when True, back to INFO when False
    """
    level = logging.DEBUG if enabled else logging.INFO
    for logger_name in APP_LOGGERS:
        logging.getLogger(logger_name).setLevel(level)

    logging.getLogger(__name__).info("Debug mode %s", "enabled" if enabled else "disabled")
