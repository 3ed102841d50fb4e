"""Structured logging configuration.

Configures structlog once for the process from LOG_LEVEL and LOG_JSON
(ISO timestamps, level, JSON or console rendering) and hands out module
loggers bound to their module name. Output goes to stderr so
the stdio MCP transport on stdout stays clean.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from config import LOG_JSON, LOG_LEVEL

_configured = False


def _stderr_logger_factory(*_args: Any) -> Any:
    # stdout belongs to the stdio MCP transport
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(*, level: str = LOG_LEVEL, json_output: bool = LOG_JSON) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name, e.g. "DEBUG" or "INFO".
        json_output: Render JSON lines when True, console lines otherwise.
    """
    global _configured

    numeric_level = logging.getLevelName((level or "INFO").strip().upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog bound logger carrying the module name.
    """
    if not _configured:
        configure_logging()
    return structlog.get_logger(name).bind(logger=name)
