"""Diagnostic logging configuration using structlog."""

from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger_factory(*_args: object) -> structlog.PrintLogger:
    # Looked up per logger so a redirected stderr is used.
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog for process diagnostics.

    Diagnostics go to stderr so they never mix with the file logger's
    stdout mirror.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        json_output: Render events as JSON instead of console lines
    """
    renderer: structlog.typing.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a bound structlog logger."""
    return structlog.get_logger(name)


# Until setup_logging runs, keep structlog defaults but send them to stderr.
if not structlog.is_configured():
    structlog.configure(logger_factory=_stderr_logger_factory)
