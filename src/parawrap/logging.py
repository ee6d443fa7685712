"""Structlog setup for the parawrap command line."""

from __future__ import annotations

import logging as std_logging
import sys

import structlog

_LEVELS = (std_logging.WARNING, std_logging.INFO, std_logging.DEBUG)


def level_for(verbosity: int) -> int:
    return _LEVELS[max(0, min(verbosity, len(_LEVELS) - 1))]


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Send structlog events to stderr, filtered by ``verbosity``.

    stdout is reserved for lint lines, reports and formatted source.
    """
    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_mode
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_for(verbosity)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # reconfigured on every CLI invocation, so bound loggers must not be cached
        cache_logger_on_first_use=False,
    )
