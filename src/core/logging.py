"""Logging configuration for the benchmark harness.

The harness reports its own progress through structlog. This configuration
is process-global but does not touch the loggers under test: adapters build
their loggers with explicit processors and sinks.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

__all__ = ["configure_logging", "get_logger"]


def configure_logging(
    level: str | int = "INFO",
    *,
    json_logs: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for harness diagnostics.

    Args:
        level: Minimum level name or number.
        json_logs: Render JSON lines instead of the console format.
        stream: Destination, stderr by default.
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a lazy harness logger, tagged with the module name when given.

    The proxy resolves the structlog configuration on each call, so loggers
    created at import time follow a later ``configure_logging``. The name is
    stored under ``logger_name``; ``logger`` is a positional parameter of
    ``structlog.wrap_logger`` and cannot be passed as an initial value.
    """
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger_name=name)
