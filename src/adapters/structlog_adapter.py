"""Adapter for structlog.

Uses the fastest documented structlog setup: a filtering bound logger, whose
disabled methods return before any processor runs, feeding an orjson
renderer into a BytesLogger.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import orjson
import structlog

from core.protocols import Sink
from core.types import Capability, Level

__all__ = ["StructlogAdapter", "build_structlog_adapter"]


class StructlogAdapter:
    """LoggerAdapter over a structlog filtering bound logger.

    Bound loggers are immutable, so ``bind`` already returns the derived
    logger the contract asks for.
    """

    name = "hynek/structlog"
    capabilities = frozenset({Capability.CONTEXT_FIELDS, Capability.PER_CALL_FIELDS})

    def __init__(self, logger: Any) -> None:
        self._logger = logger

    def with_context_fields(self, fields: Mapping[str, Any]) -> StructlogAdapter:
        return StructlogAdapter(self._logger.bind(**fields))

    def log(self, level: Level, message: str, fields: Mapping[str, Any] | None = None) -> None:
        if fields is None:
            self._logger.log(level, message)
        else:
            self._logger.log(level, message, **fields)

    def close(self) -> None:
        pass


def build_structlog_adapter(sink: Sink, min_level: Level) -> StructlogAdapter:
    """Build a structlog logger rendering JSON bytes into sink."""
    proxy = structlog.wrap_logger(
        structlog.BytesLogger(sink),  # type: ignore[arg-type]
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(serializer=orjson.dumps),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(int(min_level)),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
    # Resolve the lazy proxy now so workers share a concrete logger
    return StructlogAdapter(proxy.bind())
