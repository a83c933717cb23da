"""Adapter for the standard library ``logging`` module.

Records are rendered as JSON lines by a small formatter and written through a
StreamHandler, so the measured cost includes the handler lock, LogRecord
construction and JSON encoding. Context fields are bound with
``logging.LoggerAdapter``; per-call fields travel in ``extra``.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from core.protocols import Sink
from core.types import Capability, Level

__all__ = ["JsonFormatter", "StdlibLoggingAdapter", "build_stdlib_adapter"]

# Attribute on the LogRecord carrying structured fields
FIELDS_ATTR = "fields"


def _encode(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, BaseException):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class JsonFormatter(logging.Formatter):
    """Render a LogRecord and its structured fields as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname.lower(),
            "time": self.formatTime(record),
            "msg": record.getMessage(),
        }
        fields = getattr(record, FIELDS_ATTR, None)
        if fields:
            payload.update(fields)
        return json.dumps(payload, default=_encode)


class StdlibLoggingAdapter:
    """LoggerAdapter over a ``logging.Logger`` with a single JSON handler.

    Attributes:
        name: Registry name.
        capabilities: Context and per-call fields are both supported.
    """

    name = "stdlib/logging"
    capabilities = frozenset({Capability.CONTEXT_FIELDS, Capability.PER_CALL_FIELDS})

    def __init__(
        self,
        logger: logging.Logger,
        handler: logging.Handler,
        *,
        context: Mapping[str, Any] | None = None,
        owns_handler: bool = True,
    ) -> None:
        self._logger = logger
        self._handler = handler
        self._context = context
        self._owns_handler = owns_handler
        self._bound: logging.LoggerAdapter[logging.Logger] | None = None
        if context is not None:
            self._bound = logging.LoggerAdapter(logger, {FIELDS_ATTR: context})

    def with_context_fields(self, fields: Mapping[str, Any]) -> StdlibLoggingAdapter:
        merged = dict(self._context) if self._context else {}
        merged.update(fields)
        return StdlibLoggingAdapter(
            self._logger,
            self._handler,
            context=MappingProxyType(merged),
            owns_handler=False,
        )

    def log(self, level: Level, message: str, fields: Mapping[str, Any] | None = None) -> None:
        if fields is None:
            if self._bound is not None:
                self._bound.log(level, message)
            else:
                self._logger.log(level, message)
            return
        if self._context is not None:
            fields = {**self._context, **fields}
        self._logger.log(level, message, extra={FIELDS_ATTR: fields})

    def close(self) -> None:
        if self._owns_handler:
            self._logger.removeHandler(self._handler)
            self._handler.close()


def build_stdlib_adapter(sink: Sink, min_level: Level) -> StdlibLoggingAdapter:
    """Build a stand-alone logger writing JSON lines to sink.

    The logger is created directly rather than through ``logging.getLogger``
    so each adapter is independent of the logging hierarchy and of any
    process-wide configuration.
    """
    logger = logging.Logger("logbench.stdlib", level=int(min_level))
    logger.propagate = False
    handler = logging.StreamHandler(sink)  # type: ignore[arg-type]
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return StdlibLoggingAdapter(logger, handler)
