"""Adapter for loguru.

loguru keeps a single process-wide logger. Building an adapter removes every
handler from it and installs one serializing handler on the sink, so loguru's
minimum-level guard reflects only the adapter's level. Only one loguru adapter
can therefore be live at a time; the harness builds adapters one by one.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger as _loguru_logger

from core.protocols import Sink
from core.types import Capability, Level

__all__ = ["LoguruAdapter", "build_loguru_adapter"]


class LoguruAdapter:
    """LoggerAdapter over the loguru logger.

    Per-call fields are passed as keyword arguments, which loguru captures
    into the record's ``extra``. Since loguru also formats the message with
    them, messages must not contain braces.
    """

    name = "Delgan/loguru"
    capabilities = frozenset({Capability.CONTEXT_FIELDS, Capability.PER_CALL_FIELDS})

    def __init__(self, logger: Any, handler_id: int | None) -> None:
        self._logger = logger
        self._handler_id = handler_id

    def with_context_fields(self, fields: Mapping[str, Any]) -> LoguruAdapter:
        # The derived adapter shares the handler but does not own it
        return LoguruAdapter(self._logger.bind(**fields), None)

    def log(self, level: Level, message: str, fields: Mapping[str, Any] | None = None) -> None:
        if fields is None:
            self._logger.log(level.name, message)
        else:
            self._logger.log(level.name, message, **fields)

    def close(self) -> None:
        if self._handler_id is not None:
            _loguru_logger.remove(self._handler_id)
            self._handler_id = None


def build_loguru_adapter(sink: Sink, min_level: Level) -> LoguruAdapter:
    """Install a JSON handler on sink and return an adapter over it."""
    _loguru_logger.remove()
    handler_id = _loguru_logger.add(
        sink,
        level=min_level.name,
        format="{message}",
        serialize=True,
        colorize=False,
        enqueue=False,
        catch=False,
        backtrace=False,
        diagnose=False,
    )
    return LoguruAdapter(_loguru_logger, handler_id)
