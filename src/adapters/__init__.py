"""Adapters module for the logging benchmark harness.

This package contains one LoggerAdapter implementation per library under test.

Available adapters:
- StdlibLoggingAdapter: standard library ``logging`` with a JSON formatter
- StructlogAdapter: structlog filtering bound logger with orjson rendering
- LoguruAdapter: loguru with a serializing handler
- RecordingAdapter: captures calls, for verifying the harness itself
"""

from __future__ import annotations

from adapters.loguru_adapter import LoguruAdapter, build_loguru_adapter
from adapters.recording import ALL_CAPABILITIES, RecordedCall, RecordingAdapter, RecordingFactory
from adapters.stdlib_adapter import JsonFormatter, StdlibLoggingAdapter, build_stdlib_adapter
from adapters.structlog_adapter import StructlogAdapter, build_structlog_adapter

__all__ = [
    # Standard library
    "JsonFormatter",
    "StdlibLoggingAdapter",
    "build_stdlib_adapter",
    # structlog
    "StructlogAdapter",
    "build_structlog_adapter",
    # loguru
    "LoguruAdapter",
    "build_loguru_adapter",
    # Recording
    "ALL_CAPABILITIES",
    "RecordedCall",
    "RecordingAdapter",
    "RecordingFactory",
]
