"""Protocol definitions for the logging benchmark harness.

This module contains Protocol classes defining interfaces for:
- Sinks: writable destinations a logger emits into
- LoggerAdapters: one logging library behind the uniform scenario contract
- AdapterFactories: construction of an adapter on a sink at a minimum level

Scenarios depend only on these interfaces, never on a concrete library type.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from core.types import Capability, Level

__all__ = [
    "Sink",
    "LoggerAdapter",
    "AdapterFactory",
]


@runtime_checkable
class Sink(Protocol):
    """Protocol for output destinations.

    Libraries write either text or bytes; a sink must accept both.
    """

    def write(self, data: str | bytes) -> int:
        """Accept one chunk of output.

        Args:
            data: Rendered record text or bytes.

        Returns:
            Number of characters or bytes accepted.
        """
        ...

    def flush(self) -> None:
        """Flush buffered output, if any."""
        ...


@runtime_checkable
class LoggerAdapter(Protocol):
    """Protocol for a logging library under test.

    An adapter wraps one library's logger and exposes:
    - Binding fields once for reuse across calls
    - Emitting one record with optional per-call fields
    - Releasing library resources when a scenario ends

    Attributes:
        name: Registry name of the library, e.g. "hynek/structlog".
        capabilities: Optional facilities the adapter offers.
    """

    name: str
    capabilities: frozenset[Capability]

    def with_context_fields(self, fields: Mapping[str, Any]) -> LoggerAdapter:
        """Return a derived adapter with the fields bound once.

        The original adapter must not be modified, so both remain safe to
        share across worker threads.

        Args:
            fields: Fields to include in every subsequent record.

        Returns:
            A new adapter writing to the same sink.
        """
        ...

    def log(
        self,
        level: Level,
        message: str,
        fields: Mapping[str, Any] | None = None,
    ) -> None:
        """Emit one record.

        Args:
            level: Record level.
            message: Record message.
            fields: Fields attached to this record only.
        """
        ...

    def close(self) -> None:
        """Release handlers or other resources owned by the adapter."""
        ...


class AdapterFactory(Protocol):
    """Protocol for adapter constructors registered with the harness."""

    def __call__(self, sink: Sink, min_level: Level) -> LoggerAdapter:
        """Build a logger writing to sink that emits records at min_level and above.

        Suppression below min_level must be configured in the library itself,
        so its own level guard skips serialization.
        """
        ...
