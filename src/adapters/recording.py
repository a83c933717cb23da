"""Recording adapter that captures calls instead of logging them.

Used to verify what the harness hands to adapters: which level, message and
field mappings every call receives, and how often context fields are bound.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from core.protocols import Sink
from core.types import Capability, Level

__all__ = [
    "ALL_CAPABILITIES",
    "RecordedCall",
    "RecordingAdapter",
    "RecordingFactory",
]

ALL_CAPABILITIES = frozenset({Capability.CONTEXT_FIELDS, Capability.PER_CALL_FIELDS})


@dataclass(frozen=True, slots=True)
class RecordedCall:
    """One emitted record.

    Attributes:
        level: Record level.
        message: Record message.
        context: Context mapping the adapter was bound with, by reference.
        fields: Per-call fields, by reference.
    """

    level: Level
    message: str
    context: Mapping[str, Any] | None
    fields: Mapping[str, Any] | None

    def keys(self) -> frozenset[str]:
        """All field names visible in the record."""
        names: set[str] = set()
        if self.context:
            names.update(self.context)
        if self.fields:
            names.update(self.fields)
        return frozenset(names)


class RecordingAdapter:
    """LoggerAdapter that appends every enabled call to a shared list.

    Derived adapters share the ``calls`` and ``binds`` lists of their parent.
    List appends are atomic, so workers need no extra locking.
    """

    def __init__(
        self,
        min_level: Level = Level.DEBUG,
        *,
        name: str = "recording",
        capabilities: frozenset[Capability] = ALL_CAPABILITIES,
        context: Mapping[str, Any] | None = None,
        calls: list[RecordedCall] | None = None,
        binds: list[Mapping[str, Any]] | None = None,
    ) -> None:
        self.name = name
        self.capabilities = capabilities
        self.min_level = min_level
        self.context = context
        self.calls: list[RecordedCall] = calls if calls is not None else []
        self.binds: list[Mapping[str, Any]] = binds if binds is not None else []
        self.closed = False

    def with_context_fields(self, fields: Mapping[str, Any]) -> RecordingAdapter:
        if Capability.CONTEXT_FIELDS not in self.capabilities:
            raise NotImplementedError(f"{self.name} cannot bind context fields")
        self.binds.append(fields)
        return RecordingAdapter(
            self.min_level,
            name=self.name,
            capabilities=self.capabilities,
            context=fields,
            calls=self.calls,
            binds=self.binds,
        )

    def log(self, level: Level, message: str, fields: Mapping[str, Any] | None = None) -> None:
        if level < self.min_level:
            return
        self.calls.append(RecordedCall(level, message, self.context, fields))

    def close(self) -> None:
        self.closed = True


class RecordingFactory:
    """AdapterFactory that keeps every adapter it builds.

    Example:
        >>> from core.sinks import DiscardSink
        >>> factory = RecordingFactory()
        >>> adapter = factory(DiscardSink(), Level.INFO)
        >>> adapter.log(Level.INFO, "hi")
        >>> len(factory.calls)
        1
    """

    def __init__(
        self,
        name: str = "recording",
        capabilities: frozenset[Capability] = ALL_CAPABILITIES,
    ) -> None:
        self.name = name
        self.capabilities = capabilities
        self.adapters: list[RecordingAdapter] = []
        self.min_levels: list[Level] = []

    def __call__(self, sink: Sink, min_level: Level) -> RecordingAdapter:
        adapter = RecordingAdapter(min_level, name=self.name, capabilities=self.capabilities)
        self.adapters.append(adapter)
        self.min_levels.append(min_level)
        return adapter

    @property
    def calls(self) -> list[RecordedCall]:
        """Every call recorded by every adapter built so far."""
        return [call for adapter in self.adapters for call in adapter.calls]

    @property
    def binds(self) -> list[Mapping[str, Any]]:
        return [fields for adapter in self.adapters for fields in adapter.binds]
