"""Exceptions raised while measuring one (scenario, adapter) pair."""

from __future__ import annotations

__all__ = [
    "LogBenchError",
    "AdapterSetupError",
    "CapabilityMismatchError",
    "MeasurementAnomalyError",
]


class LogBenchError(Exception):
    """Base exception for the benchmark harness.

    Attributes:
        scenario: Scenario name of the failing pair.
        adapter: Adapter name of the failing pair.
        reason: Human-readable cause, shown in reports.
    """

    def __init__(self, scenario: str, adapter: str, reason: str) -> None:
        self.scenario = scenario
        self.adapter = adapter
        self.reason = reason
        super().__init__(f"{scenario} x {adapter}: {reason}")


class AdapterSetupError(LogBenchError):
    """Raised when an adapter cannot be built or fails while emitting."""

    pass


class CapabilityMismatchError(LogBenchError):
    """Raised when an adapter lacks a facility the scenario requires."""

    pass


class MeasurementAnomalyError(LogBenchError):
    """Raised when a run produced no usable numbers."""

    pass
