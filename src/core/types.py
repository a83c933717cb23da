"""Core type definitions for the logging benchmark harness.

This module contains:
- Levels, attachment modes and adapter capabilities
- The immutable fixture records shared by every scenario
- Scenario, Measurement and Exclusion containers
- The harness configuration dataclass
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any

__all__ = [
    "Level",
    "Attach",
    "Capability",
    "ExclusionKind",
    "FixtureError",
    "SampleUser",
    "FixtureSet",
    "FieldSelector",
    "Scenario",
    "Measurement",
    "Exclusion",
    "ResultRow",
    "BenchConfig",
]


class Level(IntEnum):
    """Log levels understood by every adapter.

    Values match the standard library so adapters can pass them through.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Attach(str, Enum):
    """How a scenario attaches its fields to a record."""

    NONE = "none"
    CONTEXT = "context"
    PER_CALL = "per_call"


class Capability(str, Enum):
    """Optional facilities an adapter may or may not offer."""

    CONTEXT_FIELDS = "context_fields"
    PER_CALL_FIELDS = "per_call_fields"


class ExclusionKind(str, Enum):
    """Why a (scenario, adapter) pair has no measurement."""

    SETUP = "setup"
    CAPABILITY = "capability"
    ANOMALY = "anomaly"


class FixtureError(Exception):
    """Sentinel error value logged by the ten-field scenarios."""


@dataclass(frozen=True, slots=True)
class SampleUser:
    """User-like aggregate with three string attributes."""

    username: str = ""
    name: str = ""
    phone: str = ""


@dataclass(frozen=True, slots=True)
class FixtureSet:
    """Synthetic values shared, by reference, across every measurement.

    Attributes:
        int_value: A scalar integer.
        ints: Ten integers, 1 through 10.
        string_value: A scalar string.
        strings: Ten strings, "1" through "10".
        time_value: A timestamp.
        times: A sequence of timestamps.
        user: One populated user record.
        users: Ten user records.
        error: The sentinel error value.
    """

    int_value: int
    ints: tuple[int, ...]
    string_value: str
    strings: tuple[str, ...]
    time_value: datetime
    times: tuple[datetime, ...]
    user: SampleUser
    users: tuple[SampleUser, ...]
    error: FixtureError


# Picks the fields a scenario attaches out of the fixture set
FieldSelector = Callable[[FixtureSet], Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class Scenario:
    """A named benchmark configuration run identically against every adapter.

    Attributes:
        name: Unique scenario name.
        description: One-line human description for reports.
        message: Message payload of every record.
        level: Level every record is emitted at.
        min_level: Minimum enabled level the adapter is constructed with.
        attach: Whether fields are bound once (context) or passed per call.
        fields: Selector producing the attached fields, None for no fields.
        baseline: Name of a scenario this one is compared against in reports.
    """

    name: str
    description: str
    message: str
    level: Level
    min_level: Level = Level.DEBUG
    attach: Attach = Attach.NONE
    fields: FieldSelector | None = None
    baseline: str | None = None

    def __post_init__(self) -> None:
        if (self.attach is Attach.NONE) != (self.fields is None):
            raise ValueError(
                f"Scenario '{self.name}': fields must be given exactly when attach is not NONE"
            )

    @property
    def disabled(self) -> bool:
        """Whether emission happens below the adapter's enabled level."""
        return self.level < self.min_level

    def required_capability(self) -> Capability | None:
        if self.attach is Attach.CONTEXT:
            return Capability.CONTEXT_FIELDS
        if self.attach is Attach.PER_CALL:
            return Capability.PER_CALL_FIELDS
        return None


@dataclass(frozen=True, slots=True)
class Measurement:
    """Aggregated per-operation result for one (scenario, adapter) pair.

    Attributes:
        scenario: Scenario name.
        adapter: Adapter name.
        ops: Total logging operations executed in the timed phase.
        parallelism: Number of worker threads.
        elapsed_ns: Wall time of the timed phase.
        ns_per_op: Wall time divided by ops.
        ops_per_sec: Throughput over the timed phase.
        alloc_bytes_per_op: Mean peak transient bytes allocated per call.
        worker_ns_per_op_mean: Mean of the per-worker ns/op.
        worker_ns_per_op_std: Standard deviation of the per-worker ns/op.
    """

    scenario: str
    adapter: str
    ops: int
    parallelism: int
    elapsed_ns: int
    ns_per_op: float
    ops_per_sec: float
    alloc_bytes_per_op: float
    worker_ns_per_op_mean: float
    worker_ns_per_op_std: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario,
            "adapter": self.adapter,
            "status": "ok",
            "ops": self.ops,
            "parallelism": self.parallelism,
            "elapsed_ns": self.elapsed_ns,
            "ns_per_op": self.ns_per_op,
            "ops_per_sec": self.ops_per_sec,
            "alloc_bytes_per_op": self.alloc_bytes_per_op,
            "worker_ns_per_op_mean": self.worker_ns_per_op_mean,
            "worker_ns_per_op_std": self.worker_ns_per_op_std,
        }


@dataclass(frozen=True, slots=True)
class Exclusion:
    """A pair left out of the comparison, with the reason."""

    scenario: str
    adapter: str
    kind: ExclusionKind
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario,
            "adapter": self.adapter,
            "status": f"excluded:{self.kind.value}",
            "reason": self.reason,
        }


ResultRow = Measurement | Exclusion


def _default_parallelism() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True, slots=True)
class BenchConfig:
    """Configuration for a benchmark run.

    Attributes:
        ops: Logging operations per (scenario, adapter) timed phase.
        parallelism: Number of concurrent worker threads.
        warmup_ops: Calls made before counters are reset.
        alloc_samples: Calls sampled under tracemalloc for allocation cost.
        scenarios: Scenario names to run; empty means all registered.
        adapters: Adapter names to run; empty means all registered.
        barrier_timeout: Seconds workers wait for each other to start.
    """

    ops: int = 100_000
    parallelism: int = field(default_factory=_default_parallelism)
    warmup_ops: int = 1_000
    alloc_samples: int = 200
    scenarios: tuple[str, ...] = ()
    adapters: tuple[str, ...] = ()
    barrier_timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.ops <= 0:
            raise ValueError(f"ops must be positive, got {self.ops}")
        if self.parallelism <= 0:
            raise ValueError(f"parallelism must be positive, got {self.parallelism}")
        if self.warmup_ops < 0:
            raise ValueError(f"warmup_ops must be non-negative, got {self.warmup_ops}")
        if self.alloc_samples < 1:
            raise ValueError(f"alloc_samples must be positive, got {self.alloc_samples}")
        if self.barrier_timeout <= 0:
            raise ValueError(f"barrier_timeout must be positive, got {self.barrier_timeout}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "ops": self.ops,
            "parallelism": self.parallelism,
            "warmup_ops": self.warmup_ops,
            "alloc_samples": self.alloc_samples,
            "scenarios": list(self.scenarios),
            "adapters": list(self.adapters),
            "barrier_timeout": self.barrier_timeout,
        }
