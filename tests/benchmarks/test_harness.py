"""Tests for the parallel measurement harness.

This module tests:
- Every call of a scenario receives the same level, message and field mapping
- Context fields are bound once and reused by reference
- Capability and setup failures surface as typed errors
- The thread pool runs exactly the operation budget
- Allocation sampling separates disabled from enabled emission
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

import pytest

from adapters.recording import RecordingAdapter, RecordingFactory
from adapters.structlog_adapter import build_structlog_adapter
from benchmarks import registry
from benchmarks.harness import build_adapter, measure, resolve_fields, run_parallel, sample_allocations
from core.errors import AdapterSetupError, CapabilityMismatchError
from core.types import BenchConfig, Capability, Level
from workloads.fixtures import TEN_FIELD_KEYS, build_fixture_set, fixture_fingerprint
from workloads.scenarios import (
    NO_FIELDS_DISABLED,
    NO_FIELDS_NO_MESSAGE_DISABLED,
    TEN_FIELDS,
    TEN_FIELDS_CONTEXT,
    TEN_FIELDS_DISABLED,
    WITHOUT_FIELDS,
)

CONFIG = BenchConfig(ops=200, parallelism=4, warmup_ops=10, alloc_samples=20)
TOTAL_CALLS = CONFIG.warmup_ops + CONFIG.ops + CONFIG.alloc_samples


class FailingAdapter(RecordingAdapter):
    """Adapter whose emission always fails."""

    def log(self, level: Level, message: str, fields: Mapping[str, Any] | None = None) -> None:
        raise RuntimeError("disk full")


# =============================================================================
# Call contract
# =============================================================================


class TestCallContract:
    """Tests for what adapters receive from the harness."""

    def test_per_call_fields_identical_on_every_call(self) -> None:
        fixtures = build_fixture_set()
        fields = resolve_fields(TEN_FIELDS, fixtures)
        factory = RecordingFactory()

        measurement = measure(TEN_FIELDS, "recording", factory, fields, CONFIG)

        calls = factory.calls
        assert measurement.ops == CONFIG.ops
        assert measurement.parallelism == CONFIG.parallelism
        assert len(calls) == TOTAL_CALLS
        assert all(c.fields is fields for c in calls)
        assert all(c.keys() == frozenset(TEN_FIELD_KEYS) for c in calls)
        assert all(c.level == Level.INFO and c.message == "hello world" for c in calls)

    def test_context_bound_once(self) -> None:
        fields = resolve_fields(TEN_FIELDS_CONTEXT, build_fixture_set())
        factory = RecordingFactory()

        measure(TEN_FIELDS_CONTEXT, "recording", factory, fields, CONFIG)

        assert len(factory.binds) == 1
        assert factory.binds[0] is fields
        assert all(c.context is fields and c.fields is None for c in factory.calls)
        assert len(factory.calls) == TOTAL_CALLS

    def test_without_fields(self) -> None:
        factory = RecordingFactory()

        measure(WITHOUT_FIELDS, "recording", factory, None, CONFIG)

        assert factory.binds == []
        assert all(c.keys() == frozenset() for c in factory.calls)

    def test_adapter_built_at_scenario_min_level(self) -> None:
        factory = RecordingFactory()

        measure(NO_FIELDS_DISABLED, "recording", factory, None, CONFIG)

        assert factory.min_levels == [Level.ERROR]
        assert factory.calls == []
        assert factory.adapters[0].closed

    def test_fixtures_untouched_across_runs(self) -> None:
        fixtures = build_fixture_set()
        before = fixture_fingerprint(fixtures)

        for _ in range(2):
            fields = resolve_fields(TEN_FIELDS, fixtures)
            measure(TEN_FIELDS, "recording", RecordingFactory(), fields, CONFIG)

        assert fixture_fingerprint(fixtures) == before


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    """Tests for typed failures of a pair."""

    def test_missing_context_capability(self) -> None:
        factory = RecordingFactory(capabilities=frozenset({Capability.PER_CALL_FIELDS}))
        fields = resolve_fields(TEN_FIELDS_CONTEXT, build_fixture_set())

        with pytest.raises(CapabilityMismatchError) as info:
            measure(TEN_FIELDS_CONTEXT, "recording", factory, fields, CONFIG)

        assert "context_fields" in info.value.reason
        assert factory.adapters[0].closed
        assert factory.calls == []

    def test_construction_failure(self) -> None:
        def _factory(sink, min_level):
            raise OSError("no sink")

        with pytest.raises(AdapterSetupError) as info:
            build_adapter(WITHOUT_FIELDS, "broken", _factory, None)

        assert "construction failed" in info.value.reason
        assert info.value.adapter == "broken"

    def test_emission_failure_closes_adapter(self) -> None:
        built: list[FailingAdapter] = []

        def _factory(sink, min_level):
            adapter = FailingAdapter(min_level)
            built.append(adapter)
            return adapter

        with pytest.raises(AdapterSetupError) as info:
            measure(WITHOUT_FIELDS, "failing", _factory, None, CONFIG)

        assert "emission failed" in info.value.reason
        assert built[0].closed


# =============================================================================
# Thread pool
# =============================================================================


class TestRunParallel:
    """Tests for run_parallel."""

    def test_runs_exact_budget(self) -> None:
        counter = {"n": 0}
        lock = threading.Lock()
        threads: set[str] = set()

        def _call(level, message, fields) -> None:
            with lock:
                counter["n"] += 1
                threads.add(threading.current_thread().name)

        elapsed, shares, worker_elapsed = run_parallel(
            _call, Level.INFO, "m", None, ops=1001, parallelism=4, barrier_timeout=10.0
        )

        assert counter["n"] == 1001
        assert sum(shares) == 1001
        assert len(worker_elapsed) == 4
        assert elapsed > 0
        assert all(name.startswith("logbench") for name in threads)

    def test_propagates_call_errors(self) -> None:
        def _call(level, message, fields) -> None:
            raise ValueError("bad")

        with pytest.raises(ValueError):
            run_parallel(_call, Level.INFO, "m", None, ops=10, parallelism=2, barrier_timeout=10.0)


# =============================================================================
# Allocation sampling
# =============================================================================


class TestSampleAllocations:
    """Tests for sample_allocations."""

    def test_zero_samples(self) -> None:
        assert sample_allocations(lambda *a: None, Level.INFO, "m", None, samples=0) == []

    def test_detects_transient_allocation(self) -> None:
        def _call(level, message, fields) -> None:
            bytearray(10_000)

        peaks = sample_allocations(_call, Level.INFO, "m", None, samples=10)

        assert len(peaks) == 10
        assert min(peaks) >= 9_000

    def test_never_negative(self) -> None:
        peaks = sample_allocations(lambda *a: None, Level.INFO, "m", None, samples=10)
        assert all(p >= 0 for p in peaks)

    def test_structlog_disabled_allocates_less(self) -> None:
        """The disabled path should allocate less than the enabled path."""
        fields = resolve_fields(TEN_FIELDS, build_fixture_set())

        enabled = measure(TEN_FIELDS, "hynek/structlog", build_structlog_adapter, fields, CONFIG)
        disabled = measure(
            TEN_FIELDS_DISABLED, "hynek/structlog", build_structlog_adapter, fields, CONFIG
        )

        assert disabled.alloc_bytes_per_op < enabled.alloc_bytes_per_op


# =============================================================================
# Disabled level against the real libraries
# =============================================================================

# Peak bytes a suppressed call may still show: the call frame and, at most,
# the keyword dictionary built before the library's level guard runs
DISABLED_NO_FIELDS_BOUND = 128.0

REAL_LIBRARIES = ["stdlib/logging", "hynek/structlog", "Delgan/loguru"]


@pytest.mark.parametrize("adapter_name", REAL_LIBRARIES)
class TestDisabledLevelAllocations:
    """Suppressed calls should allocate nothing or close to nothing."""

    def _measure(self, scenario, adapter_name: str, fixtures):
        factory = registry.get_adapter_factory(adapter_name)
        return measure(scenario, adapter_name, factory, resolve_fields(scenario, fixtures), CONFIG)

    @pytest.mark.parametrize("disabled", [NO_FIELDS_DISABLED, NO_FIELDS_NO_MESSAGE_DISABLED])
    def test_no_fields_disabled_near_zero(self, adapter_name: str, disabled) -> None:
        fixtures = build_fixture_set()

        off = self._measure(disabled, adapter_name, fixtures)
        on = self._measure(WITHOUT_FIELDS, adapter_name, fixtures)

        assert off.alloc_bytes_per_op <= DISABLED_NO_FIELDS_BOUND
        assert off.alloc_bytes_per_op < on.alloc_bytes_per_op

    def test_ten_fields_disabled_below_enabled(self, adapter_name: str) -> None:
        fixtures = build_fixture_set()

        off = self._measure(TEN_FIELDS_DISABLED, adapter_name, fixtures)
        on = self._measure(TEN_FIELDS, adapter_name, fixtures)

        assert off.alloc_bytes_per_op < on.alloc_bytes_per_op
