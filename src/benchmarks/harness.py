"""Parallel measurement of one scenario against one logger adapter.

The measurement of a (scenario, adapter) pair runs in four phases:

1. Setup: build the adapter on a discarding sink at the scenario's minimum
   level, check it offers what the scenario needs and bind context fields.
2. Calibration: warm-up calls, then a garbage collection. Nothing before the
   timed phase is counted.
3. Timed phase: the operation budget is split across a pool of worker
   threads released together by a barrier. Each worker calls ``log`` for its
   share. No lock is taken around ``log``; contention inside the library is
   part of what is measured.
4. Allocation sampling: single-threaded calls under tracemalloc, recording
   the peak transient bytes of each call. Tracing is kept out of the timed
   phase because it slows every allocation down.
"""

from __future__ import annotations

import gc
import threading
import time
import tracemalloc
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

from benchmarks.metrics import aggregate, split_ops
from core.errors import AdapterSetupError, CapabilityMismatchError, MeasurementAnomalyError
from core.logging import get_logger
from core.protocols import AdapterFactory, LoggerAdapter
from core.sinks import DiscardSink
from core.types import Attach, BenchConfig, FixtureSet, Level, Measurement, Scenario

__all__ = [
    "resolve_fields",
    "build_adapter",
    "run_parallel",
    "sample_allocations",
    "measure",
]

log = get_logger(__name__)

LogCall = Callable[[Level, str, Mapping[str, Any] | None], None]


def resolve_fields(scenario: Scenario, fixtures: FixtureSet) -> Mapping[str, Any] | None:
    """Select the scenario's fields from the fixture set, None for no fields."""
    if scenario.fields is None:
        return None
    return scenario.fields(fixtures)


def build_adapter(
    scenario: Scenario,
    adapter_name: str,
    factory: AdapterFactory,
    fields: Mapping[str, Any] | None,
) -> tuple[LoggerAdapter, LoggerAdapter]:
    """Build the adapter a scenario is measured with.

    Args:
        scenario: Scenario being measured.
        adapter_name: Registry name of the adapter.
        factory: Adapter constructor.
        fields: Resolved scenario fields.

    Returns:
        Tuple of (owner, target): owner must be closed when the run ends,
        target is the adapter to call, with context fields bound when the
        scenario asks for them.

    Raises:
        AdapterSetupError: If construction or binding fails.
        CapabilityMismatchError: If the adapter lacks a required facility.
    """
    try:
        owner = factory(DiscardSink(), scenario.min_level)
    except Exception as exc:
        raise AdapterSetupError(
            scenario.name, adapter_name, f"construction failed: {exc!r}"
        ) from exc

    required = scenario.required_capability()
    if required is not None and required not in owner.capabilities:
        owner.close()
        raise CapabilityMismatchError(
            scenario.name, adapter_name, f"adapter does not support {required.value}"
        )

    if scenario.attach is not Attach.CONTEXT:
        return owner, owner

    assert fields is not None
    try:
        target = owner.with_context_fields(fields)
    except Exception as exc:
        owner.close()
        raise AdapterSetupError(
            scenario.name, adapter_name, f"binding context fields failed: {exc!r}"
        ) from exc
    return owner, target


def run_parallel(
    call: LogCall,
    level: Level,
    message: str,
    fields: Mapping[str, Any] | None,
    *,
    ops: int,
    parallelism: int,
    barrier_timeout: float,
) -> tuple[int, list[int], list[int]]:
    """Drive call from a pool of worker threads.

    Args:
        call: The adapter's bound ``log`` method.
        level: Level passed on every call.
        message: Message passed on every call.
        fields: Per-call fields passed on every call.
        ops: Total operation budget.
        parallelism: Number of worker threads.
        barrier_timeout: Seconds to wait for all workers to reach the start line.

    Returns:
        Tuple of (elapsed_ns, worker_ops, worker_elapsed_ns).

    Raises:
        threading.BrokenBarrierError: If the workers did not all start.
        Exception: The first exception raised by ``call`` in any worker.
    """
    shares = split_ops(ops, parallelism)
    started: list[int] = []

    def _release() -> None:
        started.append(time.perf_counter_ns())

    barrier = threading.Barrier(len(shares) + 1, action=_release, timeout=barrier_timeout)

    def _worker(share: int) -> int:
        barrier.wait()
        begin = time.perf_counter_ns()
        for _ in range(share):
            call(level, message, fields)
        return time.perf_counter_ns() - begin

    with ThreadPoolExecutor(max_workers=len(shares), thread_name_prefix="logbench") as pool:
        futures = [pool.submit(_worker, share) for share in shares]
        barrier.wait()
        wait(futures)
        finished = time.perf_counter_ns()

    worker_elapsed = [future.result() for future in futures]
    return finished - started[0], shares, worker_elapsed


def _traced_peaks(call: Callable[..., Any], args: tuple[Any, ...], samples: int) -> list[int]:
    peaks: list[int] = []
    for _ in range(samples):
        tracemalloc.reset_peak()
        before = tracemalloc.get_traced_memory()[0]
        call(*args)
        peak = tracemalloc.get_traced_memory()[1]
        peaks.append(peak - before)
    return peaks


def _noop(level: Level, message: str, fields: Mapping[str, Any] | None) -> None:
    return None


def sample_allocations(
    call: LogCall,
    level: Level,
    message: str,
    fields: Mapping[str, Any] | None,
    *,
    samples: int,
) -> list[int]:
    """Return the peak transient bytes allocated by each of samples calls.

    The cost of the sampling itself is calibrated against a no-op call and
    subtracted, so a call that allocates nothing reports zero.
    """
    if samples <= 0:
        return []
    args = (level, message, fields)
    was_tracing = tracemalloc.is_tracing()
    if not was_tracing:
        tracemalloc.start()
    try:
        overhead = min(_traced_peaks(_noop, args, samples))
        peaks = _traced_peaks(call, args, samples)
    finally:
        if not was_tracing:
            tracemalloc.stop()
    return [max(peak - overhead, 0) for peak in peaks]


def measure(
    scenario: Scenario,
    adapter_name: str,
    factory: AdapterFactory,
    fields: Mapping[str, Any] | None,
    config: BenchConfig,
) -> Measurement:
    """Measure one scenario against one adapter.

    Args:
        scenario: Scenario to run.
        adapter_name: Registry name of the adapter.
        factory: Adapter constructor.
        fields: Fields resolved once for the scenario and shared, by reference,
            with every adapter it runs against.
        config: Operation budget, parallelism and sampling settings.

    Returns:
        The Measurement for the pair.

    Raises:
        AdapterSetupError: If the adapter cannot be built or fails while emitting.
        CapabilityMismatchError: If the adapter lacks a required facility.
        MeasurementAnomalyError: If the run produced no usable numbers.
    """
    owner, adapter = build_adapter(scenario, adapter_name, factory, fields)
    call = adapter.log
    call_fields = fields if scenario.attach is Attach.PER_CALL else None
    level, message = scenario.level, scenario.message

    try:
        try:
            for _ in range(config.warmup_ops):
                call(level, message, call_fields)
            gc.collect()
            elapsed_ns, worker_ops, worker_elapsed = run_parallel(
                call,
                level,
                message,
                call_fields,
                ops=config.ops,
                parallelism=config.parallelism,
                barrier_timeout=config.barrier_timeout,
            )
            alloc_bytes = sample_allocations(
                call, level, message, call_fields, samples=config.alloc_samples
            )
        except threading.BrokenBarrierError as exc:
            raise MeasurementAnomalyError(
                scenario.name, adapter_name, "workers did not start together"
            ) from exc
        except Exception as exc:
            raise AdapterSetupError(
                scenario.name, adapter_name, f"emission failed: {exc!r}"
            ) from exc
    finally:
        owner.close()

    measurement = aggregate(
        scenario.name,
        adapter_name,
        elapsed_ns=elapsed_ns,
        worker_ops=worker_ops,
        worker_elapsed_ns=worker_elapsed,
        alloc_bytes=alloc_bytes,
    )
    log.debug(
        "pair.measured",
        scenario=scenario.name,
        adapter=adapter_name,
        ns_per_op=round(measurement.ns_per_op, 1),
        alloc_bytes_per_op=round(measurement.alloc_bytes_per_op, 1),
    )
    return measurement
