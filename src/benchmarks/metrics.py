"""Metrics computation for logging benchmark runs.

This module turns the raw counters of one timed phase into a Measurement
and provides comparison helpers used by reports and checks.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from core.errors import MeasurementAnomalyError
from core.types import Measurement, ResultRow

__all__ = [
    "split_ops",
    "aggregate",
    "index_measurements",
    "baseline_ratio",
]


def split_ops(total: int, workers: int) -> list[int]:
    """Partition an operation budget across workers.

    Shares differ by at most one and always sum to total.

    Args:
        total: Number of operations to run.
        workers: Number of workers.

    Returns:
        One share per worker.

    Raises:
        ValueError: If workers is not positive or total is negative.

    Example:
        >>> split_ops(10, 3)
        [4, 3, 3]
    """
    if workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")
    if total < 0:
        raise ValueError(f"total must be non-negative, got {total}")
    base, extra = divmod(total, workers)
    return [base + (1 if i < extra else 0) for i in range(workers)]


def aggregate(
    scenario: str,
    adapter: str,
    *,
    elapsed_ns: int,
    worker_ops: Sequence[int],
    worker_elapsed_ns: Sequence[int],
    alloc_bytes: Sequence[int],
) -> Measurement:
    """Aggregate the counters of one (scenario, adapter) run.

    Args:
        scenario: Scenario name.
        adapter: Adapter name.
        elapsed_ns: Wall time from releasing the workers to the last one finishing.
        worker_ops: Operations each worker completed.
        worker_elapsed_ns: Time each worker spent in its loop.
        alloc_bytes: Peak transient bytes of each sampled call.

    Returns:
        The Measurement for the pair.

    Raises:
        MeasurementAnomalyError: If no operations ran, no time elapsed or no
            allocation sample was taken.
    """
    ops = int(sum(worker_ops))
    if ops <= 0:
        raise MeasurementAnomalyError(scenario, adapter, "zero operations recorded")
    if elapsed_ns <= 0:
        raise MeasurementAnomalyError(scenario, adapter, "timer reported no elapsed time")
    if not alloc_bytes:
        raise MeasurementAnomalyError(scenario, adapter, "allocation counters unavailable")

    per_worker = np.array(
        [t / n for t, n in zip(worker_elapsed_ns, worker_ops, strict=True) if n > 0],
        dtype=float,
    )
    ns_per_op = elapsed_ns / ops
    return Measurement(
        scenario=scenario,
        adapter=adapter,
        ops=ops,
        parallelism=len(worker_ops),
        elapsed_ns=int(elapsed_ns),
        ns_per_op=float(ns_per_op),
        ops_per_sec=float(ops * 1e9 / elapsed_ns),
        alloc_bytes_per_op=float(np.mean(alloc_bytes)),
        worker_ns_per_op_mean=float(np.mean(per_worker)),
        worker_ns_per_op_std=float(np.std(per_worker)) if len(per_worker) > 1 else 0.0,
    )


def index_measurements(rows: Iterable[ResultRow]) -> dict[tuple[str, str], Measurement]:
    """Map (scenario, adapter) to its Measurement, skipping exclusions."""
    return {(r.scenario, r.adapter): r for r in rows if isinstance(r, Measurement)}


def baseline_ratio(
    measurement: Measurement,
    baseline: Measurement | None,
) -> float | None:
    """Return ns/op of measurement relative to baseline, None without a baseline."""
    if baseline is None or baseline.ns_per_op <= 0:
        return None
    return measurement.ns_per_op / baseline.ns_per_op
