"""Post-run check suite for a benchmark matrix.

This module verifies properties that make the numbers of a run comparable:
- The fixture set was not replaced or modified by any run
- Every (scenario, adapter) pair was either measured with the same op count
  or excluded with a reason
- The disabled-level path allocates no more than the enabled path, and
  strictly less when fields are attached

The checks are cheap and deterministic, so the runner applies them to every run.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from benchmarks.metrics import index_measurements
from core.types import Exclusion, FixtureSet, Measurement, ResultRow
from workloads.fixtures import fixture_fingerprint

__all__ = [
    "CheckResult",
    "ChecksSummary",
    "DISABLED_PAIRS",
    "check_fixture_integrity",
    "check_matrix_complete",
    "check_disabled_allocations",
    "run_checks",
]

# (disabled scenario, enabled counterpart, whether disabled must be strictly cheaper)
DISABLED_PAIRS: tuple[tuple[str, str, bool], ...] = (
    ("no_fields_disabled", "without_fields", False),
    ("ten_fields_disabled", "ten_fields", True),
)


@dataclass
class CheckResult:
    """Result of a single check.

    Attributes:
        name: Name of the check.
        passed: Whether the check passed.
        details: Additional details (values compared, offending pairs).
    """

    name: str
    passed: bool
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "passed": self.passed,
            "details": self.details,
        }


@dataclass
class ChecksSummary:
    """Summary of all checks.

    Attributes:
        passed: Whether all checks passed.
        results: List of individual check results.
    """

    passed: bool
    results: list[CheckResult] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "passed": self.passed,
            "num_checks": len(self.results),
            "num_passed": sum(1 for r in self.results if r.passed),
            "num_failed": sum(1 for r in self.results if not r.passed),
            "results": [r.to_dict() for r in self.results],
        }


def check_fixture_integrity(fixtures: FixtureSet, fingerprint: tuple[Any, ...]) -> CheckResult:
    """Check that the fixture set still matches a fingerprint taken before the run."""
    passed = fixture_fingerprint(fixtures) == fingerprint
    details: dict[str, Any] = {}
    if not passed:
        details["error"] = "Fixture set was replaced or modified during the run"
    return CheckResult(name="fixture_integrity", passed=passed, details=details)


def check_matrix_complete(
    rows: Sequence[ResultRow],
    *,
    scenarios: Sequence[str],
    adapters: Sequence[str],
    ops: int,
) -> CheckResult:
    """Check that every pair appears exactly once and measured pairs ran ops operations.

    Args:
        rows: Result rows of the run.
        scenarios: Scenario names that were run.
        adapters: Adapter names that were run.
        ops: Operation budget every measured pair must have used.

    Returns:
        CheckResult listing missing, duplicated and mis-sized pairs.
    """
    expected = {(s, a) for s in scenarios for a in adapters}
    seen: dict[tuple[str, str], int] = {}
    for row in rows:
        key = (row.scenario, row.adapter)
        seen[key] = seen.get(key, 0) + 1

    missing = sorted(f"{s} x {a}" for s, a in expected - set(seen))
    duplicated = sorted(f"{s} x {a}" for (s, a), n in seen.items() if n > 1)
    wrong_ops = sorted(
        f"{r.scenario} x {r.adapter}" for r in rows if isinstance(r, Measurement) and r.ops != ops
    )
    no_reason = sorted(
        f"{r.scenario} x {r.adapter}" for r in rows if isinstance(r, Exclusion) and not r.reason
    )

    passed = not (missing or duplicated or wrong_ops or no_reason)
    details: dict[str, Any] = {
        "expected_pairs": len(expected),
        "measured": sum(1 for r in rows if isinstance(r, Measurement)),
        "excluded": sum(1 for r in rows if isinstance(r, Exclusion)),
    }
    if missing:
        details["missing"] = missing
    if duplicated:
        details["duplicated"] = duplicated
    if wrong_ops:
        details["wrong_ops"] = wrong_ops
    if no_reason:
        details["excluded_without_reason"] = no_reason
    if not passed:
        details["error"] = "Matrix has unaccounted or inconsistent pairs"
    return CheckResult(name="matrix_complete", passed=passed, details=details)


def check_disabled_allocations(
    rows: Sequence[ResultRow],
    disabled: str,
    enabled: str,
    *,
    strict: bool,
) -> CheckResult:
    """Check that a disabled scenario allocates less than its enabled counterpart.

    Adapters without a measurement for both scenarios are listed as skipped.

    Args:
        rows: Result rows of the run.
        disabled: Scenario emitting below the enabled level.
        enabled: Scenario emitting the same record at an enabled level.
        strict: Require strictly fewer bytes instead of no more.
    """
    name = f"disabled_allocations:{disabled}"
    measured = index_measurements(rows)
    adapters = sorted({a for (_s, a) in measured})

    compared: dict[str, dict[str, float]] = {}
    skipped: list[str] = []
    failures: list[str] = []
    for adapter in adapters:
        off = measured.get((disabled, adapter))
        on = measured.get((enabled, adapter))
        if off is None or on is None:
            skipped.append(adapter)
            continue
        compared[adapter] = {
            "disabled_bytes_per_op": off.alloc_bytes_per_op,
            "enabled_bytes_per_op": on.alloc_bytes_per_op,
        }
        ok = (
            off.alloc_bytes_per_op < on.alloc_bytes_per_op
            if strict
            else off.alloc_bytes_per_op <= on.alloc_bytes_per_op
        )
        if not ok:
            failures.append(adapter)

    details: dict[str, Any] = {
        "enabled_scenario": enabled,
        "strict": strict,
        "compared": compared,
    }
    if not compared:
        details["skipped"] = True
        details["reason"] = "no adapter measured both scenarios"
    elif skipped:
        details["skipped_adapters"] = skipped
    if failures:
        details["error"] = "Disabled path allocated as much as the enabled path: " + ", ".join(
            failures
        )
    return CheckResult(name=name, passed=not failures, details=details)


def run_checks(
    rows: Sequence[ResultRow],
    *,
    fixtures: FixtureSet,
    fingerprint: tuple[Any, ...],
    scenarios: Sequence[str],
    adapters: Sequence[str],
    ops: int,
) -> ChecksSummary:
    """Run the full check suite on the rows of one run."""
    results = [
        check_fixture_integrity(fixtures, fingerprint),
        check_matrix_complete(rows, scenarios=scenarios, adapters=adapters, ops=ops),
    ]
    for disabled, enabled, strict in DISABLED_PAIRS:
        results.append(check_disabled_allocations(rows, disabled, enabled, strict=strict))
    return ChecksSummary(passed=all(r.passed for r in results), results=results)
