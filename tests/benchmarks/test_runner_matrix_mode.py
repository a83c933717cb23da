"""Tests for the scenario matrix runner.

This module tests:
- Every adapter of a scenario receives the same field mapping
- Failing pairs become exclusions without stopping the matrix
- Per-scenario entry points
- Summary and CSV output
"""

from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path

import pytest

from adapters.recording import RecordingFactory
from benchmarks import registry
from benchmarks import runner
from benchmarks.runner import CSV_COLUMNS, run_matrix, run_scenario, summarize_rows, write_results_csv
from core.types import BenchConfig, Capability, Exclusion, ExclusionKind, Measurement
from workloads.fixtures import build_fixture_set

SMALL = dict(ops=100, parallelism=2, warmup_ops=5, alloc_samples=10)


@pytest.fixture
def recorders() -> Iterator[dict[str, RecordingFactory]]:
    """Register two recording adapters and one lacking context support."""
    factories = {
        "_rec_a": RecordingFactory("_rec_a"),
        "_rec_b": RecordingFactory("_rec_b"),
        "_rec_per_call": RecordingFactory(
            "_rec_per_call", capabilities=frozenset({Capability.PER_CALL_FIELDS})
        ),
    }
    for name, factory in factories.items():
        registry.register_adapter(name, factory)
    try:
        yield factories
    finally:
        for name in factories:
            registry.ADAPTERS.pop(name, None)


@pytest.fixture
def broken_adapter() -> Iterator[str]:
    name = "_broken"

    def _factory(sink, min_level):
        raise RuntimeError("cannot open sink")

    registry.register_adapter(name, _factory)
    try:
        yield name
    finally:
        registry.ADAPTERS.pop(name, None)


class TestRunScenario:
    """Tests for run_scenario."""

    def test_same_mapping_for_every_adapter(self, recorders) -> None:
        config = BenchConfig(adapters=("_rec_a", "_rec_b"), **SMALL)

        rows = run_scenario("ten_fields", fixtures=build_fixture_set(), config=config)

        assert [r.adapter for r in rows] == ["_rec_a", "_rec_b"]
        assert all(isinstance(r, Measurement) and r.ops == 100 for r in rows)
        a_fields = recorders["_rec_a"].calls[0].fields
        b_fields = recorders["_rec_b"].calls[0].fields
        assert a_fields is not None
        assert a_fields is b_fields

    def test_capability_exclusion(self, recorders) -> None:
        config = BenchConfig(adapters=("_rec_a", "_rec_per_call"), **SMALL)

        rows = run_scenario("ten_fields_context", fixtures=build_fixture_set(), config=config)

        measured, excluded = rows
        assert isinstance(measured, Measurement)
        assert isinstance(excluded, Exclusion)
        assert excluded.kind is ExclusionKind.CAPABILITY
        assert excluded.reason

    def test_setup_exclusion_does_not_stop_matrix(self, recorders, broken_adapter) -> None:
        config = BenchConfig(adapters=(broken_adapter, "_rec_a"), **SMALL)

        rows = run_scenario("without_fields", fixtures=build_fixture_set(), config=config)

        assert isinstance(rows[0], Exclusion)
        assert rows[0].kind is ExclusionKind.SETUP
        assert "cannot open sink" in rows[0].reason
        assert isinstance(rows[1], Measurement)


class TestEntryPoints:
    """Tests for the per-scenario entry points."""

    @pytest.mark.parametrize(
        "entry,scenario",
        [
            (runner.benchmark_without_fields, "without_fields"),
            (runner.benchmark_ten_fields_context, "ten_fields_context"),
            (runner.benchmark_ten_fields, "ten_fields"),
            (runner.benchmark_four_scalar_fields, "four_scalar_fields"),
            (runner.benchmark_no_fields_disabled, "no_fields_disabled"),
            (runner.benchmark_no_fields_no_message_disabled, "no_fields_no_message_disabled"),
            (runner.benchmark_ten_fields_disabled, "ten_fields_disabled"),
            (runner.benchmark_lot_of_fields, "lot_of_fields"),
        ],
    )
    def test_entry_point_runs_its_scenario(self, recorders, entry, scenario: str) -> None:
        config = BenchConfig(adapters=("_rec_a",), **SMALL)

        rows = entry(build_fixture_set(), config)

        assert len(rows) == 1
        assert rows[0].scenario == scenario
        assert isinstance(rows[0], Measurement)


class TestRunMatrix:
    """Tests for run_matrix and its outputs."""

    def test_full_cross_product(self, recorders) -> None:
        config = BenchConfig(adapters=("_rec_a", "_rec_per_call"), **SMALL)

        rows = run_matrix(config)

        assert len(rows) == len(registry.scenario_names()) * 2
        excluded = [r for r in rows if isinstance(r, Exclusion)]
        assert [(r.scenario, r.adapter) for r in excluded] == [
            ("ten_fields_context", "_rec_per_call")
        ]

    def test_summary_and_csv(self, recorders, tmp_path: Path) -> None:
        config = BenchConfig(
            scenarios=("without_fields", "ten_fields_context"),
            adapters=("_rec_a", "_rec_per_call"),
            **SMALL,
        )
        rows = run_matrix(config, build_fixture_set())

        summary = summarize_rows(rows)
        assert summary["number_of_pairs"] == 4
        assert summary["measured"] == 3
        assert len(summary["excluded"]) == 1
        assert summary["fastest_by_scenario"]["ten_fields_context"]["adapter"] == "_rec_a"

        path = tmp_path / "results.csv"
        write_results_csv(rows, path)
        with path.open() as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames == CSV_COLUMNS
            out = list(reader)
        assert len(out) == 4
        assert out[3]["status"] == "excluded:capability"
        assert out[3]["ns_per_op"] == ""
        assert out[0]["status"] == "ok"
