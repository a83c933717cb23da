"""Scenario matrix runner for the logging benchmark.

Every registered scenario runs against every registered adapter. A pair that
fails is logged and recorded as an exclusion with its reason; it never
aborts the rest of the matrix.

Entry points:
- run_scenario / run_matrix: programmatic runs returning result rows
- benchmark_<scenario>: one entry point per named scenario
- main: driver writing results.csv, summary.json, checks.json and report.md

Usage:
    python -m benchmarks.runner
    python -m benchmarks.runner --set ops=20000 --set parallelism=4
    python -m benchmarks.runner --config bench.json --no-render
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from benchmarks.checks import ChecksSummary, run_checks
from benchmarks.config import load_config
from benchmarks.harness import measure, resolve_fields
from benchmarks.metrics import index_measurements
from benchmarks.plotting import plot_matrix_results, read_results_csv
from benchmarks.registry import adapter_names, get_adapter_factory, get_scenario, scenario_names
from benchmarks.report import render_matrix_markdown
from benchmarks.workflow import collect_run_meta, next_run_dir, write_run_files
from core.errors import AdapterSetupError, CapabilityMismatchError, MeasurementAnomalyError
from core.logging import configure_logging, get_logger
from core.types import BenchConfig, Exclusion, ExclusionKind, FixtureSet, ResultRow
from workloads.fixtures import build_fixture_set, fixture_fingerprint

__all__ = [
    "CSV_COLUMNS",
    "run_scenario",
    "run_matrix",
    "summarize_rows",
    "write_results_csv",
    "benchmark_without_fields",
    "benchmark_ten_fields_context",
    "benchmark_ten_fields",
    "benchmark_four_scalar_fields",
    "benchmark_no_fields_disabled",
    "benchmark_no_fields_no_message_disabled",
    "benchmark_ten_fields_disabled",
    "benchmark_lot_of_fields",
    "main",
]

log = get_logger(__name__)

# CSV column order (stable)
CSV_COLUMNS = [
    "scenario",
    "adapter",
    "status",
    "ops",
    "parallelism",
    "elapsed_ns",
    "ns_per_op",
    "ops_per_sec",
    "alloc_bytes_per_op",
    "worker_ns_per_op_mean",
    "worker_ns_per_op_std",
    "reason",
]


def run_scenario(
    name: str,
    *,
    fixtures: FixtureSet,
    config: BenchConfig,
) -> list[ResultRow]:
    """Run one scenario against every selected adapter.

    The scenario's fields are resolved once, so every adapter receives the
    same mapping object and the same operation budget.

    Args:
        name: Registered scenario name.
        fixtures: The shared fixture set.
        config: Run configuration.

    Returns:
        One Measurement or Exclusion per adapter, in registry order.
    """
    scenario = get_scenario(name)
    fields = resolve_fields(scenario, fixtures)
    rows: list[ResultRow] = []

    for adapter_name in adapter_names(config.adapters):
        factory = get_adapter_factory(adapter_name)
        try:
            rows.append(measure(scenario, adapter_name, factory, fields, config))
        except CapabilityMismatchError as exc:
            log.warning("pair.excluded", scenario=name, adapter=adapter_name, reason=exc.reason)
            rows.append(Exclusion(name, adapter_name, ExclusionKind.CAPABILITY, exc.reason))
        except AdapterSetupError as exc:
            log.error(
                "pair.setup_failed",
                scenario=name,
                adapter=adapter_name,
                reason=exc.reason,
                exc_info=exc,
            )
            rows.append(Exclusion(name, adapter_name, ExclusionKind.SETUP, exc.reason))
        except MeasurementAnomalyError as exc:
            log.warning("pair.invalid", scenario=name, adapter=adapter_name, reason=exc.reason)
            rows.append(Exclusion(name, adapter_name, ExclusionKind.ANOMALY, exc.reason))

    return rows


def run_matrix(config: BenchConfig, fixtures: FixtureSet | None = None) -> list[ResultRow]:
    """Run every selected scenario against every selected adapter."""
    if fixtures is None:
        fixtures = build_fixture_set()
    rows: list[ResultRow] = []
    for name in scenario_names(config.scenarios):
        log.info("scenario.start", scenario=name, ops=config.ops, parallelism=config.parallelism)
        rows.extend(run_scenario(name, fixtures=fixtures, config=config))
    return rows


def _entry(name: str, fixtures: FixtureSet | None, config: BenchConfig | None) -> list[ResultRow]:
    return run_scenario(
        name,
        fixtures=fixtures if fixtures is not None else build_fixture_set(),
        config=config if config is not None else BenchConfig(),
    )


def benchmark_without_fields(
    fixtures: FixtureSet | None = None, config: BenchConfig | None = None
) -> list[ResultRow]:
    """Logging without any structured context."""
    return _entry("without_fields", fixtures, config)


def benchmark_ten_fields_context(
    fixtures: FixtureSet | None = None, config: BenchConfig | None = None
) -> list[ResultRow]:
    """Logging with 10 fields bound in context."""
    return _entry("ten_fields_context", fixtures, config)


def benchmark_ten_fields(
    fixtures: FixtureSet | None = None, config: BenchConfig | None = None
) -> list[ResultRow]:
    """Logging with 10 fields attached per call."""
    return _entry("ten_fields", fixtures, config)


def benchmark_four_scalar_fields(
    fixtures: FixtureSet | None = None, config: BenchConfig | None = None
) -> list[ResultRow]:
    return _entry("four_scalar_fields", fixtures, config)


def benchmark_no_fields_disabled(
    fixtures: FixtureSet | None = None, config: BenchConfig | None = None
) -> list[ResultRow]:
    return _entry("no_fields_disabled", fixtures, config)


def benchmark_no_fields_no_message_disabled(
    fixtures: FixtureSet | None = None, config: BenchConfig | None = None
) -> list[ResultRow]:
    return _entry("no_fields_no_message_disabled", fixtures, config)


def benchmark_ten_fields_disabled(
    fixtures: FixtureSet | None = None, config: BenchConfig | None = None
) -> list[ResultRow]:
    return _entry("ten_fields_disabled", fixtures, config)


def benchmark_lot_of_fields(
    fixtures: FixtureSet | None = None, config: BenchConfig | None = None
) -> list[ResultRow]:
    """10 per-call fields at warning level, read against the context baseline."""
    return _entry("lot_of_fields", fixtures, config)


def summarize_rows(rows: Sequence[ResultRow]) -> dict[str, Any]:
    """Compute a global summary of a run.

    Returns:
        Dictionary with pair counts and, per scenario, the fastest library.
    """
    measured = index_measurements(rows)
    fastest: dict[str, dict[str, Any]] = {}
    for (scenario, adapter), m in measured.items():
        best = fastest.get(scenario)
        if best is None or m.ns_per_op < best["ns_per_op"]:
            fastest[scenario] = {"adapter": adapter, "ns_per_op": m.ns_per_op}

    return {
        "number_of_pairs": len(rows),
        "measured": len(measured),
        "excluded": [r.to_dict() for r in rows if isinstance(r, Exclusion)],
        "fastest_by_scenario": fastest,
    }


def write_results_csv(rows: Sequence[ResultRow], path: Path) -> None:
    """Write one CSV row per pair; numeric cells of excluded pairs stay empty."""
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS, restval="")
        writer.writeheader()
        for row in rows:
            writer.writerow(row.to_dict())


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Compare structured-logging libraries under identical parallel load",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--workflow-dir",
        type=str,
        default="workflow",
        help="Directory for benchmark outputs",
    )
    parser.add_argument("--config", type=str, default=None, help="JSON config file")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a config value, e.g. ops=20000 (repeatable)",
    )
    parser.add_argument(
        "--no-render",
        action="store_true",
        help="Disable plot and report generation",
    )
    parser.add_argument("--log-level", type=str, default="INFO", help="Harness log level")
    parser.add_argument("--json-logs", action="store_true", help="Emit harness logs as JSON")
    return parser.parse_args(argv)


def generate_readme(run_dir: Path, config: BenchConfig, versions: dict[str, str]) -> str:
    """Generate README.md content."""
    lines = [f"# {run_dir.name}", ""]
    lines.extend(["> See `artifacts/report.md` for tables and plots.", ""])
    lines.extend(
        [
            "## Configuration",
            "",
            f"- Operations per pair: {config.ops}",
            f"- Worker threads: {config.parallelism}",
            f"- Warm-up calls: {config.warmup_ops}",
            f"- Allocation samples: {config.alloc_samples}",
            f"- Scenarios: {', '.join(config.scenarios) or 'all'}",
            f"- Adapters: {', '.join(config.adapters) or 'all'}",
            "",
            "## Versions",
            "",
        ]
    )
    lines.extend(f"- {name}: {version}" for name, version in sorted(versions.items()))
    lines.extend(
        [
            "",
            "## Reproduce",
            "",
            "```bash",
            "python -m benchmarks.runner \\",
            f"    --set ops={config.ops} \\",
            f"    --set parallelism={config.parallelism} \\",
            f"    --set warmup_ops={config.warmup_ops} \\",
            f"    --set alloc_samples={config.alloc_samples}",
            "```",
            "",
        ]
    )
    return "\n".join(lines)


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the benchmark driver.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success, 2 when a post-run check fails).
    """
    args = parse_args(argv)
    configure_logging(args.log_level, json_logs=args.json_logs)
    config = load_config(Path(args.config) if args.config else None, args.overrides)

    fixtures = build_fixture_set()
    fingerprint = fixture_fingerprint(fixtures)
    scenarios = scenario_names(config.scenarios)
    adapters = adapter_names(config.adapters)

    run_dir = next_run_dir(Path(args.workflow_dir))
    artifacts_dir = run_dir / "artifacts"
    print(f"Created benchmark directory: {run_dir}")

    rows = run_matrix(config, fixtures)

    csv_path = artifacts_dir / "results.csv"
    write_results_csv(rows, csv_path)
    summary = summarize_rows(rows)
    _write_json(artifacts_dir / "summary.json", summary)

    checks: ChecksSummary = run_checks(
        rows,
        fixtures=fixtures,
        fingerprint=fingerprint,
        scenarios=scenarios,
        adapters=adapters,
        ops=config.ops,
    )
    _write_json(artifacts_dir / "checks.json", checks.to_json())

    if not args.no_render:
        plots = plot_matrix_results(read_results_csv(csv_path), artifacts_dir)
        report_md = render_matrix_markdown(
            rows,
            scenarios=[get_scenario(name) for name in scenarios],
            config=config,
            checks=checks,
            plots=plots,
            exp_dir=run_dir,
        )
        with (artifacts_dir / "report.md").open("w", encoding="utf-8") as f:
            f.write(report_md)

    meta = collect_run_meta(sys.argv if argv is None else ["runner"] + list(argv))
    write_run_files(
        run_dir,
        meta=meta,
        config=config.to_dict(),
        readme_text=generate_readme(run_dir, config, meta["versions"]),
    )

    status = "✅ PASSED" if checks.passed else "❌ FAILED"
    print(f"Benchmark completed: {run_dir.name}")
    print(f"  pairs: {summary['number_of_pairs']}")
    print(f"  measured: {summary['measured']}")
    print(f"  excluded: {len(summary['excluded'])}")
    for scenario, best in summary["fastest_by_scenario"].items():
        print(f"  fastest[{scenario}]: {best['adapter']} ({best['ns_per_op']:.0f} ns/op)")
    print(f"  checks: {status}")
    if not args.no_render:
        print(f"  report: {artifacts_dir / 'report.md'}")

    return 0 if checks.passed else 2


if __name__ == "__main__":
    sys.exit(main())
