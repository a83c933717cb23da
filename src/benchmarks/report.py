"""Markdown report generation for benchmark runs.

This module renders the rows of a run as a human-readable Markdown report:
one table per scenario, the excluded pairs with their reasons, the check
results and the embedded plots.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from benchmarks.checks import ChecksSummary
from benchmarks.metrics import baseline_ratio, index_measurements
from core.types import BenchConfig, Exclusion, Measurement, ResultRow, Scenario

__all__ = [
    "render_checks_markdown",
    "render_matrix_markdown",
]


def _format_ns(value: float) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.2f} ms"
    if value >= 1_000:
        return f"{value / 1_000:.2f} µs"
    return f"{value:.0f} ns"


def render_checks_markdown(summary: ChecksSummary) -> str:
    """Render checks summary as a Markdown section."""
    lines: list[str] = []
    status = "✅ PASSED" if summary.passed else "❌ FAILED"
    lines.append(f"## Checks: {status}")
    lines.append("")
    lines.append("| Check | Status | Details |")
    lines.append("|-------|--------|---------|")

    for result in summary.results:
        details = result.details
        if details.get("skipped"):
            lines.append(f"| {result.name} | ⏭️ Skipped | {details.get('reason', 'N/A')} |")
            continue
        status_icon = "✅" if result.passed else "❌"
        if "compared" in details:
            parts = [
                f"{adapter}: {v['disabled_bytes_per_op']:.0f} vs {v['enabled_bytes_per_op']:.0f} B/op"
                for adapter, v in details["compared"].items()
            ]
            text = "; ".join(parts)
        elif "expected_pairs" in details:
            text = (
                f"expected={details['expected_pairs']}, measured={details['measured']}, "
                f"excluded={details['excluded']}"
            )
        else:
            text = details.get("error", "")
        lines.append(f"| {result.name} | {status_icon} | {text} |")

    lines.append("")
    failed = [r for r in summary.results if not r.passed]
    if failed:
        lines.append("Failed checks:")
        for result in failed:
            lines.append(f"- `{result.name}`: {result.details.get('error', 'See details above')}")
        lines.append("")
    return "\n".join(lines)


def _scenario_table(
    scenario: Scenario,
    rows: Sequence[ResultRow],
    measured: Mapping[tuple[str, str], Measurement],
) -> list[str]:
    lines = [f"### {scenario.name}", "", f"{scenario.description}.", ""]
    if scenario.baseline:
        lines.extend([f"Baseline: `{scenario.baseline}`.", ""])

    own = [r for r in rows if r.scenario == scenario.name]
    ok = sorted((r for r in own if isinstance(r, Measurement)), key=lambda m: m.ns_per_op)
    excluded = [r for r in own if isinstance(r, Exclusion)]

    header = "| Library | Time/op | ops/s | B/op | Workers |"
    rule = "|---------|---------|-------|------|---------|"
    if scenario.baseline:
        header += " vs baseline |"
        rule += "-------------|"
    lines.extend([header, rule])

    for m in ok:
        line = (
            f"| {m.adapter} | {_format_ns(m.ns_per_op)} | {m.ops_per_sec:,.0f} "
            f"| {m.alloc_bytes_per_op:.0f} | {m.parallelism} |"
        )
        if scenario.baseline:
            ratio = baseline_ratio(m, measured.get((scenario.baseline, m.adapter)))
            line += f" {ratio:.2f}x |" if ratio is not None else " N/A |"
        lines.append(line)
    for e in excluded:
        line = f"| {e.adapter} | excluded ({e.kind.value}) | | | |"
        if scenario.baseline:
            line += " |"
        lines.append(line)
    lines.append("")
    return lines


def render_matrix_markdown(
    rows: Sequence[ResultRow],
    *,
    scenarios: Sequence[Scenario],
    config: BenchConfig,
    checks: ChecksSummary | None = None,
    plots: Mapping[str, Path] | None = None,
    exp_dir: Path | None = None,
) -> str:
    """Render the rows of a run as Markdown.

    Args:
        rows: Measurements and exclusions of the run.
        scenarios: Scenarios in run order.
        config: Configuration the run used.
        checks: Optional check results to include.
        plots: Optional mapping of plot name to file path.
        exp_dir: Run directory; plot links are made relative to its artifacts.

    Returns:
        Markdown string.
    """
    measured = index_measurements(rows)
    lines: list[str] = ["# Logging Benchmark Report", ""]

    lines.append("## Configuration")
    lines.append("")
    lines.append(f"- **Operations per pair**: {config.ops:,}")
    lines.append(f"- **Worker threads**: {config.parallelism}")
    lines.append(f"- **Warm-up calls**: {config.warmup_ops:,}")
    lines.append(f"- **Allocation samples**: {config.alloc_samples:,}")
    lines.append("")
    lines.append(
        "Time/op is wall time divided by operations across all workers. "
        "B/op is the mean peak of transient bytes traced during one call."
    )
    lines.append("")

    lines.append("## Results")
    lines.append("")
    for scenario in scenarios:
        lines.extend(_scenario_table(scenario, rows, measured))

    excluded = [r for r in rows if isinstance(r, Exclusion)]
    lines.append("## Excluded Pairs")
    lines.append("")
    if excluded:
        lines.append("| Scenario | Library | Kind | Reason |")
        lines.append("|----------|---------|------|--------|")
        for e in excluded:
            reason = e.reason.replace("|", "\\|")
            lines.append(f"| {e.scenario} | {e.adapter} | {e.kind.value} | {reason} |")
    else:
        lines.append("None.")
    lines.append("")

    if checks is not None:
        lines.append(render_checks_markdown(checks))

    if plots:
        lines.append("## Plots")
        lines.append("")
        base = exp_dir / "artifacts" if exp_dir is not None else None
        for name, path in plots.items():
            link: Any = path
            if base is not None:
                try:
                    link = path.relative_to(base)
                except ValueError:
                    link = path
            lines.append(f"![{name}]({link})")
            lines.append("")

    return "\n".join(lines)
