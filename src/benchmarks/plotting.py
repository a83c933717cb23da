"""Plotting utilities for benchmark visualization.

This module provides functions for:
- Parsing the results.csv of a run
- Creating grouped bar charts of ns/op and bytes/op per scenario and library

Excluded pairs have empty numeric cells and are left out of the charts.
Uses matplotlib only (no seaborn).
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

__all__ = [
    "read_results_csv",
    "plot_matrix_results",
]


def read_results_csv(path: Path) -> list[dict[str, str]]:
    """Read a results.csv file and return list of row dictionaries.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader)


def _safe_float(value: Any) -> float | None:
    """Convert value to float, returning None if not possible."""
    if value is None or value == "" or value == "na" or value == "N/A":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _ensure_plots_dir(out_dir: Path) -> Path:
    """Ensure the plots directory exists and return its path."""
    plots_dir = out_dir / "plots"
    plots_dir.mkdir(parents=True, exist_ok=True)
    return plots_dir


def _ordered(rows: list[dict[str, str]], key: str) -> list[str]:
    seen: list[str] = []
    for row in rows:
        value = row.get(key, "")
        if value and value not in seen:
            seen.append(value)
    return seen


def _grouped_bars(
    rows: list[dict[str, str]],
    value_key: str,
    *,
    xlabel: str,
    title: str,
    path: Path,
) -> bool:
    """Draw one horizontal bar group per scenario, one bar per adapter.

    Returns:
        False when no row has a value for value_key and nothing was drawn.
    """
    scenarios = _ordered(rows, "scenario")
    adapters = _ordered(rows, "adapter")
    values = {
        (r["scenario"], r["adapter"]): _safe_float(r.get(value_key))
        for r in rows
        if r.get("scenario") and r.get("adapter")
    }
    if not any(v is not None for v in values.values()):
        return False

    positions = np.arange(len(scenarios))
    height = 0.8 / max(len(adapters), 1)
    fig, ax = plt.subplots(figsize=(9, 1.0 + 0.6 * len(scenarios) * max(len(adapters), 1) / 2))
    for i, adapter in enumerate(adapters):
        widths = [values.get((s, adapter)) for s in scenarios]
        ax.barh(
            positions + i * height,
            [w if w is not None else 0.0 for w in widths],
            height=height,
            label=adapter,
        )
    ax.set_yticks(positions + height * (len(adapters) - 1) / 2)
    ax.set_yticklabels(scenarios)
    ax.invert_yaxis()
    ax.set_xlabel(xlabel)
    ax.set_title(title)
    ax.legend(loc="best", fontsize="small")
    ax.grid(True, axis="x", alpha=0.3)
    fig.savefig(path, dpi=100, bbox_inches="tight")
    plt.close(fig)
    return True


def plot_matrix_results(rows: list[dict[str, str]], out_dir: Path) -> dict[str, Path]:
    """Create aggregate plots for a run and return mapping of plot names to paths.

    Creates the following plots (if data is available):
    - ns_per_op.png: time per logging call
    - alloc_bytes_per_op.png: peak transient bytes per logging call

    Args:
        rows: Rows read from results.csv.
        out_dir: Output directory (plots will be in out_dir/plots/).

    Returns:
        Dictionary mapping plot name to file path.
    """
    plots_dir = _ensure_plots_dir(out_dir)
    created_plots: dict[str, Path] = {}

    if not rows:
        return created_plots

    path = plots_dir / "ns_per_op.png"
    if _grouped_bars(rows, "ns_per_op", xlabel="ns/op", title="Time per call", path=path):
        created_plots["ns_per_op"] = path

    path = plots_dir / "alloc_bytes_per_op.png"
    if _grouped_bars(
        rows,
        "alloc_bytes_per_op",
        xlabel="B/op",
        title="Peak transient bytes per call",
        path=path,
    ):
        created_plots["alloc_bytes_per_op"] = path

    return created_plots
