"""Benchmarks module for logging library comparisons.

This package provides utilities for running, tracking, and analyzing
structured-logging benchmarks:

- registry: Adapter and scenario registries
- harness: Parallel measurement of one (scenario, adapter) pair
- metrics: Operation splitting and aggregation helpers
- config: Run configuration loading
- runner: CLI for running the scenario matrix
- checks: Post-run check suite
- report: Markdown report generation
- workflow: Run directory management
"""

from __future__ import annotations

from benchmarks.checks import CheckResult, ChecksSummary, run_checks
from benchmarks.config import load_config
from benchmarks.harness import measure
from benchmarks.metrics import aggregate, baseline_ratio, split_ops
from benchmarks.registry import get_adapter_factory, get_scenario, register_adapter, register_scenario
from benchmarks.report import render_checks_markdown, render_matrix_markdown
from benchmarks.runner import main as run_benchmark
from benchmarks.runner import run_matrix, run_scenario
from benchmarks.workflow import collect_run_meta, next_run_dir, try_get_git_commit, write_run_files

__all__ = [
    # Workflow
    "next_run_dir",
    "write_run_files",
    "try_get_git_commit",
    "collect_run_meta",
    # Registry
    "register_adapter",
    "register_scenario",
    "get_adapter_factory",
    "get_scenario",
    # Measurement
    "measure",
    "split_ops",
    "aggregate",
    "baseline_ratio",
    # Config
    "load_config",
    # Runner
    "run_benchmark",
    "run_scenario",
    "run_matrix",
    # Checks
    "CheckResult",
    "ChecksSummary",
    "run_checks",
    # Report
    "render_checks_markdown",
    "render_matrix_markdown",
]
