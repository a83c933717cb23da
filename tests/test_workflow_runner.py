"""Tests for workflow management and the benchmark driver.

This module tests:
- Run directory creation and naming
- Metadata files
- Driver smoke test against the real libraries
- Artifact generation (results.csv, summary.json, checks.json, report.md)
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest
import structlog

from benchmarks.runner import CSV_COLUMNS, main
from benchmarks.workflow import (
    collect_run_meta,
    library_versions,
    next_run_dir,
    try_get_git_commit,
    write_run_files,
)

# =============================================================================
# Tests for next_run_dir
# =============================================================================


class TestNextRunDir:
    """Tests for run directory creation."""

    def test_creates_first_run_dir(self, tmp_path: Path) -> None:
        """First run should be bench_0000."""
        workflow_dir = tmp_path / "workflow"

        run_dir = next_run_dir(workflow_dir)

        assert run_dir.name == "bench_0000"
        assert run_dir.exists()
        assert (run_dir / "artifacts").exists()

    def test_increments_after_existing(self, tmp_path: Path) -> None:
        """Should create next index after max existing."""
        workflow_dir = tmp_path / "workflow"
        workflow_dir.mkdir()

        # Gap at 0001
        (workflow_dir / "bench_0000").mkdir()
        (workflow_dir / "bench_0002").mkdir()

        run_dir = next_run_dir(workflow_dir)

        assert run_dir.name == "bench_0003"

    def test_ignores_non_run_dirs(self, tmp_path: Path) -> None:
        """Should ignore directories not matching bench_XXXX pattern."""
        workflow_dir = tmp_path / "workflow"
        workflow_dir.mkdir()

        (workflow_dir / "other_dir").mkdir()
        (workflow_dir / "bench_invalid").mkdir()
        (workflow_dir / "bench_00001").mkdir()  # 5 digits, not 4

        run_dir = next_run_dir(workflow_dir)

        assert run_dir.name == "bench_0000"


# =============================================================================
# Tests for write_run_files and environment capture
# =============================================================================


class TestWriteRunFiles:
    """Tests for writing run metadata files."""

    def test_writes_all_files(self, tmp_path: Path) -> None:
        """Should write meta.json, config.json, and README.md."""
        run_dir = tmp_path / "bench_0000"
        run_dir.mkdir()

        write_run_files(
            run_dir,
            meta={"created_at": "2024-01-01T00:00:00Z"},
            config={"ops": 10},
            readme_text="# Test Run\n",
        )

        with (run_dir / "meta.json").open() as f:
            assert json.load(f)["created_at"] == "2024-01-01T00:00:00Z"
        with (run_dir / "config.json").open() as f:
            assert json.load(f)["ops"] == 10
        assert "Test Run" in (run_dir / "README.md").read_text()


class TestEnvironment:
    """Tests for git and version capture."""

    def test_git_commit_string_or_none(self) -> None:
        result = try_get_git_commit()
        assert result is None or isinstance(result, str)

    def test_library_versions(self) -> None:
        versions = library_versions()

        assert set(versions) == {"python", "structlog", "loguru", "orjson"}
        assert versions["structlog"] != "missing"

    def test_run_meta_fields(self) -> None:
        meta = collect_run_meta(["runner", "--no-render"])

        assert meta["argv"] == ["runner", "--no-render"]
        assert meta["versions"] == library_versions()
        assert meta["created_at"].endswith("+00:00")
        assert set(meta["platform"]) == {
            "system",
            "release",
            "machine",
            "implementation",
            "cpu_count",
        }

    def test_run_meta_git_keys_together(self) -> None:
        meta = collect_run_meta([])

        assert ("git_commit" in meta) == ("git_dirty" in meta)
        assert json.loads(json.dumps(meta)) == meta


# =============================================================================
# Driver smoke test
# =============================================================================


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestRunnerMain:
    """Smoke tests for the benchmark driver."""

    ARGS = [
        "--set",
        "ops=300",
        "--set",
        "parallelism=2",
        "--set",
        "warmup_ops=20",
        "--set",
        "alloc_samples=30",
        "--log-level",
        "WARNING",
    ]

    def test_creates_artifacts(self, tmp_path: Path, reset_structlog) -> None:
        """Driver should run the full matrix and write every artifact."""
        workflow_dir = tmp_path / "workflow"

        exit_code = main(["--workflow-dir", str(workflow_dir), *self.ARGS])

        assert exit_code == 0
        run_dirs = list(workflow_dir.glob("bench_*"))
        assert len(run_dirs) == 1
        run_dir = run_dirs[0]

        for name in ("meta.json", "config.json", "README.md"):
            assert (run_dir / name).stat().st_size > 0

        artifacts = run_dir / "artifacts"
        with (artifacts / "results.csv").open() as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames == CSV_COLUMNS
            rows = list(reader)
        # 8 scenarios x 3 libraries
        assert len(rows) == 24
        assert all(r["status"] == "ok" for r in rows)
        assert all(r["ops"] == "300" for r in rows)

        with (artifacts / "summary.json").open() as f:
            summary = json.load(f)
        assert summary["number_of_pairs"] == 24
        assert summary["excluded"] == []

        with (artifacts / "checks.json").open() as f:
            checks = json.load(f)
        assert checks["passed"] is True

        report = (artifacts / "report.md").read_text()
        assert "### lot_of_fields" in report
        assert (artifacts / "plots" / "ns_per_op.png").exists()

        with (run_dir / "meta.json").open() as f:
            meta = json.load(f)
        assert meta["versions"]["loguru"] != "missing"
        assert meta["platform"]["cpu_count"] >= 1
        assert meta["argv"][0] == "runner"

    def test_no_render_and_selection(self, tmp_path: Path, reset_structlog) -> None:
        workflow_dir = tmp_path / "workflow"

        exit_code = main(
            [
                "--workflow-dir",
                str(workflow_dir),
                "--no-render",
                "--set",
                "scenarios=without_fields,no_fields_disabled",
                "--set",
                "adapters=hynek/structlog",
                *self.ARGS,
            ]
        )

        assert exit_code == 0
        artifacts = workflow_dir / "bench_0000" / "artifacts"
        assert not (artifacts / "report.md").exists()
        with (artifacts / "results.csv").open() as f:
            rows = list(csv.DictReader(f))
        assert [(r["scenario"], r["adapter"]) for r in rows] == [
            ("without_fields", "hynek/structlog"),
            ("no_fields_disabled", "hynek/structlog"),
        ]

    def test_config_file(self, tmp_path: Path, reset_structlog) -> None:
        config_path = tmp_path / "bench.json"
        config_path.write_text(
            json.dumps({"ops": 100, "scenarios": ["ten_fields"], "adapters": ["stdlib/logging"]})
        )

        exit_code = main(
            [
                "--workflow-dir",
                str(tmp_path / "workflow"),
                "--config",
                str(config_path),
                "--no-render",
                "--json-logs",
                "--set",
                "parallelism=1",
            ]
        )

        assert exit_code == 0
        with (tmp_path / "workflow" / "bench_0000" / "config.json").open() as f:
            saved = json.load(f)
        assert saved["ops"] == 100
        assert saved["adapters"] == ["stdlib/logging"]
