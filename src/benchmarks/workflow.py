"""Workflow directory management for benchmark runs.

This module provides utilities for creating run directories with consistent
naming and for recording the environment a run was measured in.
"""

from __future__ import annotations

import json
import os
import platform
import re
import subprocess
from collections.abc import Sequence
from datetime import UTC, datetime
from importlib import metadata
from pathlib import Path
from typing import Any

__all__ = [
    "LIBRARIES_UNDER_TEST",
    "next_run_dir",
    "write_run_files",
    "try_get_git_commit",
    "library_versions",
    "collect_run_meta",
]

# Distribution names whose versions are recorded with every run
LIBRARIES_UNDER_TEST = ("structlog", "loguru", "orjson")


def next_run_dir(workflow_dir: Path) -> Path:
    """Create the next run directory with zero-padded naming.

    Creates directories:
    - workflow_dir/bench_XXXX/
    - workflow_dir/bench_XXXX/artifacts/

    Policy: next index after the maximum existing index.

    Args:
        workflow_dir: Parent directory for all runs.

    Returns:
        Path to the newly created run directory.

    Example:
        >>> next_run_dir(Path("workflow"))
        PosixPath('workflow/bench_0000')
    """
    workflow_dir.mkdir(parents=True, exist_ok=True)

    pattern = re.compile(r"^bench_(\d{4})$")
    max_index = -1
    for entry in workflow_dir.iterdir():
        if entry.is_dir():
            match = pattern.match(entry.name)
            if match:
                max_index = max(max_index, int(match.group(1)))

    run_dir = workflow_dir / f"bench_{max_index + 1:04d}"
    run_dir.mkdir(parents=True, exist_ok=True)
    (run_dir / "artifacts").mkdir(exist_ok=True)
    return run_dir


def write_run_files(
    run_dir: Path,
    *,
    meta: dict[str, Any],
    config: dict[str, Any],
    readme_text: str,
) -> None:
    """Write run metadata files.

    Writes:
    - run_dir/meta.json
    - run_dir/config.json
    - run_dir/README.md
    """
    with (run_dir / "meta.json").open("w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2, sort_keys=True)

    with (run_dir / "config.json").open("w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, sort_keys=True)

    with (run_dir / "README.md").open("w", encoding="utf-8") as f:
        f.write(readme_text)


def _git(*args: str) -> str | None:
    try:
        result = subprocess.run(
            ["git", *args], capture_output=True, text=True, timeout=5, check=False
        )
    except (subprocess.TimeoutExpired, OSError):
        return None
    return result.stdout.strip() if result.returncode == 0 else None


def try_get_git_commit() -> str | None:
    """Return the checked-out commit hash, or None outside a git checkout."""
    return _git("rev-parse", "HEAD") or None


def library_versions() -> dict[str, str]:
    """Return interpreter and library versions; missing distributions map to "missing"."""
    versions = {"python": platform.python_version()}
    for name in LIBRARIES_UNDER_TEST:
        try:
            versions[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            versions[name] = "missing"
    return versions


def collect_run_meta(argv: Sequence[str]) -> dict[str, Any]:
    """Describe the environment a run was measured in.

    The result is written to ``meta.json`` and carries:
    - created_at: UTC timestamp in ISO 8601
    - argv: the command line that started the run
    - versions: interpreter and library versions, see ``library_versions``
    - platform: host description; timings only compare on the same host
    - git_commit and git_dirty: present only inside a git checkout
    """
    meta: dict[str, Any] = {
        "created_at": datetime.now(UTC).isoformat(),
        "argv": list(argv),
        "versions": library_versions(),
        "platform": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
            "implementation": platform.python_implementation(),
            "cpu_count": os.cpu_count(),
        },
    }
    commit = try_get_git_commit()
    if commit:
        meta["git_commit"] = commit
        meta["git_dirty"] = bool(_git("status", "--porcelain"))
    return meta
