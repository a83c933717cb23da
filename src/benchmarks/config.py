"""Config loading for benchmark runs.

A run is configured from an optional JSON file plus ``key=value`` overrides,
e.g. ``ops=20000`` or ``adapters=["hynek/structlog"]``. Values are decoded
as JSON when possible and kept as strings otherwise.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from core.types import BenchConfig

__all__ = ["load_json", "apply_overrides", "config_from_dict", "load_config"]

_INT_KEYS = ("ops", "parallelism", "warmup_ops", "alloc_samples")
_NAME_KEYS = ("scenarios", "adapters")


def load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a JSON object: {path}")
    return data


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def apply_overrides(config: dict[str, Any], overrides: Sequence[str]) -> dict[str, Any]:
    """Return a copy of config with ``key=value`` overrides applied.

    Raises:
        ValueError: If an override has no ``=``.
    """
    result = dict(config)
    for item in overrides:
        if "=" not in item:
            raise ValueError(f"Override must be key=value, got: {item}")
        key, raw_val = item.split("=", 1)
        result[key.strip()] = _parse_value(raw_val)
    return result


def _as_names(key: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [v for v in value.split(",") if v]
    if not isinstance(value, list | tuple) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{key} must be a list of names, got: {value!r}")
    return tuple(v.strip() for v in value)


def config_from_dict(data: dict[str, Any]) -> BenchConfig:
    """Validate a plain dictionary and build a BenchConfig.

    Raises:
        ValueError: On unknown keys or values of the wrong type or range.
    """
    known = {f.name for f in dataclasses.fields(BenchConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key in _INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{key} must be an integer, got: {value!r}")
            kwargs[key] = value
        elif key in _NAME_KEYS:
            kwargs[key] = _as_names(key, value)
        else:
            if isinstance(value, bool):
                raise ValueError(f"{key} must be a number, got: {value!r}")
            try:
                kwargs[key] = float(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{key} must be a number, got: {value!r}") from exc
    return BenchConfig(**kwargs)


def load_config(path: Path | None = None, overrides: Sequence[str] = ()) -> BenchConfig:
    """Load a BenchConfig from an optional JSON file and overrides."""
    data = load_json(path) if path is not None else {}
    return config_from_dict(apply_overrides(data, overrides))
