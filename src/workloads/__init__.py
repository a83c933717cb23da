"""Workloads module for the logging benchmark harness.

This package contains the inputs every adapter is driven with:

- fixtures: the shared, immutable fixture set and its field selections
- scenarios: the named scenario definitions
"""

from __future__ import annotations

from workloads.fixtures import (
    TEN_FIELD_KEYS,
    build_fixture_set,
    fixture_fingerprint,
    scalar_fields,
    ten_fields,
)
from workloads.scenarios import DEFAULT_SCENARIOS, MESSAGE

__all__ = [
    # Fixtures
    "TEN_FIELD_KEYS",
    "build_fixture_set",
    "fixture_fingerprint",
    "scalar_fields",
    "ten_fields",
    # Scenarios
    "DEFAULT_SCENARIOS",
    "MESSAGE",
]
