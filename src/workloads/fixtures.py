"""Shared synthetic input data for every logging scenario.

The fixture set is built once per process and passed by reference into every
scenario run, so all adapters log the very same objects and the measured
differences come from the loggers, not from building their input.

Field selections hand adapters read-only mappings over those objects:
- ten_fields: one key per fixture category (ten keys)
- scalar_fields: four short string fields
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from core.types import FixtureError, FixtureSet, SampleUser

__all__ = [
    "TEN_FIELD_KEYS",
    "build_fixture_set",
    "ten_fields",
    "scalar_fields",
    "fixture_fingerprint",
]

TEN_FIELD_KEYS = (
    "int",
    "ints",
    "string",
    "strings",
    "time",
    "times",
    "user1",
    "user2",
    "users",
    "error",
)

_SCALAR_FIELDS: Mapping[str, Any] = MappingProxyType(
    {
        "Hello": "world",
        "Hello2": "world",
        "Hello3": "world",
        "Hello4": "world",
    }
)


def build_fixture_set(now: datetime | None = None) -> FixtureSet:
    """Build the process-wide fixture set.

    Args:
        now: Timestamp to use, the current UTC time by default.

    Returns:
        A frozen FixtureSet whose containers are all tuples.

    Example:
        >>> fixtures = build_fixture_set()
        >>> fixtures.ints
        (1, 2, 3, 4, 5, 6, 7, 8, 9, 10)
    """
    if now is None:
        now = datetime.now(UTC)
    ints = tuple(range(1, 11))
    strings = tuple(str(i) for i in ints)
    times = (now,)
    return FixtureSet(
        int_value=ints[0],
        ints=ints,
        string_value=strings[0],
        strings=strings,
        time_value=times[0],
        times=times,
        user=SampleUser(username="lol", name="lol2", phone="lollol"),
        users=tuple(SampleUser() for _ in range(10)),
        error=FixtureError("lolerror"),
    )


def ten_fields(fixtures: FixtureSet) -> Mapping[str, Any]:
    """Select one field per fixture category, the user record twice."""
    return MappingProxyType(
        {
            "int": fixtures.int_value,
            "ints": fixtures.ints,
            "string": fixtures.string_value,
            "strings": fixtures.strings,
            "time": fixtures.time_value,
            "times": fixtures.times,
            "user1": fixtures.user,
            "user2": fixtures.user,
            "users": fixtures.users,
            "error": fixtures.error,
        }
    )


def scalar_fields(fixtures: FixtureSet) -> Mapping[str, Any]:
    """Four constant string fields; the fixture set is not consulted."""
    return _SCALAR_FIELDS


def fixture_fingerprint(fixtures: FixtureSet) -> tuple[Any, ...]:
    """Capture identity and content of every fixture value.

    Two fingerprints compare equal only if no fixture object was replaced and
    no value changed, so comparing one taken before a run with one taken
    after proves the run left the fixtures alone.
    """
    return (
        id(fixtures),
        fixtures.int_value,
        id(fixtures.ints),
        fixtures.ints,
        fixtures.string_value,
        id(fixtures.strings),
        fixtures.strings,
        fixtures.time_value,
        id(fixtures.times),
        fixtures.times,
        id(fixtures.user),
        fixtures.user,
        id(fixtures.users),
        tuple(id(u) for u in fixtures.users),
        fixtures.users,
        id(fixtures.error),
        fixtures.error.args,
    )
