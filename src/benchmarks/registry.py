"""Registry for logger adapters and scenarios.

This module provides the factory layer the matrix runner iterates over, making
it easy to put a new library or scenario under benchmark.

Adding a new library:
1. Implement the LoggerAdapter protocol (see core.protocols)
2. Register a factory here with register_adapter(name, factory)
3. Every registered scenario now runs against it

Adding a new scenario:
1. Define a Scenario (see workloads.scenarios)
2. Register it here with register_scenario(scenario)
3. It runs against every registered adapter

Example:
    >>> from benchmarks.registry import get_adapter_factory, get_scenario
    >>> factory = get_adapter_factory("hynek/structlog")
    >>> scenario = get_scenario("ten_fields_context")
"""

from __future__ import annotations

from adapters.loguru_adapter import build_loguru_adapter
from adapters.stdlib_adapter import build_stdlib_adapter
from adapters.structlog_adapter import build_structlog_adapter
from core.protocols import AdapterFactory
from core.types import Scenario
from workloads.scenarios import DEFAULT_SCENARIOS

__all__ = [
    "ADAPTERS",
    "SCENARIOS",
    "register_adapter",
    "get_adapter_factory",
    "adapter_names",
    "register_scenario",
    "get_scenario",
    "scenario_names",
]

# Global registries, iterated in registration order
ADAPTERS: dict[str, AdapterFactory] = {}
SCENARIOS: dict[str, Scenario] = {}


def register_adapter(name: str, factory: AdapterFactory) -> None:
    """Register an adapter factory.

    Args:
        name: Unique library name, shown in reports.
        factory: Callable taking (sink, min_level) and returning a LoggerAdapter.

    Raises:
        ValueError: If name is already registered.
    """
    if name in ADAPTERS:
        raise ValueError(f"Adapter '{name}' is already registered")
    ADAPTERS[name] = factory


def get_adapter_factory(name: str) -> AdapterFactory:
    """Get an adapter factory from the registry.

    Raises:
        KeyError: If name is not registered.
    """
    if name not in ADAPTERS:
        available = ", ".join(sorted(ADAPTERS.keys()))
        raise KeyError(f"Unknown adapter '{name}'. Available: {available}")
    return ADAPTERS[name]


def adapter_names(selected: tuple[str, ...] = ()) -> list[str]:
    """Return the adapters to run, all of them when nothing is selected.

    Raises:
        KeyError: If a selected name is not registered.
    """
    if not selected:
        return list(ADAPTERS)
    for name in selected:
        get_adapter_factory(name)
    return list(selected)


def register_scenario(scenario: Scenario) -> None:
    """Register a scenario under its name.

    Raises:
        ValueError: If the name is taken or the baseline is unknown.
    """
    if scenario.name in SCENARIOS:
        raise ValueError(f"Scenario '{scenario.name}' is already registered")
    if scenario.baseline is not None and scenario.baseline not in SCENARIOS:
        raise ValueError(
            f"Scenario '{scenario.name}' has unknown baseline '{scenario.baseline}'"
        )
    SCENARIOS[scenario.name] = scenario


def get_scenario(name: str) -> Scenario:
    """Get a scenario from the registry.

    Raises:
        KeyError: If name is not registered.
    """
    if name not in SCENARIOS:
        available = ", ".join(sorted(SCENARIOS.keys()))
        raise KeyError(f"Unknown scenario '{name}'. Available: {available}")
    return SCENARIOS[name]


def scenario_names(selected: tuple[str, ...] = ()) -> list[str]:
    """Return the scenarios to run, all of them when nothing is selected.

    Raises:
        KeyError: If a selected name is not registered.
    """
    if not selected:
        return list(SCENARIOS)
    for name in selected:
        get_scenario(name)
    return list(selected)


# =============================================================================
# Initial registrations
# =============================================================================

register_adapter("stdlib/logging", build_stdlib_adapter)
register_adapter("hynek/structlog", build_structlog_adapter)
register_adapter("Delgan/loguru", build_loguru_adapter)

for _scenario in DEFAULT_SCENARIOS:
    register_scenario(_scenario)
