"""
Shared pytest fixtures and configuration for schema-spine tests.

This module provides:
- Registry cleanup fixtures for test isolation
- Small example schemas used across test modules
- A deterministic counter computation for sharing tests
"""

from pathlib import Path
from typing import Generator

import pytest
import structlog

from schemaspine.core.datatypes import clear_type_registry
from schemaspine.core.invariants import reset_invariants
from schemaspine.core.kinds import Bool, Symbol
from schemaspine.core.registry import clear_registry
from schemaspine.core.schema import Schema
from schemaspine.core.settings import clear_settings_cache


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Registry Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_registries_fixture() -> Generator[None, None, None]:
    """
    Reset every module-level registry before and after each test.

    Schema, type and invariant registries plus the settings cache are all
    process-wide; no test may leak a registration into another.
    """
    clear_registry()
    clear_type_registry()
    reset_invariants()
    clear_settings_cache()
    yield
    clear_registry()
    clear_type_registry()
    reset_invariants()
    clear_settings_cache()
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_schemaspine_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SCHEMASPINE_* variables from the host out of settings tests."""
    import os

    for key in list(os.environ):
        if key.startswith("SCHEMASPINE_"):
            monkeypatch.delenv(key)


# =============================================================================
# Sample Schemas
# =============================================================================


@pytest.fixture
def base_schema() -> Schema:
    """``a`` (symbol, default "lit") and ``b`` (boolean, required)."""
    return Schema.from_declarations(
        [
            ("a", {"kind": Symbol(), "default": "lit"}),
            ("b", {"kind": Bool(), "required": True}),
        ]
    )


class Counter:
    """Zero-argument computation returning 1, 2, 3, ... on successive calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.calls


@pytest.fixture
def counter() -> Counter:
    return Counter()
