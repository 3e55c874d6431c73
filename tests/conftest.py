"""
Shared pytest fixtures and configuration for essentials tests.

This module provides:
- Settings cache reset so environment overrides are honoured per test
- Logging context cleanup for test isolation
"""

import os
from pathlib import Path
from typing import Generator

import pytest

from essentials.core.logging import clear_context
from essentials.core.settings import reset_settings


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "concurrency"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_fixture(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Drop cached settings and any ``ESSENTIALS_*`` variables around each test.

    A stray ``.env`` in the working directory must not leak into tests either.
    """
    for key in list(os.environ):
        if key.startswith("ESSENTIALS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(Path(__file__).parent)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def clean_log_context_fixture() -> Generator[None, None, None]:
    clear_context()
    yield
    clear_context()
