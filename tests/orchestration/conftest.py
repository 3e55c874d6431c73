"""Shared fixtures for runner tests."""

import threading

import pytest

from essentials.core.result import Ok


class Recorder:
    """Collects the order in which step functions run and what they saw."""

    def __init__(self):
        self._lock = threading.Lock()
        self.calls: list[str] = []
        self.seen: dict[str, dict] = {}

    def step(self, name, value=None):
        def fn(changes):
            with self._lock:
                self.calls.append(name)
                self.seen[name] = dict(changes)
            return Ok(name if value is None else value)

        return fn


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def gate():
    """An Event released after the test, so abandoned async tasks always finish."""
    event = threading.Event()
    yield event
    event.set()
