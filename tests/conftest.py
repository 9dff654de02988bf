"""Shared fixtures for accessibility monitoring tests."""

from datetime import datetime, timezone

import pytest

from a11y_monitor.history_store import HistoryStore, MemoryStorageBackend
from a11y_monitor.monitoring_service import AccessibilityMonitoringService


FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now=FIXED_NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


def make_violation(impact="minor", tags=(), html='<div class="app"></div>',
                   target=("div",), rule_id="rule"):
    """Build a raw axe violation dictionary."""
    violation = {
        "id": rule_id,
        "tags": list(tags),
        "description": f"{rule_id} description",
        "help": f"Fix {rule_id}",
        "helpUrl": f"https://dequeuniversity.com/rules/axe/4.8/{rule_id}",
        "nodes": [{"html": html, "target": list(target), "failureSummary": "Fix it"}],
    }
    if impact is not None:
        violation["impact"] = impact
    return violation


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return MemoryStorageBackend()


@pytest.fixture
def store(backend, clock):
    return HistoryStore(backend=backend, clock=clock)


@pytest.fixture
def service(store, clock):
    return AccessibilityMonitoringService(history=store, clock=clock)
