"""Testing fixtures – pytest fixtures for stores, clocks and scopes.

Enable in ``conftest.py``::

    pytest_plugins = ["governance_core.testing.fixtures"]
"""
from __future__ import annotations

from typing import Iterator

import pytest

from governance_core.application.bootstrap import GovernanceScope
from governance_core.application.events import EventBus
from governance_core.application.notifications import InMemoryNotificationSender
from governance_core.application.store import InMemoryDocumentStore
from governance_core.config import GovernanceSettings
from governance_core.observability.metrics import InMemoryMetrics
from governance_core.testing.generators import StepClock


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def step_clock() -> StepClock:
    """Clock starting at 2026-01-01 UTC, one millisecond per reading."""
    return StepClock(milliseconds=1)


@pytest.fixture
def metrics() -> InMemoryMetrics:
    return InMemoryMetrics()


@pytest.fixture
def organization_bus(metrics: InMemoryMetrics, step_clock: StepClock) -> EventBus:
    return EventBus("test:organization", metrics=metrics, clock=step_clock)


@pytest.fixture
def notification_sender() -> InMemoryNotificationSender:
    return InMemoryNotificationSender()


@pytest.fixture
def governance_scope(
    document_store: InMemoryDocumentStore,
    metrics: InMemoryMetrics,
    notification_sender: InMemoryNotificationSender,
    step_clock: StepClock,
) -> Iterator[GovernanceScope]:
    """A wired scope named ``test``; closed after the test."""
    scope = GovernanceScope.open(
        document_store,
        GovernanceSettings(scope_id="test"),
        metrics=metrics,
        sender=notification_sender,
        clock=step_clock,
    )
    yield scope
    scope.close()


__all__ = [
    "document_store",
    "governance_scope",
    "metrics",
    "notification_sender",
    "organization_bus",
    "step_clock",
]
