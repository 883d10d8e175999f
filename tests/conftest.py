"""
Shared fixtures and fakes for Laptop Tracker tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

import pytest

from laptop_tracker.core.config import AppConfig, IntuneConfig, KandjiConfig, TeamsConfig
from laptop_tracker.inventory.store import InMemoryNotifiedStore
from laptop_tracker.notifications.gate import NotificationGate
from laptop_tracker.notifications.models import Notification
from laptop_tracker.notifications.providers import NotificationProvider

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
YEAR = timedelta(days=365.25)


def years_ago(years: float, now: datetime = NOW) -> str:
    return (now - years * YEAR).isoformat()


class RecordingProvider(NotificationProvider):
    """Provider that records notifications instead of posting them."""

    def __init__(self, fail_serials=(), raise_serials=()):
        self.sent: List[Notification] = []
        self.attempts: List[str] = []
        self.fail_serials = set(fail_serials)
        self.raise_serials = set(raise_serials)

    def is_enabled(self) -> bool:
        return True

    def send(self, notification: Notification) -> bool:
        serial = dict(notification.facts)["Serial"]
        self.attempts.append(serial)
        if serial in self.raise_serials:
            raise RuntimeError(f"webhook down for {serial}")
        if serial in self.fail_serials:
            return False
        self.sent.append(notification)
        return True

    @property
    def sent_serials(self) -> List[str]:
        return [dict(n.facts)["Serial"] for n in self.sent]


class FakeVendorClient:
    """Stands in for KandjiClient / IntuneClient."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None):
        self.payload = payload if payload is not None else []
        self.error = error
        self.calls = 0
        self.closed = False

    def fetch_devices(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload

    def close(self) -> None:
        self.closed = True


def make_config(intune_enabled: bool = False, teams_enabled: bool = True) -> AppConfig:
    return AppConfig(
        kandji=KandjiConfig(subdomain="acme", api_token="kandji-token", region="eu"),
        intune=IntuneConfig(integration_enabled=intune_enabled),
        teams=TeamsConfig(
            webhook_url="https://dummy.webhook" if teams_enabled else "",
            notifications_enabled=teams_enabled,
        ),
    )


@pytest.fixture
def store():
    return InMemoryNotifiedStore()


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def gate(store, provider):
    return NotificationGate(store=store, provider=provider)
