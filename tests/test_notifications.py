"""
Tests for the notification gate, formatter and Teams provider.
"""

import logging

from laptop_tracker.inventory.models import DeviceRecord, DeviceUser
from laptop_tracker.inventory.store import InMemoryNotifiedStore, NotifiedStoreError
from laptop_tracker.notifications.formatters import device_replacement_notification
from laptop_tracker.notifications.gate import NotificationGate
from laptop_tracker.notifications.providers import TeamsWebhookProvider

from conftest import NOW, RecordingProvider, years_ago


def old_device(serial: str = "OLD123", years: float = 5) -> DeviceRecord:
    return DeviceRecord(serial_number=serial, first_enrollment=years_ago(years))


class FlakyStore(InMemoryNotifiedStore):
    """Store whose first N saves (or loads) fail."""

    def __init__(self, failing_saves: int = 0, failing_loads: int = 0):
        super().__init__()
        self.failing_saves = failing_saves
        self.failing_loads = failing_loads
        self.save_attempts = 0

    def load(self):
        if self.failing_loads:
            self.failing_loads -= 1
            raise NotifiedStoreError("disk on fire")
        return super().load()

    def save(self, serials):
        self.save_attempts += 1
        if self.failing_saves:
            self.failing_saves -= 1
            raise NotifiedStoreError("read-only filesystem")
        super().save(serials)


class TestNotificationGate:
    """Test one-time replacement notifications."""

    def test_old_device_notified_once(self, gate, store, provider):
        device = old_device("OLD123")

        assert gate.process([device], now=NOW) == ["OLD123"]
        assert provider.sent_serials == ["OLD123"]
        assert store.serials == ["OLD123"]
        assert store.save_count == 1

        assert gate.process([device], now=NOW) == []
        assert provider.sent_serials == ["OLD123"]
        assert store.save_count == 1

    def test_repeated_polls_never_resend(self, store, provider):
        store.serials = ["OLD123"]
        device = old_device("OLD123")

        for _ in range(5):
            # A fresh gate per poll, as after a restart
            NotificationGate(store=store, provider=provider).process([device], now=NOW)

        assert provider.sent == []
        assert store.save_count == 0

    def test_duplicate_serials_in_one_poll(self, gate, store, provider):
        devices = [old_device("DUP1"), old_device("DUP1", years=6), old_device("DUP2")]

        gate.process(devices, now=NOW)

        assert provider.sent_serials == ["DUP1", "DUP2"]
        assert store.serials == ["DUP1", "DUP2"]
        assert store.save_count == 1

    def test_duplicate_serials_single_attempt_when_send_fails(self, store):
        provider = RecordingProvider(raise_serials={"DUP1"})
        gate = NotificationGate(store=store, provider=provider)
        device = old_device("DUP1")

        assert gate.process([device, device, device], now=NOW) == []
        assert provider.attempts == ["DUP1"]
        assert store.save_count == 0

        # Still eligible on the next poll
        provider.raise_serials.clear()
        assert gate.process([device, device], now=NOW) == ["DUP1"]
        assert provider.attempts == ["DUP1", "DUP1"]

    def test_only_danger_devices_notified(self, gate, provider, store):
        devices = [
            DeviceRecord(serial_number="NEW", first_enrollment=years_ago(1)),
            DeviceRecord(serial_number="MID", first_enrollment=years_ago(3.5)),
            DeviceRecord(serial_number="EDGE", first_enrollment=years_ago(4)),
        ]

        gate.process(devices, now=NOW)

        assert provider.sent_serials == ["EDGE"]
        assert store.save_count == 1

    def test_no_save_without_new_serials(self, gate, store):
        gate.process([DeviceRecord(serial_number="NEW", first_enrollment=years_ago(1))], now=NOW)
        assert store.save_count == 0

    def test_unparseable_date_excluded(self, gate, provider, caplog):
        device = DeviceRecord(serial_number="BAD", first_enrollment="31/02/2019")

        with caplog.at_level(logging.WARNING, logger="laptop_tracker.notifications.gate"):
            assert gate.process([device], now=NOW) == []

        assert provider.sent == []
        assert "Invalid enrollment date for device BAD" in caplog.text

    def test_missing_serial_skipped(self, gate, provider):
        devices = [
            DeviceRecord(serial_number="", first_enrollment=years_ago(6)),
            DeviceRecord(first_enrollment=years_ago(6)),
        ]
        gate.process(devices, now=NOW)
        assert provider.sent == []

    def test_send_failure_does_not_block_others(self, store):
        provider = RecordingProvider(fail_serials={"FAIL1"}, raise_serials={"BOOM"})
        gate = NotificationGate(store=store, provider=provider)

        notified = gate.process(
            [old_device("FAIL1"), old_device("BOOM"), old_device("OK1")], now=NOW
        )

        assert notified == ["OK1"]
        assert store.serials == ["OK1"]

    def test_failed_send_retried_next_poll(self, store):
        provider = RecordingProvider(fail_serials={"RETRY"})
        gate = NotificationGate(store=store, provider=provider)
        gate.process([old_device("RETRY")], now=NOW)
        assert store.serials == []

        provider.fail_serials.clear()
        gate.process([old_device("RETRY")], now=NOW)
        assert provider.sent_serials == ["RETRY"]
        assert store.serials == ["RETRY"]

    def test_save_failure_is_retried_without_resend(self, provider):
        store = FlakyStore(failing_saves=1)
        gate = NotificationGate(store=store, provider=provider)
        device = old_device("OLD123")

        assert gate.process([device], now=NOW) == ["OLD123"]
        assert store.serials == []
        assert gate.notified == ["OLD123"]

        assert gate.process([device], now=NOW) == []
        assert provider.sent_serials == ["OLD123"]
        assert store.serials == ["OLD123"]
        assert store.save_attempts == 2

    def test_load_failure_treated_as_empty(self, provider):
        store = FlakyStore(failing_loads=1)
        gate = NotificationGate(store=store, provider=provider)

        assert gate.process([old_device("OLD123")], now=NOW) == ["OLD123"]
        assert store.serials == ["OLD123"]

    def test_serials_are_never_removed(self, gate, store):
        gate.process([old_device("OLD123")], now=NOW)
        # Enrollment date corrected so the device is no longer old
        corrected = DeviceRecord(serial_number="OLD123", first_enrollment=years_ago(1))
        gate.process([corrected, old_device("OLD456")], now=NOW)

        assert store.serials == ["OLD123", "OLD456"]


class TestFormatter:
    """Test the replacement notification content."""

    def test_message_card(self):
        device = DeviceRecord(
            device_name="MBP-JDOE",
            user=DeviceUser(name="Jane Doe", email="jane@example.com"),
            model="MacBook Pro",
            serial_number="C02XK1",
            first_enrollment="2019-09-01T00:00:00Z",
            platform="Mac",
        )
        card = device_replacement_notification(device, age_years=5.75).to_message_card()

        assert set(card) == {"@type", "@context", "summary", "themeColor", "title", "sections"}
        assert card["@type"] == "MessageCard"
        assert card["title"] == "Device Needs Replacement"
        assert card["themeColor"] == "FF9900"
        section = card["sections"][0]
        assert "MBP-JDOE" in section["activityTitle"]
        facts = {f["name"]: f["value"] for f in section["facts"]}
        assert facts["User"] == "Jane Doe"
        assert facts["Model"] == "MacBook Pro"
        assert facts["Serial"] == "C02XK1"
        assert facts["First Enrollment"] == "2019-09-01T00:00:00Z"
        assert facts["Age"] == "5.8 years"


class FakeResponse:
    def __init__(self, status_code: int = 200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise RuntimeError(f"HTTP {self.status_code}")


class TestTeamsWebhookProvider:
    """Test posting to the Teams webhook."""

    def test_posts_message_card(self, monkeypatch):
        calls = []

        def fake_post(url, json=None, headers=None, timeout=None):
            calls.append((url, json, timeout))
            return FakeResponse(200)

        monkeypatch.setattr("laptop_tracker.notifications.providers.requests.post", fake_post)
        provider = TeamsWebhookProvider("https://dummy.webhook", timeout=5)
        notification = device_replacement_notification(old_device("OLD123"))

        assert provider.send(notification) is True
        url, body, timeout = calls[0]
        assert url == "https://dummy.webhook"
        assert body["@type"] == "MessageCard"
        assert timeout == 5

    def test_http_error_returns_false(self, monkeypatch):
        monkeypatch.setattr(
            "laptop_tracker.notifications.providers.requests.post",
            lambda *args, **kwargs: FakeResponse(500),
        )
        provider = TeamsWebhookProvider("https://dummy.webhook")
        assert provider.send(device_replacement_notification(old_device())) is False

    def test_disabled_without_url(self):
        provider = TeamsWebhookProvider("")
        assert provider.is_enabled() is False
        assert provider.send(device_replacement_notification(old_device())) is False
