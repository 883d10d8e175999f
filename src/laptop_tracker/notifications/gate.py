"""
Notification gate - one replacement notification per device serial.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from laptop_tracker.inventory.age import classify, utc_now
from laptop_tracker.inventory.models import UNKNOWN_SERIAL, AgeCategory, DeviceRecord
from laptop_tracker.inventory.store import NotifiedStore, NotifiedStoreError
from laptop_tracker.notifications.formatters import device_replacement_notification
from laptop_tracker.notifications.providers import NotificationProvider

logger = logging.getLogger(__name__)


class NotificationGate:
    """
    Sends a replacement notification exactly once per serial.

    A serial moves from unnotified to notified after a successful send and
    never moves back. The notified set is loaded from the store on every
    poll and merged with the serials this gate has already notified, so a
    failed write is retried on the next poll.
    """

    def __init__(self, store: NotifiedStore, provider: NotificationProvider):
        """
        Initialize notification gate.

        Args:
            store: Notified-set storage
            provider: Provider used to deliver notifications
        """
        self.store = store
        self.provider = provider
        self._notified: List[str] = []

    @property
    def notified(self) -> List[str]:
        """Serials notified by this gate or loaded from the store."""
        return list(self._notified)

    def _load(self) -> List[str]:
        try:
            stored = self.store.load()
        except NotifiedStoreError as e:
            logger.error(f"Failed to load notified serials: {e}")
            stored = []

        merged = list(dict.fromkeys(stored))
        known = set(merged)
        for serial in self._notified:
            if serial not in known:
                merged.append(serial)
                known.add(serial)
        self._notified = merged
        return stored

    def _send(self, device: DeviceRecord, age_years: float) -> bool:
        notification = device_replacement_notification(device, age_years)
        try:
            return bool(self.provider.send(notification))
        except Exception as e:
            logger.error(
                f"Failed to send notification for {device.serial_number}: {e}",
                exc_info=True
            )
            return False

    def process(
        self, devices: Iterable[DeviceRecord], now: Optional[datetime] = None
    ) -> List[str]:
        """
        Notify for every device that newly needs replacement.

        Args:
            devices: Normalized devices from one poll
            now: Reference time for age calculation

        Returns:
            Serials notified during this call
        """
        now = now or utc_now()
        stored = self._load()
        seen = set(self._notified)
        newly_notified: List[str] = []

        for device in devices:
            serial = device.serial_number
            if not serial or serial == UNKNOWN_SERIAL or serial in seen:
                continue

            age_years, category = classify(device, now)
            if category is None:
                logger.warning(
                    f"Invalid enrollment date for device {serial}, "
                    "skipping notification check"
                )
                continue
            if category is not AgeCategory.DANGER:
                continue

            # One attempt per serial per poll, delivered or not
            seen.add(serial)
            if not self._send(device, age_years):
                logger.error(f"Notification for device {serial} was not delivered")
                continue

            self._notified.append(serial)
            newly_notified.append(serial)
            logger.info(f"Replacement notification sent for device: {serial}")

        if len(self._notified) > len(set(stored)):
            try:
                self.store.save(self._notified)
            except NotifiedStoreError as e:
                logger.error(f"Failed to save notified serials: {e}")

        return newly_notified
