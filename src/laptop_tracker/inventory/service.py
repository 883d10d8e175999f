"""
Inventory service - fetch, normalize and notify for each vendor.
"""

import logging
from datetime import datetime
from typing import List, Optional

from laptop_tracker.core.config import AppConfig
from laptop_tracker.notifications.gate import NotificationGate
from laptop_tracker.notifications.providers import TeamsWebhookProvider
from laptop_tracker.vendors.errors import IntegrationDisabledError
from laptop_tracker.vendors.intune import IntuneClient
from laptop_tracker.vendors.kandji import KandjiClient

from .models import DeviceRecord
from .normalizer import normalize_devices, normalize_intune_device, normalize_kandji_device
from .store import JsonFileNotifiedStore

logger = logging.getLogger(__name__)


class DeviceInventoryService:
    """
    Aggregates device inventory from the MDM vendors.

    Each call performs its own sequential pass:
    1. Fetches raw records from the vendor
    2. Normalizes them into DeviceRecord
    3. Runs the notification gate (when configured)
    """

    def __init__(
        self,
        config: AppConfig,
        kandji: KandjiClient,
        intune: Optional[IntuneClient] = None,
        gate: Optional[NotificationGate] = None,
    ):
        """
        Initialize inventory service.

        Args:
            config: Application configuration
            kandji: Kandji client
            intune: Intune client (required only when Intune is enabled)
            gate: Notification gate, None to disable notifications
        """
        self.config = config
        self.kandji = kandji
        self.intune = intune
        self.gate = gate

    def _notify(self, devices: List[DeviceRecord], now: Optional[datetime]) -> None:
        if self.gate is None:
            return
        notified = self.gate.process(devices, now=now)
        if notified:
            logger.info(f"Sent {len(notified)} replacement notifications")

    def mac_devices(self, now: Optional[datetime] = None) -> List[DeviceRecord]:
        """
        Fetch macOS devices from Kandji.

        Returns:
            Normalized devices

        Raises:
            VendorError: If Kandji cannot be queried
        """
        payload = self.kandji.fetch_devices()
        devices = normalize_devices(payload, normalize_kandji_device)
        self._notify(devices, now)
        logger.info(f"Successfully fetched {len(devices)} devices")
        return devices

    def windows_devices(self, now: Optional[datetime] = None) -> List[DeviceRecord]:
        """
        Fetch Windows devices from Intune.

        Returns:
            Normalized devices

        Raises:
            IntegrationDisabledError: If the Intune integration is switched off
            VendorError: If Graph cannot be queried
        """
        if not self.config.intune.integration_enabled or self.intune is None:
            raise IntegrationDisabledError("Intune integration not enabled")

        raw_devices = self.intune.fetch_devices()
        devices = normalize_devices(raw_devices, normalize_intune_device)
        self._notify(devices, now)
        logger.info(f"Successfully fetched {len(devices)} Windows devices")
        return devices

    def close(self) -> None:
        """Close vendor HTTP clients."""
        self.kandji.close()
        if self.intune is not None:
            self.intune.close()


def build_service(config: AppConfig) -> DeviceInventoryService:
    """
    Wire up the service from configuration.

    Args:
        config: Application configuration

    Returns:
        Configured DeviceInventoryService
    """
    kandji = KandjiClient(
        devices_url=config.kandji.devices_url,
        api_token=config.kandji.api_token,
        timeout=config.vendor_timeout_seconds,
    )

    intune = None
    if config.intune.integration_enabled:
        intune = IntuneClient(
            tenant_id=config.intune.tenant_id,
            client_id=config.intune.client_id,
            client_secret=config.intune.client_secret,
            graph_endpoint=config.intune.graph_api_endpoint,
            scope=config.intune.api_scopes,
            timeout=config.vendor_timeout_seconds,
        )

    gate = None
    if config.teams.active:
        gate = NotificationGate(
            store=JsonFileNotifiedStore(config.notified_file),
            provider=TeamsWebhookProvider(config.teams.webhook_url),
        )
    else:
        logger.info("Teams notifications disabled")

    return DeviceInventoryService(config=config, kandji=kandji, intune=intune, gate=gate)
