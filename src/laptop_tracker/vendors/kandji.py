"""
Kandji API client for macOS device inventory.
"""

import logging
from typing import Any, Optional

import httpx

from .errors import VendorTransportError

logger = logging.getLogger(__name__)


class KandjiClient:
    """
    Client for the Kandji device list API.

    Usage:
        client = KandjiClient(
            devices_url="https://acme.api.eu.kandji.io/api/v1/devices",
            api_token="...",
        )
        payload = client.fetch_devices()
    """

    def __init__(
        self,
        devices_url: str,
        api_token: str,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize Kandji client.

        Args:
            devices_url: Full URL of the device list endpoint
            api_token: Kandji API bearer token
            timeout: HTTP request timeout in seconds
            client: Pre-configured httpx client (optional)
        """
        self.devices_url = devices_url
        self.api_token = api_token
        self.timeout = timeout
        self.client = client or httpx.Client(timeout=self.timeout)

    def fetch_devices(self) -> Any:
        """
        Fetch the raw device list.

        Returns:
            Decoded JSON body, as Kandji returned it

        Raises:
            VendorTransportError: On network error, non-2xx status or invalid JSON
        """
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

        logger.info("Fetching devices from Kandji API...")
        try:
            response = self.client.get(self.devices_url, headers=headers)
        except httpx.HTTPError as e:
            raise VendorTransportError(f"Request failed: {e}") from e

        if not response.is_success:
            raise VendorTransportError(
                f"Kandji API returned status {response.status_code}: {response.text}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise VendorTransportError("Invalid JSON response from Kandji API") from e

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()
