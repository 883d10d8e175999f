"""
Microsoft Intune client for Windows device inventory.

Authenticates with the OAuth client credentials grant and reads
``deviceManagement/managedDevices`` from Microsoft Graph.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .errors import IntuneApiError, IntuneAuthError, VendorTransportError

logger = logging.getLogger(__name__)

LOGIN_AUTHORITY = "https://login.microsoftonline.com"
WINDOWS_FILTER = "operatingSystem eq 'Windows'"


class IntuneClient:
    """
    Client for Intune managed devices via Microsoft Graph.

    Usage:
        client = IntuneClient(
            tenant_id="...",
            client_id="...",
            client_secret="...",
        )
        devices = client.fetch_devices()
    """

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        graph_endpoint: str = "https://graph.microsoft.com/v1.0",
        scope: str = "https://graph.microsoft.com/.default",
        authority: str = LOGIN_AUTHORITY,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize Intune client.

        Args:
            tenant_id: Azure AD tenant ID
            client_id: App registration client ID
            client_secret: App registration client secret
            graph_endpoint: Graph base URL including the API version
            scope: OAuth scope for the client credentials grant
            authority: Login authority base URL
            timeout: HTTP request timeout in seconds
            client: Pre-configured httpx client (optional)
        """
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.graph_endpoint = graph_endpoint.rstrip("/")
        self.scope = scope
        self.token_url = f"{authority.rstrip('/')}/{tenant_id}/oauth2/v2.0/token"
        self.client = client or httpx.Client(timeout=timeout)

    def get_access_token(self) -> str:
        """
        Acquire a Graph access token.

        Returns:
            Bearer token

        Raises:
            VendorTransportError: If the token endpoint cannot be reached
            IntuneAuthError: If no access token is returned
        """
        form = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": self.scope,
            "grant_type": "client_credentials",
        }
        try:
            response = self.client.post(self.token_url, data=form)
        except httpx.HTTPError as e:
            raise VendorTransportError(f"Token request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            detail = data.get("error_description") if isinstance(data, dict) else None
            message = "Failed to get Intune access token"
            if detail:
                message = f"{message}: {detail}"
            raise IntuneAuthError(message)

        return token

    def _get_page(self, url: str, token: str, params: Optional[Dict[str, str]]) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        logger.debug(f"Intune API endpoint: {url}")
        try:
            response = self.client.get(url, headers=headers, params=params)
        except httpx.HTTPError as e:
            raise VendorTransportError(f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise VendorTransportError(
                f"Invalid JSON response from Microsoft Graph (status {response.status_code})"
            ) from e

        # Permission and consent failures come back as an error object
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            error = data["error"]
            logger.error(f"Intune API error: {error.get('message')}")
            raise IntuneApiError(
                code=error.get("code"),
                message=error.get("message") or "Unknown Graph error",
                raw=error,
            )

        if not response.is_success:
            raise VendorTransportError(
                f"Microsoft Graph returned status {response.status_code}: {response.text}"
            )
        if not isinstance(data, dict):
            raise VendorTransportError("Unexpected response shape from Microsoft Graph")
        return data

    def fetch_devices(self) -> List[Dict[str, Any]]:
        """
        Fetch all Windows managed devices, following ``@odata.nextLink``.

        Returns:
            Raw Graph ``managedDevice`` objects

        Raises:
            VendorError: On authentication, transport or Graph errors
        """
        token = self.get_access_token()

        url: Optional[str] = f"{self.graph_endpoint}/deviceManagement/managedDevices"
        params: Optional[Dict[str, str]] = {"$filter": WINDOWS_FILTER}
        devices: List[Dict[str, Any]] = []

        while url:
            page = self._get_page(url, token, params)
            devices.extend(d for d in page.get("value", []) if isinstance(d, dict))
            url = page.get("@odata.nextLink")
            # nextLink already carries the query string
            params = None

        logger.info(f"Fetched {len(devices)} Windows devices from Intune")
        return devices

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()
