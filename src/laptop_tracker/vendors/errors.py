"""
Vendor error taxonomy.
"""

from typing import Any, Dict, Optional

CONSENT_HINT = (
    "Check Azure app registration permissions and admin consent for "
    "DeviceManagementManagedDevices.Read.All"
)

GRAPH_ERROR_HINT = (
    "Check Azure app registration permissions, admin consent, and that your "
    "account has access to Intune. Also verify the tenant and app registration "
    "match your environment."
)


class VendorError(Exception):
    """Base class for failures talking to an MDM vendor."""
    pass


class VendorTransportError(VendorError):
    """Network error, non-2xx status or malformed JSON body."""
    pass


class IntuneAuthError(VendorError):
    """The token endpoint did not return an access token."""
    pass


class IntuneApiError(VendorError):
    """
    Microsoft Graph returned an ``error`` object.

    Attributes:
        code: Graph error code (e.g. "Forbidden")
        message: Graph error message
        raw: The error object exactly as Graph returned it
        hint: Remediation text for the operator
    """

    def __init__(
        self,
        code: Optional[str],
        message: str,
        raw: Optional[Dict[str, Any]] = None,
        hint: str = GRAPH_ERROR_HINT,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.raw = raw or {}
        self.hint = hint


class IntegrationDisabledError(VendorError):
    """The vendor integration is switched off by configuration."""
    pass
