"""
MDM vendor API clients.
"""

from .errors import (
    IntegrationDisabledError,
    IntuneApiError,
    IntuneAuthError,
    VendorError,
    VendorTransportError,
)
from .intune import IntuneClient
from .kandji import KandjiClient

__all__ = [
    "IntegrationDisabledError",
    "IntuneApiError",
    "IntuneAuthError",
    "VendorError",
    "VendorTransportError",
    "IntuneClient",
    "KandjiClient",
]
