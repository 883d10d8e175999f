"""
Device aggregation API endpoints.

Serves the normalized device lists for each MDM vendor.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from laptop_tracker.inventory.service import DeviceInventoryService
from laptop_tracker.vendors.errors import (
    CONSENT_HINT,
    IntegrationDisabledError,
    IntuneApiError,
    VendorError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["devices"])


def _service(request: Request) -> DeviceInventoryService:
    return request.app.state.service


@router.get("/devices")
def get_mac_devices(request: Request) -> Any:
    """
    Get macOS devices from Kandji.

    Replacement notifications are sent as a side effect when enabled.

    Returns:
        ``{"devices": [...]}``, or 500 with ``{error, message}``
    """
    try:
        devices = _service(request).mac_devices()
    except VendorError as e:
        logger.error(f"Error fetching from Kandji API: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to fetch devices from Kandji API",
                "message": str(e),
            },
        )

    return {"devices": [device.model_dump() for device in devices]}


@router.get("/windows-devices")
def get_windows_devices(request: Request) -> Any:
    """
    Get Windows devices from Intune.

    Returns:
        ``{"devices": [...]}``; 403 when the integration is disabled;
        500 with ``{error, code, message, raw, hint}`` on failure
    """
    try:
        devices = _service(request).windows_devices()
    except IntegrationDisabledError:
        return JSONResponse(status_code=403, content={"error": "Intune integration not enabled"})
    except VendorError as e:
        logger.error(f"Error fetching from Intune: {e}")
        return JSONResponse(status_code=500, content=intune_error_body(e))

    return {"devices": [device.model_dump() for device in devices]}


def intune_error_body(error: VendorError) -> Dict[str, Any]:
    """Build the failure payload for the Windows endpoint."""
    if isinstance(error, IntuneApiError):
        return {
            "error": "Failed to fetch devices from Intune",
            "code": error.code,
            "message": error.message,
            "raw": error.raw,
            "hint": error.hint,
        }
    return {
        "error": "Failed to fetch devices from Intune",
        "code": None,
        "message": str(error),
        "raw": None,
        "hint": CONSENT_HINT,
    }
