"""
Vendor payload normalization.

Maps Kandji and Intune/Graph device payloads into DeviceRecord. Each
canonical field is described by a FieldChain: an ordered list of candidate
keys where the first non-empty value wins, with a named default when every
candidate is missing.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple, Union

from .age import utc_now
from .models import (
    UNKNOWN_DEVICE,
    UNKNOWN_MODEL,
    UNKNOWN_OS,
    UNKNOWN_SERIAL,
    UNKNOWN_USER,
    DeviceRecord,
    DeviceUser,
)

logger = logging.getLogger(__name__)

# Response envelopes the device list may arrive in
LIST_KEYS = ("devices", "results", "value")


def _now_iso() -> str:
    return utc_now().isoformat()


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _lookup(raw: Dict[str, Any], path: str) -> Any:
    """Resolve a dotted key path, e.g. ``user.name``."""
    current: Any = raw
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


@dataclass(frozen=True)
class FieldChain:
    """
    Ordered candidate keys for one canonical field.

    Attributes:
        candidates: Keys (dotted paths allowed) tried in priority order
        default: Value, or zero-argument callable, used when all are missing
    """
    candidates: Tuple[str, ...]
    default: Union[Any, Callable[[], Any]] = None

    def extract(self, raw: Dict[str, Any]) -> Any:
        for key in self.candidates:
            value = _lookup(raw, key)
            if _is_present(value):
                return value.strip() if isinstance(value, str) else value
        return self.default() if callable(self.default) else self.default


INTUNE_FIELDS: Dict[str, FieldChain] = {
    "device_name": FieldChain(("deviceName", "name", "managedDeviceName"), UNKNOWN_DEVICE),
    "user_name": FieldChain(
        ("userDisplayName", "userPrincipalName", "ownerUserPrincipalName"), UNKNOWN_USER
    ),
    "user_email": FieldChain(("userPrincipalName", "ownerUserPrincipalName"), ""),
    "model": FieldChain(("model", "manufacturer", "deviceModel"), UNKNOWN_MODEL),
    "os_version": FieldChain(("operatingSystemVersion", "osVersion"), UNKNOWN_OS),
    "serial_number": FieldChain(("serialNumber", "deviceSerialNumber"), UNKNOWN_SERIAL),
    "asset_tag": FieldChain(("deviceTag",), ""),
    "first_enrollment": FieldChain(
        ("enrolledDateTime", "enrollmentDateTime", "lastSyncDateTime", "lastContact"),
        _now_iso,
    ),
}

# Kandji already reports the canonical field names
CANONICAL_FIELDS: Dict[str, FieldChain] = {
    "device_name": FieldChain(("device_name",), UNKNOWN_DEVICE),
    "user_name": FieldChain(("user.name",), UNKNOWN_USER),
    "user_email": FieldChain(("user.email",), ""),
    "model": FieldChain(("model",), UNKNOWN_MODEL),
    "os_version": FieldChain(("os_version",), UNKNOWN_OS),
    "serial_number": FieldChain(("serial_number",), UNKNOWN_SERIAL),
    "asset_tag": FieldChain(("asset_tag",), ""),
    # Kept raw; the age classifier applies its own fallback chain
    "first_enrollment": FieldChain(("first_enrollment",)),
    "last_enrollment": FieldChain(("last_enrollment",)),
    "last_check_in": FieldChain(("last_check_in",)),
}


def extract_device_list(payload: Any) -> List[Dict[str, Any]]:
    """
    Pull the device list out of a vendor or aggregator response.

    Accepts a bare array, or an object holding the array under
    ``devices``, ``results`` or ``value``.

    Args:
        payload: Decoded JSON response

    Returns:
        List of raw device dicts (empty for any other shape)
    """
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        items = []
        for key in LIST_KEYS:
            if isinstance(payload.get(key), list):
                items = payload[key]
                break
    else:
        items = []

    return [item for item in items if isinstance(item, dict)]


def _build(raw: Dict[str, Any], fields: Dict[str, FieldChain], platform: str) -> DeviceRecord:
    values = {}
    for name, chain in fields.items():
        value = chain.extract(raw)
        values[name] = str(value) if value is not None else None
    user = DeviceUser(name=values.pop("user_name"), email=values.pop("user_email"))
    return DeviceRecord(user=user, platform=platform, **values)


def normalize_intune_device(raw: Dict[str, Any]) -> DeviceRecord:
    """Map a Graph ``managedDevice`` into a DeviceRecord."""
    return _build(raw, INTUNE_FIELDS, platform="Windows")


def normalize_kandji_device(raw: Dict[str, Any]) -> DeviceRecord:
    """Map a Kandji device list entry into a DeviceRecord."""
    return _build(raw, CANONICAL_FIELDS, platform="Mac")


def normalize_canonical_device(raw: Dict[str, Any]) -> DeviceRecord:
    """Re-read a device already in canonical shape, filling any gaps."""
    platform = raw.get("platform")
    return _build(raw, CANONICAL_FIELDS, platform=str(platform) if platform else "")


def normalize_devices(
    payload: Any, normalizer: Callable[[Dict[str, Any]], DeviceRecord]
) -> List[DeviceRecord]:
    """
    Normalize every device in a response.

    Args:
        payload: Decoded vendor response
        normalizer: Per-device mapping function

    Returns:
        List of DeviceRecord
    """
    raw_devices = extract_device_list(payload)
    devices = [normalizer(raw) for raw in raw_devices]
    logger.debug(f"Normalized {len(devices)} devices")
    return devices
