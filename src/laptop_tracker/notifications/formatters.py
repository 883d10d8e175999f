"""
Notification formatters - convert devices to human-readable notifications.
"""

from typing import Optional

from laptop_tracker.inventory.models import DeviceRecord
from laptop_tracker.notifications.models import Notification


def device_replacement_notification(
    device: DeviceRecord, age_years: Optional[float] = None
) -> Notification:
    """
    Build the replacement notice for an aged device.

    Args:
        device: Device that crossed the replacement threshold
        age_years: Computed age, added as a fact when known

    Returns:
        Notification instance
    """
    facts = [
        ("User", device.user.name or "Unknown"),
        ("Model", device.model or "Unknown"),
        ("Serial", device.serial_number or "Unknown"),
        ("First Enrollment", device.first_enrollment or "Unknown"),
    ]
    if age_years is not None:
        facts.append(("Age", f"{age_years:.1f} years"))

    return Notification(
        subject="Device Needs Replacement",
        message=f"💻 **{device.device_name or 'Unknown Device'}** needs replacement!",
        facts=facts,
    )
