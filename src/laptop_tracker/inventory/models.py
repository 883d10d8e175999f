"""
Device inventory data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

UNKNOWN_DEVICE = "Unknown Device"
UNKNOWN_USER = "Unknown User"
UNKNOWN_MODEL = "Unknown Model"
UNKNOWN_OS = "Unknown OS"
UNKNOWN_SERIAL = "Unknown Serial"


class AgeCategory(str, Enum):
    """Replacement status derived from device age."""
    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


class DeviceUser(BaseModel):
    """User a device is assigned to."""

    name: str = Field(default=UNKNOWN_USER, description="Display name")
    email: str = Field(default="", description="Email or user principal name")

    class Config:
        frozen = True


class DeviceRecord(BaseModel):
    """
    A managed laptop in the canonical shape shared by all vendors.

    Produced by the normalizer; never mutated during a poll cycle.
    """

    device_name: str = Field(default=UNKNOWN_DEVICE, description="Device hostname")
    user: DeviceUser = Field(default_factory=DeviceUser, description="Assigned user")
    model: str = Field(default=UNKNOWN_MODEL, description="Hardware model")
    os_version: str = Field(default=UNKNOWN_OS, description="Operating system version")
    serial_number: str = Field(default=UNKNOWN_SERIAL, description="Hardware serial number")
    asset_tag: str = Field(default="", description="Asset tag, if any")
    first_enrollment: Optional[str] = Field(
        None,
        description="When the device was first enrolled in the MDM",
    )
    last_enrollment: Optional[str] = Field(
        None,
        description="Most recent enrollment (Kandji only)",
    )
    last_check_in: Optional[str] = Field(
        None,
        description="Last MDM check-in (Kandji only)",
    )
    platform: str = Field(default="", description="Mac or Windows")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "device_name": "MBP-JDOE",
                "user": {"name": "Jane Doe", "email": "jane.doe@example.com"},
                "model": "MacBook Pro (14-inch, 2021)",
                "os_version": "14.5",
                "serial_number": "C02XK1ABCDEF",
                "asset_tag": "IT-0042",
                "first_enrollment": "2021-11-02T09:14:03Z",
                "last_enrollment": "2023-01-10T08:00:00Z",
                "last_check_in": "2025-06-01T12:00:00Z",
                "platform": "Mac",
            }
        }
