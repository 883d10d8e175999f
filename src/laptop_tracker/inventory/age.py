"""
Device age classification.

Age is measured from the enrollment timestamp in fractional years of
365.25 days and bucketed into good / warning / danger.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from .models import AgeCategory, DeviceRecord

MS_PER_DAY = 1000 * 60 * 60 * 24
DAYS_PER_YEAR = 365.25

WARNING_AGE_YEARS = 3.0
REPLACE_AGE_YEARS = 4.0

# Fields consulted, in order, when a device has no first enrollment date
ENROLLMENT_FIELDS = ("first_enrollment", "last_enrollment", "last_check_in")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp.

    Accepts a trailing ``Z`` and date-only values. Naive timestamps are
    taken as UTC.

    Args:
        value: Timestamp string (or datetime)

    Returns:
        Timezone-aware datetime, or None if the value is empty or unparseable
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_enrollment(device: DeviceRecord, now: Optional[datetime] = None) -> str:
    """
    Pick the timestamp used as the device's age proxy.

    Falls back first_enrollment -> last_enrollment -> last_check_in -> now,
    so a device with no history is treated as brand new.
    """
    for field_name in ENROLLMENT_FIELDS:
        value = getattr(device, field_name, None)
        if value:
            return value
    return (now or utc_now()).isoformat()


def device_age_years(enrolled: datetime, now: Optional[datetime] = None) -> float:
    """Elapsed time since enrollment in fractional years."""
    now = now or utc_now()
    elapsed_ms = (now - enrolled).total_seconds() * 1000
    return elapsed_ms / (MS_PER_DAY * DAYS_PER_YEAR)


def categorize_age(years: float) -> AgeCategory:
    """
    Bucket an age into a replacement category.

    Args:
        years: Device age in years

    Returns:
        DANGER at 4 years and above, WARNING from 3 up to 4, otherwise GOOD
    """
    if years >= REPLACE_AGE_YEARS:
        return AgeCategory.DANGER
    if years >= WARNING_AGE_YEARS:
        return AgeCategory.WARNING
    return AgeCategory.GOOD


def classify(
    device: DeviceRecord, now: Optional[datetime] = None
) -> Tuple[Optional[float], Optional[AgeCategory]]:
    """
    Compute age and category for a device.

    Returns:
        (age_years, category), or (None, None) when the resolved
        enrollment date cannot be parsed
    """
    now = now or utc_now()
    timestamp = resolve_enrollment(device, now)
    enrolled = parse_timestamp(timestamp)
    if enrolled is None:
        return None, None

    years = device_age_years(enrolled, now)
    return years, categorize_age(years)
