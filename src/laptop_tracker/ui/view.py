"""
Dashboard view model.

Search, category filter, ordering and display helpers for the device list.
The pipeline is: coerce payload -> search -> category filter -> sort by age
(oldest first) -> rows.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional

from markupsafe import Markup, escape

from laptop_tracker.inventory.age import classify, parse_timestamp, resolve_enrollment, utc_now
from laptop_tracker.inventory.models import AgeCategory, DeviceRecord
from laptop_tracker.inventory.normalizer import extract_device_list, normalize_canonical_device

FILTER_CATEGORIES = {
    "replacement": AgeCategory.DANGER,
    "warning": AgeCategory.WARNING,
    "good": AgeCategory.GOOD,
}
FILTERS = ("all",) + tuple(FILTER_CATEGORIES)

# (row class, badge class, badge text)
STATUS_STYLES = {
    AgeCategory.DANGER: ("needs-replacement", "age-danger", "REPLACE NOW"),
    AgeCategory.WARNING: ("warning", "age-warning", "MONITOR"),
    AgeCategory.GOOD: ("good", "age-good", "GOOD"),
}


@dataclass
class DeviceRow:
    """A device prepared for rendering."""
    device: DeviceRecord
    age_years: Optional[float]
    category: Optional[AgeCategory]

    @property
    def item_class(self) -> str:
        return STATUS_STYLES.get(self.category, ("unknown", "", ""))[0]

    @property
    def badge_class(self) -> str:
        return STATUS_STYLES.get(self.category, ("", "age-unknown", ""))[1]

    @property
    def badge_text(self) -> str:
        return STATUS_STYLES.get(self.category, ("", "", "UNKNOWN"))[2]

    @property
    def age_label(self) -> str:
        if self.age_years is None:
            return "Unknown age"
        return f"{self.age_years:.1f} years"

    @property
    def initials(self) -> str:
        return get_initials(self.device.user.name)


@dataclass
class DeviceStats:
    """Summary counters shown above the list."""
    total: int = 0
    replacement: int = 0
    warning: int = 0
    good: int = 0


def coerce_devices(payload: Any) -> List[DeviceRecord]:
    """
    Accept any supported response shape and return device records.

    Bare arrays and ``devices``/``results``/``value`` envelopes are
    recognised; anything else yields an empty list.
    """
    return [normalize_canonical_device(raw) for raw in extract_device_list(payload)]


def get_initials(name: Optional[str]) -> str:
    if not name or not isinstance(name, str):
        return "??"
    return "".join(word[0] for word in name.split()).upper() or "??"


def format_date(value: Optional[str]) -> str:
    """Format a timestamp as e.g. ``Nov 2, 2021``."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return "Unknown"
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def highlight(text: Optional[str], term: str) -> Markup:
    """
    HTML-escape text and wrap case-insensitive matches of term.

    Args:
        text: Text to render
        term: Active search string

    Returns:
        Safe markup
    """
    if not text:
        return Markup("")
    if not term:
        return escape(text)

    pattern = re.compile(re.escape(term), re.IGNORECASE)
    parts = []
    last = 0
    for match in pattern.finditer(text):
        parts.append(escape(text[last:match.start()]))
        parts.append(Markup('<span class="search-highlight">%s</span>') % match.group(0))
        last = match.end()
    parts.append(escape(text[last:]))
    return Markup("").join(parts)


def matches_search(device: DeviceRecord, term: str) -> bool:
    """Case-insensitive substring match across user, device name, model and serial."""
    if not term:
        return True

    needle = term.lower()
    haystack = (
        device.user.name,
        device.user.email,
        device.device_name,
        device.model,
        device.serial_number,
    )
    return any(needle in (value or "").lower() for value in haystack)


def compute_stats(devices: Iterable[DeviceRecord], now: Optional[datetime] = None) -> DeviceStats:
    """Count devices per age category."""
    now = now or utc_now()
    stats = DeviceStats()
    for device in devices:
        stats.total += 1
        _, category = classify(device, now)
        if category is AgeCategory.DANGER:
            stats.replacement += 1
        elif category is AgeCategory.WARNING:
            stats.warning += 1
        elif category is AgeCategory.GOOD:
            stats.good += 1
    return stats


def build_rows(
    devices: Iterable[DeviceRecord],
    category_filter: str = "all",
    search: str = "",
    now: Optional[datetime] = None,
) -> List[DeviceRow]:
    """
    Run the render pipeline over a device list.

    Args:
        devices: All fetched devices
        category_filter: One of FILTERS; unknown values mean "all"
        search: Active search string
        now: Reference time for age calculation

    Returns:
        Rows ordered oldest first; devices with an unknown age go last
    """
    now = now or utc_now()
    search = (search or "").strip()
    wanted = FILTER_CATEGORIES.get(category_filter)

    rows = []
    for device in devices:
        if not matches_search(device, search):
            continue
        age_years, category = classify(device, now)
        if wanted is not None and category is not wanted:
            continue
        rows.append(DeviceRow(device=device, age_years=age_years, category=category))

    rows.sort(
        key=lambda row: row.age_years if row.age_years is not None else float("-inf"),
        reverse=True,
    )
    return rows


def enrollment_label(device: DeviceRecord) -> str:
    """Display date of the timestamp used for the device's age."""
    return format_date(resolve_enrollment(device))
