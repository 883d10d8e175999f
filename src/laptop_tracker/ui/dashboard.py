"""
Device tracker dashboard.

Serves the Mac and Windows pages and the device list fragment that the
page script re-requests on every keystroke, filter click and poll.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from laptop_tracker.inventory.models import DeviceRecord
from laptop_tracker.vendors.errors import IntegrationDisabledError, IntuneApiError, VendorError

from .view import FILTERS, build_rows, coerce_devices, compute_stats, enrollment_label, highlight

logger = logging.getLogger(__name__)

UI_DIR = Path(__file__).parent
TEMPLATES_DIR = UI_DIR / "templates"
STATIC_DIR = UI_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(highlight=highlight, enrollment_label=enrollment_label)

router = APIRouter(tags=["dashboard"])

PAGES = {
    "mac": "💻 Mac Device Tracker",
    "windows": "🪟 Windows Device Tracker",
}


@dataclass
class FeedSnapshot:
    """Last fetch result for one source."""
    devices: List[DeviceRecord] = field(default_factory=list)
    fetched_at: Optional[datetime] = None
    error: Optional[Dict[str, Any]] = None


class DashboardState:
    """
    Devices last fetched per source.

    Feeds return the aggregator's JSON payload; it is normalized
    defensively before rendering. A refresh replaces the snapshot, so when
    polls overlap the later response wins.
    """

    def __init__(self, feeds: Dict[str, Callable[[], Any]]):
        """
        Initialize dashboard state.

        Args:
            feeds: Source name -> callable returning the device payload
        """
        self.feeds = feeds
        self.snapshots: Dict[str, FeedSnapshot] = {}

    def refresh(self, source: str) -> FeedSnapshot:
        """Fetch a source and replace its snapshot."""
        try:
            payload = self.feeds[source]()
        except IntegrationDisabledError:
            snapshot = FeedSnapshot(error={"message": "Intune integration not enabled"})
        except IntuneApiError as e:
            logger.error(f"Fetch error for {source}: {e.message}")
            snapshot = FeedSnapshot(
                error={"message": e.message, "code": e.code, "hint": e.hint, "raw": e.raw}
            )
        except VendorError as e:
            logger.error(f"Fetch error for {source}: {e}")
            snapshot = FeedSnapshot(error={"message": str(e)})
        else:
            devices = coerce_devices(payload)
            logger.info(f"Processed {len(devices)} {source} devices")
            snapshot = FeedSnapshot(devices=devices, fetched_at=datetime.now())

        # Keep showing the last good list when a refresh fails
        previous = self.snapshots.get(source)
        if snapshot.error and previous and previous.devices:
            snapshot.devices = previous.devices
            snapshot.fetched_at = previous.fetched_at

        self.snapshots[source] = snapshot
        return snapshot

    def get(self, source: str, refresh: bool = False) -> FeedSnapshot:
        if refresh or source not in self.snapshots:
            return self.refresh(source)
        return self.snapshots[source]


def _render_page(request: Request, source: str) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "source": source,
            "title": PAGES[source],
            "filters": FILTERS,
            "refresh_interval_ms": request.app.state.config.refresh_interval_seconds * 1000,
        },
    )


@router.get("/", response_class=HTMLResponse)
async def mac_dashboard(request: Request):
    """Mac device list page."""
    return _render_page(request, "mac")


@router.get("/windows", response_class=HTMLResponse)
async def windows_dashboard(request: Request):
    """Windows device list page."""
    return _render_page(request, "windows")


@router.get("/partials/devices", response_class=HTMLResponse)
def device_list_partial(
    request: Request,
    source: str = Query("mac", pattern="^(mac|windows)$"),
    filter: str = Query("all", description="all, replacement, warning or good"),
    q: str = Query("", max_length=200, description="Search string"),
    refresh: bool = Query(False, description="Re-fetch from the vendor"),
):
    """
    Render the device list fragment.

    Only ``refresh=true`` (and the first request per source) reaches the
    vendor; search and filter changes re-render the cached list.
    """
    state: DashboardState = request.app.state.dashboard
    snapshot = state.get(source, refresh=refresh)
    search = q.strip()

    return templates.TemplateResponse(
        request,
        "partials/device_list.html",
        {
            "snapshot": snapshot,
            "stats": compute_stats(snapshot.devices),
            "rows": build_rows(snapshot.devices, category_filter=filter, search=search),
            "search": search,
            "active_filter": filter if filter in FILTERS else "all",
        },
    )
