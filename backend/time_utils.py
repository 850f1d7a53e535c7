import os
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

DISPLAY_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


def _timezone() -> ZoneInfo:
    name = os.environ.get("APP_TIMEZONE", "UTC")
    return ZoneInfo(name)


def now_tz() -> datetime:
    return datetime.now(_timezone())


def ensure_timezone(dt: datetime) -> datetime:
    tz = _timezone()
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def format_display_time(dt: Optional[datetime]) -> str:
    """Render a timestamp for coordinators, e.g. ``10/17/2026, 08:02:11 PM``."""
    if dt is None:
        return "-"
    return ensure_timezone(dt).strftime(DISPLAY_FORMAT)
