from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Client-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today_iso() -> str:
    """Default value of date inputs: YYYY-MM-DD."""
    return date.today().isoformat()


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Render a datetime for JSON as ISO-8601 with a trailing 'Z'; naive means UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
