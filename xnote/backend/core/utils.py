"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

import os
from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC. This ensures consistent behavior across
    the codebase and simplifies database storage.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC. Naive values are returned as-is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@lru_cache
def local_zone() -> tzinfo:
    """
    The server's local time zone.

    Resolved from $TZ or /etc/localtime as a ZoneInfo so that wall-clock
    arithmetic follows daylight saving changes. Falls back to the current
    fixed UTC offset when neither names a zone.
    """
    name = os.environ.get("TZ", "").lstrip(":")
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            pass
    localtime = Path("/etc/localtime")
    if localtime.exists():
        with open(localtime, "rb") as f:
            return ZoneInfo.from_file(f, key=_zone_key(localtime))
    return datetime.now().astimezone().tzinfo


def _zone_key(localtime: Path) -> str | None:
    # /etc/localtime is usually a symlink into a zoneinfo tree
    resolved = str(localtime.resolve())
    marker = "/zoneinfo/"
    if marker in resolved:
        return resolved.split(marker, 1)[1]
    return None


def local_now() -> datetime:
    """Return the current local server time as an aware datetime."""
    return datetime.now(local_zone())
