# File: utils/dt_utils.py
"""Date and time utilities for Pet Progress.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Uses standard library datetime/zoneinfo and dateutil.

Functions:
    - set_default_timezone / get_default_timezone: Configure the local zone
    - dt_now_local: Get current datetime in local timezone
    - dt_now_iso: Get current datetime as ISO string
    - dt_today_iso: Today's day key
    - dt_parse_date: Parse date strings
    - dt_weekday_index: Weekday with Sunday = 0
    - dt_shift_day_key: Move a day key by whole days
    - dt_next_hour_at: Next occurrence of ``HH:minute:00``
"""

from __future__ import annotations

from datetime import date, datetime
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default timezone - overridden during integration setup
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware).

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_iso(tz: ZoneInfo | None = None) -> str:
    """Return the current local datetime as an ISO 8601 string.

    Example:
        "2026-01-14T09:05:00-08:00"
    """
    return dt_now_local(tz).isoformat()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's local date as ISO string (YYYY-MM-DD)."""
    return dt_now_local(tz).date().isoformat()


# ==============================================================================
# Date Parsing / Arithmetic
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse an ISO date string into a `datetime.date`.

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        _LOGGER.debug("Unparseable date string: %s", date_str)
        return None


def dt_weekday_index(day: date) -> int:
    """Return the weekday of ``day`` with Sunday = 0 .. Saturday = 6.

    Example:
        dt_weekday_index(date(2026, 1, 13))  → 2  # Tuesday
    """
    return (day.weekday() + 1) % 7


def dt_shift_day_key(day_key: str, days: int) -> str | None:
    """Return the day key ``days`` calendar days away from ``day_key``."""
    parsed = dt_parse_date(day_key)
    if parsed is None:
        return None
    return (parsed + relativedelta(days=days)).isoformat()


def dt_next_hour_at(dt_obj: datetime, minute: int, hours_ahead: int) -> datetime:
    """Return ``HH:minute:00.000`` of the hour ``hours_ahead`` after ``dt_obj``.

    ``relativedelta`` absolute fields (``minute``, ``second``) are applied
    before the relative hour shift, so day and month boundaries roll over.

    Examples:
        dt_next_hour_at(10:05, 15, 0) → 10:15:00
        dt_next_hour_at(23:20, 15, 1) → 00:15:00 next day
    """
    return dt_obj + relativedelta(
        hours=hours_ahead, minute=minute, second=0, microsecond=0
    )
