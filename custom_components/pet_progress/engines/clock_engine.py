"""Clock Engine - Pure logic for the hour/grace-period model.

Determines which hour is "current" for task focus. A task due at hour H stays
current until ``H+1:grace``, so the active hour only advances once the grace
window of the new hour has passed.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in values. Callers
pass local wall-clock datetimes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_next_hour_at
from ..utils.math_utils import clamp

if TYPE_CHECKING:
    from datetime import datetime


class ClockEngine:
    """Stateless hour/grace arithmetic."""

    @staticmethod
    def active_hour(now: datetime, grace_minutes: int) -> int:
        """Return the hour currently in focus.

        Inside the first ``grace_minutes`` of an hour the previous hour is
        still active (wrapping 0 → 23).
        """
        if now.minute < grace_minutes:
            return (now.hour - 1) % 24
        return now.hour

    @staticmethod
    def is_within_grace_period(
        now: datetime, target_hour: int, grace_minutes: int
    ) -> bool:
        """Return True if ``target_hour`` is still actionable at ``now``.

        True during the target hour itself, and during the first
        ``grace_minutes`` of the following hour.
        """
        if now.hour == target_hour:
            return True
        return now.hour == (target_hour + 1) % 24 and now.minute < grace_minutes

    @staticmethod
    def next_boundary(now: datetime, grace_minutes: int) -> datetime:
        """Return the next instant at which the active hour changes.

        Always strictly after ``now`` for whole-minute inputs and no more than
        one hour away.
        """
        if now.minute < grace_minutes:
            return dt_next_hour_at(now, grace_minutes, 0)
        return dt_next_hour_at(now, grace_minutes, 1)

    @staticmethod
    def seconds_until_next_boundary(now: datetime, grace_minutes: int) -> float:
        """Return the delay until ``next_boundary`` in seconds."""
        return (ClockEngine.next_boundary(now, grace_minutes) - now).total_seconds()

    @staticmethod
    def day_key(now: datetime) -> str:
        """Return the calendar day key of the local datetime ``now``."""
        return now.date().isoformat()

    @staticmethod
    def clamp_grace_minutes(value: Any) -> int:
        """Coerce a grace minute setting into ``[0, 30]``.

        Non-numeric input falls back to the default.
        """
        try:
            minutes = int(value)
        except (TypeError, ValueError):
            return const.DEFAULT_GRACE_MINUTES
        return int(
            clamp(minutes, const.MIN_GRACE_MINUTES, const.MAX_GRACE_MINUTES)
        )
