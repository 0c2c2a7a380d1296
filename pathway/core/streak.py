"""Consecutive-day completion streaks."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import CONFIG
from ..db.models import Profile

logger = logging.getLogger(__name__)

STREAK_MODES = ("rpc", "local")

_BADGES = (
    (30, "Legendary"),
    (14, "On fire"),
    (7, "Great momentum"),
    (3, "Building habits"),
    (1, "Keep it up"),
)


def next_streak(current: int, last_completed: Optional[date], today: date) -> int:
    """
    Return the streak after a completion on ``today``.

    Same day leaves the count alone, the day after extends it, and any
    longer gap (or no previous completion) starts over at one.
    """

    current = max(int(current or 0), 0)
    if last_completed is None:
        return 1
    if last_completed == today:
        return max(current, 1)
    if last_completed == today - timedelta(days=1):
        return current + 1
    return 1


def streak_badge(streak: int) -> str:
    for threshold, label in _BADGES:
        if streak >= threshold:
            return label
    return "Start your streak"


def local_today(timezone_name: Optional[str] = None) -> date:
    name = timezone_name or getattr(CONFIG, "streak_timezone", None) or "UTC"
    try:
        zone = ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown streak timezone %r; falling back to UTC", name)
        zone = ZoneInfo("UTC")
    return datetime.now(zone).date()


class StreakService:
    """Records task completions against the profile streak counter."""

    def __init__(self, db: Any, *, mode: Optional[str] = None, timezone_name: Optional[str] = None) -> None:
        self.db = db
        resolved = (mode or getattr(CONFIG, "streak_mode", "rpc") or "rpc").lower()
        self.mode = resolved if resolved in STREAK_MODES else "rpc"
        self.timezone_name = timezone_name

    def record_completion(self, user_id: str, *, today: Optional[date] = None) -> Optional[Profile]:
        """Update the streak for ``user_id`` and return the re-fetched profile."""

        if self.mode == "local":
            self._apply_local(user_id, today or local_today(self.timezone_name))
        else:
            self.db.update_user_streak(user_id)

        record = self.db.get_profile(user_id)
        return Profile.from_record(record) if record else None

    def _apply_local(self, user_id: str, today: date) -> None:
        record = self.db.get_profile(user_id)
        if not record:
            logger.warning("Cannot update streak: no profile for %s", user_id)
            return
        profile = Profile.from_record(record)
        updated = next_streak(profile.current_streak, profile.last_completed_date, today)
        self.db.update_profile(
            user_id,
            {"current_streak": updated, "last_completed_date": today.isoformat()},
        )


__all__ = ["STREAK_MODES", "StreakService", "local_today", "next_streak", "streak_badge"]
