"""Account settings: display name, theme, notification preference, plan and export."""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Optional

from ..auth.session import UserScope
from ..db.models import Profile, Task
from ..entitlements import parse_plan
from ..errors import RemoteError, ValidationError

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")
EXPORT_COLUMNS = ("Task Name", "Category", "Day", "Completed", "Created At")
MAX_NAME_LENGTH = 80


class SettingsService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def _update(self, updates: dict) -> Profile:
        self.db.update_profile(self.scope.user_id, updates)
        record = self.db.get_profile(self.scope.user_id)
        if not record:
            raise RemoteError("Profile not found", operation="get_profile")
        self.scope.profile = Profile.from_record(record)
        return self.scope.profile

    def update_name(self, name: Optional[str]) -> Profile:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Please enter a name.")
        if len(cleaned) > MAX_NAME_LENGTH:
            raise ValidationError(f"Name must be {MAX_NAME_LENGTH} characters or fewer.")
        return self._update({"name": cleaned})

    def update_theme(self, theme: Optional[str]) -> Profile:
        value = (theme or "").strip().lower()
        if value not in THEMES:
            raise ValidationError(f"Theme must be one of: {', '.join(THEMES)}")
        if value != "light":
            self.scope.entitlements.require("custom_themes")
        return self._update({"theme_preference": value})

    def set_notifications(self, enabled: bool) -> Profile:
        if enabled:
            self.scope.entitlements.require("notifications")
        return self._update({"notifications_enabled": bool(enabled)})

    def change_plan(self, plan: Any) -> Profile:
        tier = parse_plan(plan)
        if tier is None:
            raise ValidationError(f"Unknown plan: {plan!r}")
        profile = self._update({"plan": tier.value})
        logger.info("User %s changed plan to %s", self.scope.user_id, tier.value)
        return profile

    def export_tasks_csv(self) -> str:
        """Render every task as CSV with a fixed header row."""

        self.scope.entitlements.require("data_export")
        tasks = [Task.from_record(row) for row in self.db.list_tasks(self.scope.user_id, ascending=True)]

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(EXPORT_COLUMNS)
        for task in tasks:
            writer.writerow(
                [
                    task.name,
                    task.category,
                    task.day,
                    "Yes" if task.completed else "No",
                    task.created_at.date().isoformat() if task.created_at else "",
                ]
            )
        return buffer.getvalue()


__all__ = ["EXPORT_COLUMNS", "SettingsService", "THEMES"]
