"""Weekly task board: list, create, toggle and delete the user's tasks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..auth.session import UserScope
from ..core.streak import StreakService
from ..db.models import WEEKDAYS, Profile, Task
from ..errors import ConfirmationRequired, NotFoundError, RemoteError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    "Programming",
    "Mechatronics & Tech",
    "Schoolwork",
    "Business Learning",
)

REMINDER_NOTIFICATION_TYPE = "task_reminder"


def normalize_day(value: Optional[str]) -> Optional[str]:
    """Return the canonical weekday label for ``value`` or None."""

    if not value:
        return None
    cleaned = value.strip().lower()
    for day in WEEKDAYS:
        if day.lower() == cleaned:
            return day
    return None


@dataclass
class TaskBoard:
    tasks: List[Task] = field(default_factory=list)

    def by_day(self) -> Dict[str, List[Task]]:
        """Group tasks under each weekday label, keeping creation order inside a day."""

        board: Dict[str, List[Task]] = {day: [] for day in WEEKDAYS}
        for task in self.tasks:
            if task.day in board:
                board[task.day].append(task)
        return board

    def to_dict(self) -> Dict[str, Any]:
        return {day: [task.to_dict() for task in items] for day, items in self.by_day().items()}


@dataclass
class ToggleResult:
    task: Task
    profile: Optional[Profile] = None


class TaskService:
    def __init__(self, db: Any, scope: UserScope, *, streaks: Optional[StreakService] = None) -> None:
        self.db = db
        self.scope = scope
        self.streaks = streaks or StreakService(db)

    def list_tasks(self) -> List[Task]:
        return [Task.from_record(row) for row in self.db.list_tasks(self.scope.user_id, ascending=True)]

    def board(self) -> TaskBoard:
        return TaskBoard(self.list_tasks())

    def create_task(self, name: Optional[str], category: Optional[str], day: Optional[str]) -> Task:
        name = (name or "").strip()
        category = (category or "").strip()
        raw_day = (day or "").strip()
        if not name or not category or not raw_day:
            raise ValidationError("Please fill in all fields")

        canonical_day = normalize_day(raw_day)
        if canonical_day is None:
            raise ValidationError(f"Day must be one of: {', '.join(WEEKDAYS)}")

        record = self.db.create_task(self.scope.user_id, name=name, category=category, day=canonical_day)
        if not record:
            raise RemoteError("Failed to create task", operation="create_task")
        logger.info("Task %s created for %s", record.get("id"), self.scope.user_id)
        return Task.from_record(record)

    def _get(self, task_id: str) -> Task:
        record = self.db.get_task(task_id, self.scope.user_id)
        if not record:
            raise NotFoundError("Task not found")
        return Task.from_record(record)

    def toggle_task(self, task_id: str) -> ToggleResult:
        """
        Flip the completed flag.

        Completing a task also updates the streak, re-fetches the profile and
        clears reminder notifications. Those follow-ups never fail the toggle.
        """

        task = self._get(task_id)
        completed = not task.completed
        record = self.db.update_task(task_id, self.scope.user_id, {"completed": completed})
        updated = Task.from_record(record) if record else replace(task, completed=completed)

        result = ToggleResult(task=updated)
        if completed:
            result.profile = self._after_completion()
        return result

    def _after_completion(self) -> Optional[Profile]:
        profile: Optional[Profile] = None
        try:
            profile = self.streaks.record_completion(self.scope.user_id)
        except Exception as exc:
            logger.warning("Streak update failed for %s: %s", self.scope.user_id, exc)
            try:
                record = self.db.get_profile(self.scope.user_id)
                profile = Profile.from_record(record) if record else None
            except Exception as refetch_exc:
                logger.warning("Profile re-fetch failed for %s: %s", self.scope.user_id, refetch_exc)

        if profile is not None:
            self.scope.profile = profile

        try:
            self.db.delete_notifications_by_type(self.scope.user_id, REMINDER_NOTIFICATION_TYPE)
        except Exception as exc:
            logger.warning("Reminder cleanup failed for %s: %s", self.scope.user_id, exc)

        return profile

    def delete_task(self, task_id: str, *, confirmed: bool = False) -> None:
        if not confirmed:
            raise ConfirmationRequired("Are you sure you want to delete this task?")
        if not self.db.delete_task(task_id, self.scope.user_id):
            raise NotFoundError("Task not found")
        logger.info("Task %s deleted for %s", task_id, self.scope.user_id)


__all__ = [
    "DEFAULT_CATEGORIES",
    "REMINDER_NOTIFICATION_TYPE",
    "TaskBoard",
    "TaskService",
    "ToggleResult",
    "normalize_day",
]
