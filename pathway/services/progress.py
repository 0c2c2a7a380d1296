"""Completion summary shown next to the weekly board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from ..auth.session import UserScope
from ..core.streak import streak_badge
from ..db.models import Task


def percentage(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(completed * 100 / total)


@dataclass
class CategoryProgress:
    category: str
    completed: int
    total: int

    @property
    def percent(self) -> int:
        return percentage(self.completed, self.total)

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "completed": self.completed, "total": self.total, "percent": self.percent}


@dataclass
class ProgressSummary:
    completed: int
    total: int
    categories: List[CategoryProgress] = field(default_factory=list)
    streak: int = 0

    @property
    def percent(self) -> int:
        return percentage(self.completed, self.total)

    @property
    def badge(self) -> str:
        return streak_badge(self.streak)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completed": self.completed,
            "total": self.total,
            "percent": self.percent,
            "categories": [entry.to_dict() for entry in self.categories],
            "streak": self.streak,
            "badge": self.badge,
        }


def summarize(tasks: Iterable[Task], *, streak: int = 0) -> ProgressSummary:
    per_category: Dict[str, CategoryProgress] = {}
    completed = total = 0
    for task in tasks:
        total += 1
        entry = per_category.setdefault(task.category, CategoryProgress(task.category, 0, 0))
        entry.total += 1
        if task.completed:
            completed += 1
            entry.completed += 1
    return ProgressSummary(
        completed=completed,
        total=total,
        categories=sorted(per_category.values(), key=lambda item: item.category),
        streak=streak,
    )


class ProgressService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def summary(self) -> ProgressSummary:
        tasks = [Task.from_record(row) for row in self.db.list_tasks(self.scope.user_id, ascending=True)]
        streak = self.scope.profile.current_streak if self.scope.profile else 0
        return summarize(tasks, streak=streak)


__all__ = ["CategoryProgress", "ProgressService", "ProgressSummary", "percentage", "summarize"]
