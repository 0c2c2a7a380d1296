"""Calendar: dated events and calendar tasks, partitioned by day."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union

from ..auth.session import UserScope
from ..db.models import CalendarTask, Event, parse_date
from ..errors import RemoteError, ValidationError

_TIME = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")


def _coerce_date(value: Union[str, date, None]) -> date:
    if isinstance(value, str) and len(value.strip()) != 10:
        raise ValidationError("Date must be in YYYY-MM-DD format.")
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError("Date must be in YYYY-MM-DD format.")
    return parsed


@dataclass
class DaySummary:
    day: date
    events: List[Event] = field(default_factory=list)
    tasks_by_category: Dict[str, List[CalendarTask]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "events": [event.to_dict() for event in self.events],
            "tasks_by_category": {
                category: [task.to_dict() for task in tasks]
                for category, tasks in self.tasks_by_category.items()
            },
        }


class CalendarService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def _gate(self) -> None:
        self.scope.entitlements.require("calendar")

    def list_events(self, on_date: Union[str, date, None] = None) -> List[Event]:
        self._gate()
        day = _coerce_date(on_date) if on_date is not None else None
        return [Event.from_record(row) for row in self.db.list_events(self.scope.user_id, on_date=day)]

    def list_tasks(self, on_date: Union[str, date, None] = None) -> List[CalendarTask]:
        self._gate()
        day = _coerce_date(on_date) if on_date is not None else None
        return [CalendarTask.from_record(row) for row in self.db.list_calendar_tasks(self.scope.user_id, on_date=day)]

    def create_event(
        self,
        title: Optional[str],
        on_date: Union[str, date, None],
        *,
        time: Optional[str] = None,
        venue: Optional[str] = None,
    ) -> Event:
        self._gate()
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("Please enter an event title.")
        day = _coerce_date(on_date)
        time = (time or "").strip() or None
        if time and not _TIME.match(time):
            raise ValidationError("Time must be in HH:MM format.")

        record = self.db.create_event(
            self.scope.user_id,
            title=cleaned,
            on_date=day,
            time=time,
            venue=(venue or "").strip() or None,
        )
        if not record:
            raise RemoteError("Failed to create event", operation="create_event")
        return Event.from_record(record)

    def day_summary(self, on_date: Union[str, date]) -> DaySummary:
        day = _coerce_date(on_date)
        summary = DaySummary(day=day, events=self.list_events(day))
        for task in self.list_tasks(day):
            summary.tasks_by_category.setdefault(task.category or "Uncategorized", []).append(task)
        return summary


__all__ = ["CalendarService", "DaySummary"]
