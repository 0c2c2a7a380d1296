"""
Notification feed.

The feed merges persisted ``notifications`` rows with entries derived at
read time from other tables: a pending-task summary, today's events and
pending team or partner invites. Every entry is addressed by a
:data:`NotificationRef`, which is either a :class:`PersistedRef` (a real row
id) or a :class:`DerivedRef` (kind plus the id of the source row). Only
persisted entries have their read flag written back; derived entries are
marked read locally and come back unread on the next refresh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from ..auth.session import UserScope
from ..config import CONFIG
from ..core.streak import local_today
from ..db.models import Event, Invite, Notification
from ..errors import NotFoundError

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DerivedKind(str, Enum):
    TASKS_PENDING = "tasks-pending"
    EVENT_TODAY = "event-today"
    TEAM_INVITE = "team-invite"
    PARTNER_INVITE = "partner-invite"


@dataclass(frozen=True)
class PersistedRef:
    id: str

    @property
    def key(self) -> str:
        return self.id


@dataclass(frozen=True)
class DerivedRef:
    kind: DerivedKind
    source_id: str

    @property
    def key(self) -> str:
        return f"{self.kind.value}-{self.source_id}"


NotificationRef = Union[PersistedRef, DerivedRef]


def parse_ref(key: str) -> NotificationRef:
    """Turn an entry key back into a reference."""

    for kind in DerivedKind:
        prefix = f"{kind.value}-"
        if key.startswith(prefix) and len(key) > len(prefix):
            return DerivedRef(kind=kind, source_id=key[len(prefix):])
    return PersistedRef(id=key)


@dataclass
class FeedEntry:
    ref: NotificationRef
    type: str
    title: str
    message: str
    read: bool = False
    created_at: Optional[datetime] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def derived(self) -> bool:
        return isinstance(self.ref, DerivedRef)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.ref.key,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "read": self.read,
            "derived": self.derived,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "data": dict(self.data),
        }


class NotificationFeed:
    def __init__(
        self,
        db: Any,
        scope: UserScope,
        *,
        limit: Optional[int] = None,
        today: Optional[date] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.db = db
        self.scope = scope
        self.limit = limit or getattr(CONFIG, "notification_feed_limit", 20)
        self._today = today
        self._clock = clock
        self.entries: List[FeedEntry] = []

    @property
    def today(self) -> date:
        return self._today or local_today()

    @property
    def unread_count(self) -> int:
        return sum(1 for entry in self.entries if not entry.read)

    def refresh(self) -> List[FeedEntry]:
        """Rebuild the feed from scratch. Persisted fetch errors propagate."""

        rows = self.db.list_notifications(self.scope.user_id, limit=self.limit)
        entries = [self._from_row(Notification.from_record(row)) for row in rows]

        for source in (self._pending_tasks, self._events_today, self._team_invites, self._partner_invites):
            try:
                entries.extend(source())
            except Exception as exc:
                logger.warning("Skipping derived notifications from %s: %s", source.__name__, exc)

        entries.sort(key=lambda entry: entry.created_at or _EPOCH, reverse=True)
        self.entries = entries
        return self.entries

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------
    @staticmethod
    def _from_row(row: Notification) -> FeedEntry:
        return FeedEntry(
            ref=PersistedRef(row.id),
            type=row.type,
            title=row.title,
            message=row.message,
            read=row.read,
            created_at=row.created_at,
            data=row.data,
        )

    def _pending_tasks(self) -> List[FeedEntry]:
        pending = self.db.list_pending_tasks(self.scope.user_id)
        if not pending:
            return []
        count = len(pending)
        noun = "task" if count == 1 else "tasks"
        return [
            FeedEntry(
                ref=DerivedRef(DerivedKind.TASKS_PENDING, self.today.isoformat()),
                type="task_reminder",
                title="Pending Tasks",
                message=f"You have {count} pending {noun} to complete",
                created_at=self._clock(),
                data={"count": count},
            )
        ]

    def _events_today(self) -> List[FeedEntry]:
        entries = []
        for row in self.db.list_events(self.scope.user_id, on_date=self.today):
            event = Event.from_record(row)
            message = event.title
            if event.time:
                message += f" at {event.time}"
            if event.venue:
                message += f" ({event.venue})"
            entries.append(
                FeedEntry(
                    ref=DerivedRef(DerivedKind.EVENT_TODAY, event.id),
                    type="event_reminder",
                    title="Event Today",
                    message=message,
                    created_at=event.created_at or self._clock(),
                    data={"event_id": event.id},
                )
            )
        return entries

    def _invites(self, invite_type: str) -> List[Invite]:
        email = (self.scope.email or "").strip().lower()
        if not email:
            return []
        return [Invite.from_record(row) for row in self.db.list_pending_invites(email, invite_type=invite_type)]

    def _team_invites(self) -> List[FeedEntry]:
        return [
            FeedEntry(
                ref=DerivedRef(DerivedKind.TEAM_INVITE, invite.id),
                type="team_invite",
                title="Team Invitation",
                message=f"{invite.sender_name or 'Someone'} invited you to join {invite.team_name or 'a team'}",
                created_at=invite.created_at,
                data={"invite_id": invite.id, "team_id": invite.team_id},
            )
            for invite in self._invites("team")
        ]

    def _partner_invites(self) -> List[FeedEntry]:
        return [
            FeedEntry(
                ref=DerivedRef(DerivedKind.PARTNER_INVITE, invite.id),
                type="partner_invite",
                title="Partner Request",
                message=f"{invite.sender_name or 'Someone'} wants to be your progress partner",
                created_at=invite.created_at,
                data={"invite_id": invite.id},
            )
            for invite in self._invites("partner")
        ]

    # ------------------------------------------------------------------
    # Read state
    # ------------------------------------------------------------------
    def _find(self, ref: NotificationRef) -> FeedEntry:
        for entry in self.entries:
            if entry.ref == ref:
                return entry
        raise NotFoundError("Notification not found")

    def mark_read(self, ref: NotificationRef) -> FeedEntry:
        entry = self._find(ref)
        if isinstance(ref, PersistedRef):
            if not entry.read:
                self.db.mark_notification_read(ref.id, self.scope.user_id)
        elif isinstance(ref, DerivedRef):
            pass  # local only
        else:  # pragma: no cover
            raise TypeError(f"Unknown notification reference: {ref!r}")
        entry.read = True
        return entry

    def mark_all_read(self) -> None:
        if any(isinstance(entry.ref, PersistedRef) and not entry.read for entry in self.entries):
            self.db.mark_all_notifications_read(self.scope.user_id)
        for entry in self.entries:
            entry.read = True

    def dismiss(self, ref: NotificationRef) -> None:
        entry = self._find(ref)
        self.entries.remove(entry)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "unread_count": self.unread_count,
        }


__all__ = [
    "DerivedKind",
    "DerivedRef",
    "FeedEntry",
    "NotificationFeed",
    "NotificationRef",
    "PersistedRef",
    "parse_ref",
]
