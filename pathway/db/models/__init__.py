"""
Record types for the rows this service reads from Supabase.

Each dataclass mirrors one table and knows how to build itself from the
plain dict PostgREST returns. Unknown columns are ignored so schema
additions on the backend do not break older deployments.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

TEAM_ROLES = ("admin", "editor", "viewer")
INVITE_TYPES = ("team", "partner")
INVITE_STATUSES = ("pending", "accepted", "declined")


def parse_datetime(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class Record:
    """Shared serialization helpers for the dataclasses below."""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, (datetime, date)):
                data[key] = value.isoformat()
        return data


@dataclass
class Profile(Record):
    id: str
    name: str = ""
    email: Optional[str] = None
    current_streak: int = 0
    last_completed_date: Optional[date] = None
    plan: Optional[str] = None
    theme_preference: Optional[str] = None
    notifications_enabled: bool = False
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Profile":
        try:
            streak = int(record.get("current_streak") or 0)
        except (TypeError, ValueError):
            streak = 0
        return cls(
            id=str(record.get("id")),
            name=str(record.get("name") or ""),
            email=record.get("email"),
            current_streak=max(streak, 0),
            last_completed_date=parse_date(record.get("last_completed_date")),
            plan=record.get("plan"),
            theme_preference=record.get("theme_preference"),
            notifications_enabled=bool(record.get("notifications_enabled")),
            avatar_url=record.get("avatar_url"),
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class Task(Record):
    id: str
    user_id: str
    name: str
    category: str
    day: str
    completed: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Task":
        return cls(
            id=str(record.get("id")),
            user_id=str(record.get("user_id") or ""),
            name=str(record.get("name") or ""),
            category=str(record.get("category") or ""),
            day=str(record.get("day") or ""),
            completed=bool(record.get("completed")),
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class Category(Record):
    id: str
    user_id: str
    name: str
    color: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Category":
        return cls(
            id=str(record.get("id")),
            user_id=str(record.get("user_id") or ""),
            name=str(record.get("name") or ""),
            color=record.get("color"),
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class Workspace(Record):
    id: str
    user_id: str
    name: str
    emoji: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Workspace":
        return cls(
            id=str(record.get("id")),
            user_id=str(record.get("user_id") or ""),
            name=str(record.get("name") or ""),
            emoji=record.get("emoji"),
            color=record.get("color"),
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class Team(Record):
    id: str
    name: str
    owner_id: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Team":
        return cls(
            id=str(record.get("id")),
            name=str(record.get("name") or ""),
            owner_id=str(record.get("owner_id") or ""),
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class TeamMember(Record):
    id: str
    team_id: str
    user_id: str
    role: str = "viewer"
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "TeamMember":
        role = str(record.get("role") or "viewer").lower()
        profile = record.get("profiles") or {}
        return cls(
            id=str(record.get("id")),
            team_id=str(record.get("team_id") or ""),
            user_id=str(record.get("user_id") or ""),
            role=role if role in TEAM_ROLES else "viewer",
            name=profile.get("name") if isinstance(profile, dict) else None,
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class Invite(Record):
    id: str
    type: str
    sender_id: str
    receiver_email: str
    status: str = "pending"
    team_id: Optional[str] = None
    sender_name: Optional[str] = None
    team_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Invite":
        sender = record.get("profiles") or {}
        team = record.get("teams") or {}
        return cls(
            id=str(record.get("id")),
            type=str(record.get("type") or ""),
            sender_id=str(record.get("sender_id") or ""),
            receiver_email=str(record.get("receiver_email") or ""),
            status=str(record.get("status") or "pending"),
            team_id=_str_or_none(record.get("team_id")),
            sender_name=(sender.get("name") if isinstance(sender, dict) else None) or None,
            team_name=(team.get("name") if isinstance(team, dict) else None) or None,
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class Partner(Record):
    id: str
    user_id: str
    partner_email: str
    status: str = "pending"
    partner_id: Optional[str] = None
    chat_room_id: Optional[str] = None
    partner_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Partner":
        profile = record.get("profiles") or {}
        partner_email = str(record.get("partner_email") or "")
        name = profile.get("name") if isinstance(profile, dict) else None
        return cls(
            id=str(record.get("id")),
            user_id=str(record.get("user_id") or ""),
            partner_email=partner_email,
            status=str(record.get("status") or "pending"),
            partner_id=_str_or_none(record.get("partner_id")),
            chat_room_id=_str_or_none(record.get("chat_room_id")),
            partner_name=name or partner_email,
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class ChatRoom(Record):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ChatRoom":
        return cls(
            id=str(record.get("id")),
            created_at=parse_datetime(record.get("created_at")),
            updated_at=parse_datetime(record.get("updated_at")),
        )


@dataclass
class Message(Record):
    id: str
    chat_room_id: str
    sender_id: str
    content: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Message":
        return cls(
            id=str(record.get("id")),
            chat_room_id=str(record.get("chat_room_id") or ""),
            sender_id=str(record.get("sender_id") or ""),
            content=str(record.get("content") or ""),
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class PartnerTask(Record):
    id: str
    chat_room_id: str
    created_by: str
    title: str
    completed: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PartnerTask":
        return cls(
            id=str(record.get("id")),
            chat_room_id=str(record.get("chat_room_id") or ""),
            created_by=str(record.get("created_by") or ""),
            title=str(record.get("title") or ""),
            completed=bool(record.get("completed")),
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class Notification(Record):
    id: str
    user_id: str
    type: str
    title: str
    message: str
    read: bool = False
    data: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Notification":
        data = record.get("data") or {}
        return cls(
            id=str(record.get("id")),
            user_id=str(record.get("user_id") or ""),
            type=str(record.get("type") or ""),
            title=str(record.get("title") or ""),
            message=str(record.get("message") or ""),
            read=bool(record.get("read")),
            data=dict(data) if isinstance(data, dict) else {},
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class CalendarTask(Record):
    id: str
    user_id: str
    date: Optional[date]
    title: str
    category: str
    time: Optional[str] = None
    description: Optional[str] = None
    completed: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CalendarTask":
        return cls(
            id=str(record.get("id")),
            user_id=str(record.get("user_id") or ""),
            date=parse_date(record.get("date")),
            title=str(record.get("title") or ""),
            category=str(record.get("category") or ""),
            time=record.get("time"),
            description=record.get("description"),
            completed=bool(record.get("completed")),
            created_at=parse_datetime(record.get("created_at")),
        )


@dataclass
class Event(Record):
    id: str
    user_id: str
    date: Optional[date]
    title: str
    time: Optional[str] = None
    venue: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        return cls(
            id=str(record.get("id")),
            user_id=str(record.get("user_id") or ""),
            date=parse_date(record.get("date")),
            title=str(record.get("title") or ""),
            time=record.get("time"),
            venue=record.get("venue"),
            created_at=parse_datetime(record.get("created_at")),
        )


__all__ = [
    "WEEKDAYS",
    "TEAM_ROLES",
    "INVITE_TYPES",
    "INVITE_STATUSES",
    "parse_date",
    "parse_datetime",
    "Profile",
    "Task",
    "Category",
    "Workspace",
    "Team",
    "TeamMember",
    "Invite",
    "Partner",
    "ChatRoom",
    "Message",
    "PartnerTask",
    "Notification",
    "CalendarTask",
    "Event",
]
