"""In-memory stand-in for SupabaseDatabaseClient used across the test suite."""

from __future__ import annotations

import itertools
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

WRITE_PREFIXES = ("create_", "update_", "delete_", "add_", "insert_", "mark_")


def _iso(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)


class FakeDB:
    """
    Mirrors the public surface of ``SupabaseDatabaseClient``.

    Rows live in ``tables``; every call is appended to ``calls`` and any
    method listed in ``fail`` raises the configured exception instead.
    """

    def __init__(self, acting_user_id: str = "user-123") -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.calls: List[str] = []
        self.fail: Dict[str, Exception] = {}
        self.acting_user_id = acting_user_id
        self._ids = itertools.count(1)
        self._now = datetime(2024, 5, 6, 9, 0, tzinfo=timezone.utc)

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------
    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail:
            raise self.fail[name]

    def writes(self) -> List[str]:
        return [name for name in self.calls if name.startswith(WRITE_PREFIXES)]

    def count(self, name: str) -> int:
        return self.calls.count(name)

    def _tick(self) -> str:
        self._now += timedelta(seconds=1)
        return self._now.isoformat()

    def seed(self, table: str, **row: Any) -> Dict[str, Any]:
        row.setdefault("id", f"{table}-{next(self._ids)}")
        row.setdefault("created_at", self._tick())
        self.tables[table].append(row)
        return row

    def _insert(self, table: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return dict(self.seed(table, **dict(payload)))

    def _find(self, table: str, **match: Any) -> List[Dict[str, Any]]:
        return [row for row in self.tables[table] if all(row.get(k) == v for k, v in match.items())]

    def _update(self, table: str, updates: Dict[str, Any], **match: Any) -> Optional[Dict[str, Any]]:
        rows = self._find(table, **match)
        for row in rows:
            row.update(updates)
        return dict(rows[0]) if rows else None

    def _delete(self, table: str, **match: Any) -> int:
        before = len(self.tables[table])
        self.tables[table] = [
            row for row in self.tables[table] if not all(row.get(k) == v for k, v in match.items())
        ]
        return before - len(self.tables[table])

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------
    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        self._call("get_profile")
        rows = self._find("profiles", id=user_id)
        return dict(rows[0]) if rows else None

    def find_profiles_by_email(self, email: str) -> List[Dict[str, Any]]:
        self._call("find_profiles_by_email")
        target = email.strip().lower()
        return [dict(row) for row in self.tables["profiles"] if (row.get("email") or "").lower() == target]

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self._call("update_profile")
        return self._update("profiles", dict(updates), id=user_id)

    def update_user_streak(self, user_id: str) -> None:
        self._call("update_user_streak")
        for row in self._find("profiles", id=user_id):
            row["current_streak"] = int(row.get("current_streak") or 0) + 1

    # ------------------------------------------------------------------
    # Tasks and categories
    # ------------------------------------------------------------------
    def list_tasks(self, user_id: str, *, ascending: bool = True) -> List[Dict[str, Any]]:
        self._call("list_tasks")
        rows = sorted(self._find("tasks", user_id=user_id), key=lambda row: row["created_at"])
        return [dict(row) for row in (rows if ascending else reversed(rows))]

    def list_pending_tasks(self, user_id: str) -> List[Dict[str, Any]]:
        self._call("list_pending_tasks")
        return [dict(row) for row in self._find("tasks", user_id=user_id) if not row.get("completed")]

    def get_task(self, task_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        self._call("get_task")
        rows = self._find("tasks", id=task_id, user_id=user_id)
        return dict(rows[0]) if rows else None

    def create_task(self, user_id: str, *, name: str, category: str, day: str) -> Dict[str, Any]:
        self._call("create_task")
        return self._insert("tasks", {"user_id": user_id, "name": name, "category": category, "day": day, "completed": False})

    def update_task(self, task_id: str, user_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self._call("update_task")
        return self._update("tasks", dict(updates), id=task_id, user_id=user_id)

    def delete_task(self, task_id: str, user_id: str) -> bool:
        self._call("delete_task")
        return self._delete("tasks", id=task_id, user_id=user_id) > 0

    def list_categories(self, user_id: str) -> List[Dict[str, Any]]:
        self._call("list_categories")
        return sorted((dict(row) for row in self._find("categories", user_id=user_id)), key=lambda row: row["name"])

    def create_category(self, user_id: str, *, name: str, color: str) -> Dict[str, Any]:
        self._call("create_category")
        return self._insert("categories", {"user_id": user_id, "name": name, "color": color})

    def delete_category(self, category_id: str, user_id: str) -> bool:
        self._call("delete_category")
        return self._delete("categories", id=category_id, user_id=user_id) > 0

    # ------------------------------------------------------------------
    # Workspaces and teams
    # ------------------------------------------------------------------
    def list_workspaces(self, user_id: str) -> List[Dict[str, Any]]:
        self._call("list_workspaces")
        return [dict(row) for row in self._find("workspaces", user_id=user_id)]

    def create_workspace(self, user_id: str, *, name: str, emoji=None, color=None) -> Dict[str, Any]:
        self._call("create_workspace")
        return self._insert("workspaces", {"user_id": user_id, "name": name, "emoji": emoji, "color": color})

    def list_teams(self, user_id: str) -> List[Dict[str, Any]]:
        self._call("list_teams")
        member_of = {row["team_id"] for row in self._find("team_members", user_id=user_id)}
        return [
            dict(row)
            for row in self.tables["teams"]
            if row.get("owner_id") == user_id or row["id"] in member_of
        ]

    def get_team(self, team_id: str) -> Optional[Dict[str, Any]]:
        self._call("get_team")
        rows = self._find("teams", id=team_id)
        return dict(rows[0]) if rows else None

    def create_team(self, owner_id: str, *, name: str) -> Dict[str, Any]:
        self._call("create_team")
        return self._insert("teams", {"owner_id": owner_id, "name": name})

    def delete_team(self, team_id: str) -> None:
        self._call("delete_team")
        self._delete("teams", id=team_id)

    def list_team_members(self, team_id: str) -> List[Dict[str, Any]]:
        self._call("list_team_members")
        members = []
        for row in self._find("team_members", team_id=team_id):
            profile = next(iter(self._find("profiles", id=row["user_id"])), {})
            members.append({**row, "profiles": {"name": profile.get("name")}})
        return members

    def get_team_membership(self, team_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        self._call("get_team_membership")
        rows = self._find("team_members", team_id=team_id, user_id=user_id)
        return dict(rows[0]) if rows else None

    def add_team_member(self, team_id: str, user_id: str, *, role: str) -> Dict[str, Any]:
        self._call("add_team_member")
        return self._insert("team_members", {"team_id": team_id, "user_id": user_id, "role": role})

    def delete_team_member(self, membership_id: str) -> None:
        self._call("delete_team_member")
        self._delete("team_members", id=membership_id)

    def is_team_owner(self, team_id: str) -> bool:
        self._call("is_team_owner")
        return bool(self._find("teams", id=team_id, owner_id=self.acting_user_id))

    # ------------------------------------------------------------------
    # Invites and partners
    # ------------------------------------------------------------------
    def list_pending_invites(self, email: str, *, invite_type: Optional[str] = None) -> List[Dict[str, Any]]:
        self._call("list_pending_invites")
        rows = []
        for row in self._find("invites", receiver_email=email, status="pending"):
            if invite_type and row.get("type") != invite_type:
                continue
            sender = next(iter(self._find("profiles", id=row.get("sender_id"))), {})
            team = next(iter(self._find("teams", id=row.get("team_id"))), {}) if row.get("team_id") else None
            rows.append({**row, "profiles": {"name": sender.get("name")}, "teams": team and {"name": team.get("name")}})
        return sorted(rows, key=lambda row: row["created_at"], reverse=True)

    def get_invite(self, invite_id: str) -> Optional[Dict[str, Any]]:
        self._call("get_invite")
        rows = self._find("invites", id=invite_id)
        return dict(rows[0]) if rows else None

    def create_invite(self, *, invite_type: str, sender_id: str, receiver_email: str, team_id=None) -> Dict[str, Any]:
        self._call("create_invite")
        payload = {"type": invite_type, "sender_id": sender_id, "receiver_email": receiver_email, "status": "pending"}
        if team_id:
            payload["team_id"] = team_id
        return self._insert("invites", payload)

    def update_invite_status(self, invite_id: str, status: str) -> Optional[Dict[str, Any]]:
        self._call("update_invite_status")
        return self._update("invites", {"status": status}, id=invite_id)

    def list_partners(self, user_id: str) -> List[Dict[str, Any]]:
        self._call("list_partners")
        return [
            dict(row)
            for row in self.tables["partners"]
            if row.get("user_id") == user_id or row.get("partner_id") == user_id
        ]

    def find_partnership(self, user_id: str, user_email: str, partner_email: str) -> Optional[Dict[str, Any]]:
        self._call("find_partnership")
        for row in self.tables["partners"]:
            forward = row.get("user_id") == user_id and row.get("partner_email") == partner_email
            backward = row.get("partner_id") == user_id and row.get("partner_email") == user_email
            if forward or backward:
                return {"id": row["id"]}
        return None

    def find_pending_partner(self, sender_id: str, partner_email: str) -> Optional[Dict[str, Any]]:
        self._call("find_pending_partner")
        for row in reversed(self.tables["partners"]):
            if row.get("user_id") == sender_id and (row.get("partner_email") or "").lower() == partner_email.lower():
                return dict(row)
        return None

    def create_partner(self, user_id: str, *, partner_email: str) -> Dict[str, Any]:
        self._call("create_partner")
        return self._insert("partners", {"user_id": user_id, "partner_email": partner_email, "status": "pending"})

    def update_partner(self, partner_row_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self._call("update_partner")
        return self._update("partners", dict(updates), id=partner_row_id)

    def delete_partner(self, partner_row_id: str) -> None:
        self._call("delete_partner")
        self._delete("partners", id=partner_row_id)

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------
    def create_chat_room(self) -> Dict[str, Any]:
        self._call("create_chat_room")
        return self._insert("chat_rooms", {})

    def delete_chat_room(self, room_id: str) -> None:
        self._call("delete_chat_room")
        self._delete("chat_rooms", id=room_id)

    def list_messages(self, room_id: str) -> List[Dict[str, Any]]:
        self._call("list_messages")
        return [dict(row) for row in self._find("messages", chat_room_id=room_id)]

    def insert_message(self, room_id: str, sender_id: str, content: str) -> Dict[str, Any]:
        self._call("insert_message")
        return self._insert("messages", {"chat_room_id": room_id, "sender_id": sender_id, "content": content})

    def list_partner_tasks(self, room_id: str) -> List[Dict[str, Any]]:
        self._call("list_partner_tasks")
        return [dict(row) for row in self._find("partner_tasks", chat_room_id=room_id)]

    def create_partner_task(self, room_id: str, created_by: str, title: str) -> Dict[str, Any]:
        self._call("create_partner_task")
        return self._insert(
            "partner_tasks",
            {"chat_room_id": room_id, "created_by": created_by, "title": title, "completed": False},
        )

    def update_partner_task(self, task_id: str, room_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self._call("update_partner_task")
        return self._update("partner_tasks", dict(updates), id=task_id, chat_room_id=room_id)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def list_notifications(self, user_id: str, *, limit: int = 20) -> List[Dict[str, Any]]:
        self._call("list_notifications")
        rows = sorted(self._find("notifications", user_id=user_id), key=lambda row: row["created_at"], reverse=True)
        return [dict(row) for row in rows[:limit]]

    def create_notification(self, user_id: str, *, notification_type: str, title: str, message: str, data=None):
        self._call("create_notification")
        return self._insert(
            "notifications",
            {
                "user_id": user_id,
                "type": notification_type,
                "title": title,
                "message": message,
                "data": data or {},
                "read": False,
            },
        )

    def mark_notification_read(self, notification_id: str, user_id: str) -> None:
        self._call("mark_notification_read")
        self._update("notifications", {"read": True}, id=notification_id, user_id=user_id)

    def mark_all_notifications_read(self, user_id: str) -> None:
        self._call("mark_all_notifications_read")
        self._update("notifications", {"read": True}, user_id=user_id)

    def delete_notifications_by_type(self, user_id: str, notification_type: str) -> None:
        self._call("delete_notifications_by_type")
        self._delete("notifications", user_id=user_id, type=notification_type)

    # ------------------------------------------------------------------
    # Calendar
    # ------------------------------------------------------------------
    def list_events(self, user_id: str, *, on_date=None) -> List[Dict[str, Any]]:
        self._call("list_events")
        rows = self._find("events", user_id=user_id)
        if on_date is not None:
            rows = [row for row in rows if row.get("date") == _iso(on_date)]
        return [dict(row) for row in rows]

    def create_event(self, user_id: str, *, title: str, on_date, time=None, venue=None) -> Dict[str, Any]:
        self._call("create_event")
        return self._insert(
            "events",
            {"user_id": user_id, "title": title, "date": _iso(on_date), "time": time, "venue": venue},
        )

    def list_calendar_tasks(self, user_id: str, *, on_date=None) -> List[Dict[str, Any]]:
        self._call("list_calendar_tasks")
        rows = self._find("calendar_tasks", user_id=user_id)
        if on_date is not None:
            rows = [row for row in rows if row.get("date") == _iso(on_date)]
        return [dict(row) for row in rows]


@pytest.fixture
def db() -> FakeDB:
    fake = FakeDB()
    fake.seed(
        "profiles",
        id="user-123",
        name="Test User",
        email="test@example.com",
        plan="premium",
        current_streak=0,
    )
    return fake


@pytest.fixture
def fake_db_factory():
    return FakeDB
