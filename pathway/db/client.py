"""
Database client for the Pathway Quest service.
Wraps every table read/write and server-side function the app relies on.
"""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from ..config import CONFIG
from ..errors import RemoteError

logger = logging.getLogger(__name__)


def _dev_mode_enabled() -> bool:
    value = os.getenv("DEVELOPMENT_MODE", "").strip().lower()
    return value not in {"", "0", "false", "off", "none"}


def _error_message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message.strip():
        return message.strip()
    return str(exc) or exc.__class__.__name__


def _rows(result: Any) -> List[Dict[str, Any]]:
    data = getattr(result, "data", None)
    if isinstance(data, list):
        return [row for row in data if isinstance(row, dict)]
    if isinstance(data, dict):
        return [data]
    return []


def _first(result: Any) -> Optional[Dict[str, Any]]:
    rows = _rows(result)
    return rows[0] if rows else None


def _iso_date(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)


class SupabaseDatabaseClient:
    """Database client for Supabase operations."""

    def __init__(self, access_token: Optional[str] = None):
        self.supabase_url = getattr(CONFIG, "supabase_url", None) or os.getenv("SUPABASE_URL")

        service_key = getattr(CONFIG, "supabase_service_role_key", None) or os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        anon_key = getattr(CONFIG, "supabase_anon_key", None) or os.getenv("SUPABASE_ANON_KEY")

        # Requests made on behalf of a user go through the anon key so row policies apply.
        if access_token or not service_key:
            self.supabase_key = anon_key
            self.using_service_role = False
        else:
            self.supabase_key = service_key
            self.using_service_role = True
            if _dev_mode_enabled():
                logger.info("DatabaseClient: using service role key (development mode)")

        if not self.supabase_url or not self.supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY (or SUPABASE_SERVICE_ROLE_KEY) environment variables are required")

        self.client: Client = create_client(self.supabase_url, self.supabase_key)
        if access_token:
            self.client.postgrest.auth(access_token)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _execute(self, operation: str, query: Any) -> Any:
        try:
            return query.execute()
        except Exception as exc:
            logger.warning("Supabase %s failed: %s", operation, exc)
            raise RemoteError(_error_message(exc), operation=operation) from exc

    def _rpc(self, name: str, params: Dict[str, Any]) -> Any:
        try:
            result = self.client.rpc(name, params).execute()
        except Exception as exc:
            logger.warning("Supabase rpc %s failed: %s", name, exc)
            raise RemoteError(_error_message(exc), operation=f"rpc:{name}") from exc
        return getattr(result, "data", None)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------
    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "get_profile",
            self.client.table("profiles").select("*").eq("id", user_id).limit(1),
        )
        return _first(result)

    def find_profiles_by_email(self, email: str) -> List[Dict[str, Any]]:
        result = self._execute(
            "find_profiles_by_email",
            self.client.table("profiles").select("id, name, email").ilike("email", email.strip()),
        )
        return _rows(result)

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "update_profile",
            self.client.table("profiles").update(dict(updates)).eq("id", user_id),
        )
        return _first(result)

    def update_user_streak(self, user_id: str) -> None:
        self._rpc("update_user_streak", {"user_uuid": user_id})

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def list_tasks(self, user_id: str, *, ascending: bool = True) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_tasks",
            self.client.table("tasks")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=not ascending),
        )
        return _rows(result)

    def list_pending_tasks(self, user_id: str) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_pending_tasks",
            self.client.table("tasks").select("*").eq("user_id", user_id).eq("completed", False),
        )
        return _rows(result)

    def get_task(self, task_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "get_task",
            self.client.table("tasks").select("*").eq("id", task_id).eq("user_id", user_id).limit(1),
        )
        return _first(result)

    def create_task(self, user_id: str, *, name: str, category: str, day: str) -> Optional[Dict[str, Any]]:
        payload = {"user_id": user_id, "name": name, "category": category, "day": day}
        return _first(self._execute("create_task", self.client.table("tasks").insert(payload)))

    def update_task(self, task_id: str, user_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "update_task",
            self.client.table("tasks").update(dict(updates)).eq("id", task_id).eq("user_id", user_id),
        )
        return _first(result)

    def delete_task(self, task_id: str, user_id: str) -> bool:
        result = self._execute(
            "delete_task",
            self.client.table("tasks").delete().eq("id", task_id).eq("user_id", user_id),
        )
        data = getattr(result, "data", None)
        if data is None:
            # Supabase returns None when returning="minimal"; assume success
            return True
        return len(data) > 0

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def list_categories(self, user_id: str) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_categories",
            self.client.table("categories").select("*").eq("user_id", user_id).order("name"),
        )
        return _rows(result)

    def create_category(self, user_id: str, *, name: str, color: str) -> Optional[Dict[str, Any]]:
        payload = {"user_id": user_id, "name": name, "color": color}
        return _first(self._execute("create_category", self.client.table("categories").insert(payload)))

    def delete_category(self, category_id: str, user_id: str) -> bool:
        result = self._execute(
            "delete_category",
            self.client.table("categories").delete().eq("id", category_id).eq("user_id", user_id),
        )
        data = getattr(result, "data", None)
        return True if data is None else len(data) > 0

    # ------------------------------------------------------------------
    # Workspaces
    # ------------------------------------------------------------------
    def list_workspaces(self, user_id: str) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_workspaces",
            self.client.table("workspaces").select("*").eq("user_id", user_id).order("created_at"),
        )
        return _rows(result)

    def create_workspace(
        self,
        user_id: str,
        *,
        name: str,
        emoji: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        payload = {"user_id": user_id, "name": name, "emoji": emoji, "color": color}
        return _first(self._execute("create_workspace", self.client.table("workspaces").insert(payload)))

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------
    def list_teams(self, user_id: str) -> List[Dict[str, Any]]:
        # Row policies expose teams the user owns or belongs to.
        result = self._execute(
            "list_teams",
            self.client.table("teams").select("*").order("created_at", desc=True),
        )
        return _rows(result)

    def get_team(self, team_id: str) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "get_team",
            self.client.table("teams").select("*").eq("id", team_id).limit(1),
        )
        return _first(result)

    def create_team(self, owner_id: str, *, name: str) -> Optional[Dict[str, Any]]:
        payload = {"name": name, "owner_id": owner_id}
        return _first(self._execute("create_team", self.client.table("teams").insert(payload)))

    def delete_team(self, team_id: str) -> None:
        self._execute("delete_team", self.client.table("teams").delete().eq("id", team_id))

    def list_team_members(self, team_id: str) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_team_members",
            self.client.table("team_members").select("*, profiles(name)").eq("team_id", team_id),
        )
        return _rows(result)

    def get_team_membership(self, team_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "get_team_membership",
            self.client.table("team_members")
            .select("*")
            .eq("team_id", team_id)
            .eq("user_id", user_id)
            .limit(1),
        )
        return _first(result)

    def add_team_member(self, team_id: str, user_id: str, *, role: str) -> Optional[Dict[str, Any]]:
        payload = {"team_id": team_id, "user_id": user_id, "role": role}
        return _first(self._execute("add_team_member", self.client.table("team_members").insert(payload)))

    def delete_team_member(self, membership_id: str) -> None:
        self._execute(
            "delete_team_member",
            self.client.table("team_members").delete().eq("id", membership_id),
        )

    def is_team_owner(self, team_id: str) -> bool:
        return bool(self._rpc("is_team_owner", {"team_uuid": team_id}))

    # ------------------------------------------------------------------
    # Invites
    # ------------------------------------------------------------------
    def list_pending_invites(self, email: str, *, invite_type: Optional[str] = None) -> List[Dict[str, Any]]:
        query = (
            self.client.table("invites")
            .select("*, profiles!invites_sender_id_fkey(name), teams(name)")
            .eq("receiver_email", email)
            .eq("status", "pending")
        )
        if invite_type:
            query = query.eq("type", invite_type)
        result = self._execute("list_pending_invites", query.order("created_at", desc=True))
        return _rows(result)

    def get_invite(self, invite_id: str) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "get_invite",
            self.client.table("invites").select("*").eq("id", invite_id).limit(1),
        )
        return _first(result)

    def create_invite(
        self,
        *,
        invite_type: str,
        sender_id: str,
        receiver_email: str,
        team_id: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "type": invite_type,
            "sender_id": sender_id,
            "receiver_email": receiver_email,
        }
        if team_id:
            payload["team_id"] = team_id
        return _first(self._execute("create_invite", self.client.table("invites").insert(payload)))

    def update_invite_status(self, invite_id: str, status: str) -> Optional[Dict[str, Any]]:
        updates = {"status": status, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = self._execute(
            "update_invite_status",
            self.client.table("invites").update(updates).eq("id", invite_id),
        )
        return _first(result)

    # ------------------------------------------------------------------
    # Partners
    # ------------------------------------------------------------------
    def list_partners(self, user_id: str) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_partners",
            self.client.table("partners")
            .select("*")
            .or_(f"user_id.eq.{user_id},partner_id.eq.{user_id}")
            .order("created_at", desc=True),
        )
        return _rows(result)

    def find_partnership(self, user_id: str, user_email: str, partner_email: str) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "find_partnership",
            self.client.table("partners")
            .select("id")
            .or_(
                f"and(user_id.eq.{user_id},partner_email.eq.{partner_email}),"
                f"and(partner_id.eq.{user_id},partner_email.eq.{user_email})"
            )
            .limit(1),
        )
        return _first(result)

    def find_pending_partner(self, sender_id: str, partner_email: str) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "find_pending_partner",
            self.client.table("partners")
            .select("*")
            .eq("user_id", sender_id)
            .ilike("partner_email", partner_email)
            .order("created_at", desc=True)
            .limit(1),
        )
        return _first(result)

    def create_partner(self, user_id: str, *, partner_email: str) -> Optional[Dict[str, Any]]:
        payload = {"user_id": user_id, "partner_email": partner_email, "status": "pending"}
        return _first(self._execute("create_partner", self.client.table("partners").insert(payload)))

    def update_partner(self, partner_row_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "update_partner",
            self.client.table("partners").update(dict(updates)).eq("id", partner_row_id),
        )
        return _first(result)

    def delete_partner(self, partner_row_id: str) -> None:
        self._execute("delete_partner", self.client.table("partners").delete().eq("id", partner_row_id))

    # ------------------------------------------------------------------
    # Chat rooms, messages and shared tasks
    # ------------------------------------------------------------------
    def create_chat_room(self) -> Optional[Dict[str, Any]]:
        return _first(self._execute("create_chat_room", self.client.table("chat_rooms").insert({})))

    def delete_chat_room(self, room_id: str) -> None:
        self._execute("delete_chat_room", self.client.table("chat_rooms").delete().eq("id", room_id))

    def list_messages(self, room_id: str) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_messages",
            self.client.table("messages").select("*").eq("chat_room_id", room_id).order("created_at"),
        )
        return _rows(result)

    def insert_message(self, room_id: str, sender_id: str, content: str) -> Optional[Dict[str, Any]]:
        payload = {"chat_room_id": room_id, "sender_id": sender_id, "content": content}
        return _first(self._execute("insert_message", self.client.table("messages").insert(payload)))

    def list_partner_tasks(self, room_id: str) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_partner_tasks",
            self.client.table("partner_tasks")
            .select("*")
            .eq("chat_room_id", room_id)
            .order("created_at", desc=True),
        )
        return _rows(result)

    def create_partner_task(self, room_id: str, created_by: str, title: str) -> Optional[Dict[str, Any]]:
        payload = {"chat_room_id": room_id, "created_by": created_by, "title": title}
        return _first(self._execute("create_partner_task", self.client.table("partner_tasks").insert(payload)))

    def update_partner_task(self, task_id: str, room_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        result = self._execute(
            "update_partner_task",
            self.client.table("partner_tasks")
            .update(dict(updates))
            .eq("id", task_id)
            .eq("chat_room_id", room_id),
        )
        return _first(result)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def list_notifications(self, user_id: str, *, limit: int = 20) -> List[Dict[str, Any]]:
        result = self._execute(
            "list_notifications",
            self.client.table("notifications")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit),
        )
        return _rows(result)

    def create_notification(
        self,
        user_id: str,
        *,
        notification_type: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        payload = {
            "user_id": user_id,
            "type": notification_type,
            "title": title,
            "message": message,
            "data": data or {},
        }
        return _first(self._execute("create_notification", self.client.table("notifications").insert(payload)))

    def mark_notification_read(self, notification_id: str, user_id: str) -> None:
        self._execute(
            "mark_notification_read",
            self.client.table("notifications")
            .update({"read": True})
            .eq("id", notification_id)
            .eq("user_id", user_id),
        )

    def mark_all_notifications_read(self, user_id: str) -> None:
        self._execute(
            "mark_all_notifications_read",
            self.client.table("notifications")
            .update({"read": True})
            .eq("user_id", user_id)
            .eq("read", False),
        )

    def delete_notifications_by_type(self, user_id: str, notification_type: str) -> None:
        self._execute(
            "delete_notifications_by_type",
            self.client.table("notifications")
            .delete()
            .eq("user_id", user_id)
            .eq("type", notification_type),
        )

    # ------------------------------------------------------------------
    # Calendar
    # ------------------------------------------------------------------
    def list_events(self, user_id: str, *, on_date: Optional[date] = None) -> List[Dict[str, Any]]:
        query = self.client.table("events").select("*").eq("user_id", user_id)
        if on_date is not None:
            query = query.eq("date", _iso_date(on_date))
        result = self._execute("list_events", query.order("date").order("time"))
        return _rows(result)

    def create_event(
        self,
        user_id: str,
        *,
        title: str,
        on_date: date,
        time: Optional[str] = None,
        venue: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        payload = {
            "user_id": user_id,
            "title": title,
            "date": _iso_date(on_date),
            "time": time,
            "venue": venue,
        }
        return _first(self._execute("create_event", self.client.table("events").insert(payload)))

    def list_calendar_tasks(self, user_id: str, *, on_date: Optional[date] = None) -> List[Dict[str, Any]]:
        query = self.client.table("calendar_tasks").select("*").eq("user_id", user_id)
        if on_date is not None:
            query = query.eq("date", _iso_date(on_date))
        result = self._execute("list_calendar_tasks", query.order("date"))
        return _rows(result)


# Global database client instance
_database_client: Optional[SupabaseDatabaseClient] = None


def get_database_client(access_token: Optional[str] = None) -> SupabaseDatabaseClient:
    """
    Return a database client.

    Without a token the shared service client is returned; with a token a
    fresh client scoped to that user's row policies is built.
    """
    global _database_client
    if access_token:
        return SupabaseDatabaseClient(access_token=access_token)
    if _database_client is None:
        # Ensure environment is loaded
        from dotenv import load_dotenv

        load_dotenv()

        _database_client = SupabaseDatabaseClient()
    return _database_client


# Simple alias for readability
DatabaseClient = SupabaseDatabaseClient
