"""Partner chat: messages and shared tasks inside an accepted partnership's room."""

from __future__ import annotations

from typing import Any, List, Optional

from ..auth.session import UserScope
from ..db.models import Message, Partner, PartnerTask
from ..errors import NotFoundError, RemoteError, ValidationError

MAX_MESSAGE_LENGTH = 2000


class ChatService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def rooms(self) -> List[Partner]:
        """Accepted partnerships that have a room, seen from either side."""

        self.scope.entitlements.require("partners")
        partners = [Partner.from_record(row) for row in self.db.list_partners(self.scope.user_id)]
        return [partner for partner in partners if partner.status == "accepted" and partner.chat_room_id]

    def _authorize(self, room_id: str) -> Partner:
        for partner in self.rooms():
            if partner.chat_room_id == room_id:
                return partner
        raise NotFoundError("Chat room not found")

    def list_messages(self, room_id: str) -> List[Message]:
        self._authorize(room_id)
        return [Message.from_record(row) for row in self.db.list_messages(room_id)]

    def send_message(self, room_id: str, content: Optional[str]) -> Message:
        text = (content or "").strip()
        if not text:
            raise ValidationError("Message cannot be empty.")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"Messages are limited to {MAX_MESSAGE_LENGTH} characters.")
        self._authorize(room_id)
        record = self.db.insert_message(room_id, self.scope.user_id, text)
        if not record:
            raise RemoteError("Failed to send message", operation="insert_message")
        return Message.from_record(record)

    def list_tasks(self, room_id: str) -> List[PartnerTask]:
        self._authorize(room_id)
        return [PartnerTask.from_record(row) for row in self.db.list_partner_tasks(room_id)]

    def add_task(self, room_id: str, title: Optional[str]) -> PartnerTask:
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("Please enter a task title.")
        self._authorize(room_id)
        record = self.db.create_partner_task(room_id, self.scope.user_id, cleaned)
        if not record:
            raise RemoteError("Failed to add shared task", operation="create_partner_task")
        return PartnerTask.from_record(record)

    def toggle_task(self, room_id: str, task_id: str) -> PartnerTask:
        self._authorize(room_id)
        current = next(
            (PartnerTask.from_record(row) for row in self.db.list_partner_tasks(room_id) if str(row.get("id")) == task_id),
            None,
        )
        if current is None:
            raise NotFoundError("Shared task not found")
        record = self.db.update_partner_task(task_id, room_id, {"completed": not current.completed})
        if not record:
            raise RemoteError("Failed to update shared task", operation="update_partner_task")
        return PartnerTask.from_record(record)


__all__ = ["ChatService", "MAX_MESSAGE_LENGTH"]
