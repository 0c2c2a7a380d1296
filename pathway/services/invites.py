"""
Invite lifecycle for team and partner invitations.

An invite moves one way, from ``pending`` to ``accepted`` or ``declined``.
Acceptance writes the grant first (team membership, or chat room plus
partner link) and flips the invite status last. The writes run as a
:class:`~pathway.core.saga.Saga`, so a failure part way through undoes the
earlier writes and the invite stays ``pending``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from ..auth.session import UserScope
from ..core.saga import Saga
from ..db.models import Invite, Partner, TeamMember
from ..errors import InvalidTransition, NotFoundError, RemoteError

logger = logging.getLogger(__name__)

ACCEPTED_TEAM_ROLE = "editor"


@dataclass
class AcceptResult:
    invite: Invite
    membership: Optional[TeamMember] = None
    partner: Optional[Partner] = None
    chat_room_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invite": self.invite.to_dict(),
            "membership": self.membership.to_dict() if self.membership else None,
            "partner": self.partner.to_dict() if self.partner else None,
            "chat_room_id": self.chat_room_id,
        }


class InviteService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    @property
    def _email(self) -> str:
        return (self.scope.email or "").strip().lower()

    def list_pending(self, invite_type: Optional[str] = None) -> List[Invite]:
        if not self._email:
            return []
        rows = self.db.list_pending_invites(self._email, invite_type=invite_type)
        return [Invite.from_record(row) for row in rows]

    def _load_pending(self, invite_id: str) -> Invite:
        record = self.db.get_invite(invite_id)
        if not record:
            raise NotFoundError("Invite not found")
        invite = Invite.from_record(record)
        if invite.receiver_email.strip().lower() != self._email:
            raise NotFoundError("Invite not found")
        if not invite.is_pending:
            raise InvalidTransition(f"Invite has already been {invite.status}.")
        return invite

    def decline(self, invite_id: str) -> Invite:
        invite = self._load_pending(invite_id)
        record = self.db.update_invite_status(invite.id, "declined")
        logger.info("Invite %s declined by %s", invite.id, self.scope.user_id)
        return Invite.from_record(record) if record else replace(invite, status="declined")

    def accept(self, invite_id: str) -> AcceptResult:
        invite = self._load_pending(invite_id)
        if invite.type == "team":
            result = self._accept_team(invite)
        elif invite.type == "partner":
            result = self._accept_partner(invite)
        else:
            raise InvalidTransition(f"Unsupported invite type: {invite.type}")
        logger.info("Invite %s accepted by %s", invite.id, self.scope.user_id)
        return result

    # ------------------------------------------------------------------
    # Team
    # ------------------------------------------------------------------
    def _accept_team(self, invite: Invite) -> AcceptResult:
        if not invite.team_id:
            raise InvalidTransition("Team invite is missing its team.")
        user_id = self.scope.user_id
        team_id = invite.team_id

        def grant(ctx: Dict[str, Any]) -> Dict[str, Any]:
            existing = self.db.get_team_membership(team_id, user_id)
            if existing:
                ctx["membership_created"] = False
                return existing
            created = self.db.add_team_member(team_id, user_id, role=ACCEPTED_TEAM_ROLE)
            if not created:
                raise RemoteError("Failed to add team member", operation="add_team_member")
            ctx["membership_created"] = True
            return created

        def revoke(ctx: Dict[str, Any]) -> None:
            if ctx.get("membership_created"):
                self.db.delete_team_member(str(ctx["membership"].get("id")))

        saga = Saga("accept_team_invite")
        saga.step("membership", grant, revoke)
        saga.step("status", lambda ctx: self.db.update_invite_status(invite.id, "accepted"))
        ctx = saga.run()

        return AcceptResult(
            invite=self._accepted(invite, ctx.get("status")),
            membership=TeamMember.from_record(ctx["membership"]),
        )

    # ------------------------------------------------------------------
    # Partner
    # ------------------------------------------------------------------
    def _accept_partner(self, invite: Invite) -> AcceptResult:
        partner_record = self.db.find_pending_partner(invite.sender_id, invite.receiver_email)
        if not partner_record:
            raise NotFoundError("Partner request not found")
        partner = Partner.from_record(partner_record)
        previous = {
            "status": partner.status,
            "chat_room_id": partner.chat_room_id,
            "partner_id": partner.partner_id,
        }

        def open_room(ctx: Dict[str, Any]) -> str:
            if partner.chat_room_id:
                ctx["room_created"] = False
                return partner.chat_room_id
            room = self.db.create_chat_room()
            if not room or not room.get("id"):
                raise RemoteError("Failed to create chat room", operation="create_chat_room")
            ctx["room_created"] = True
            return str(room["id"])

        def close_room(ctx: Dict[str, Any]) -> None:
            if ctx.get("room_created"):
                self.db.delete_chat_room(ctx["chat_room"])

        def link(ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
            return self.db.update_partner(
                partner.id,
                {"status": "accepted", "chat_room_id": ctx["chat_room"], "partner_id": self.scope.user_id},
            )

        def unlink(ctx: Dict[str, Any]) -> None:
            self.db.update_partner(partner.id, previous)

        saga = Saga("accept_partner_invite")
        saga.step("chat_room", open_room, close_room)
        saga.step("partner", link, unlink)
        saga.step("status", lambda ctx: self.db.update_invite_status(invite.id, "accepted"))
        ctx = saga.run()

        linked = ctx.get("partner")
        if linked:
            updated_partner = Partner.from_record(linked)
        else:
            updated_partner = replace(
                partner,
                status="accepted",
                chat_room_id=ctx["chat_room"],
                partner_id=self.scope.user_id,
            )
        return AcceptResult(
            invite=self._accepted(invite, ctx.get("status")),
            partner=updated_partner,
            chat_room_id=ctx["chat_room"],
        )

    @staticmethod
    def _accepted(invite: Invite, record: Optional[Dict[str, Any]]) -> Invite:
        if record:
            return Invite.from_record(record)
        return replace(invite, status="accepted")


__all__ = ["ACCEPTED_TEAM_ROLE", "AcceptResult", "InviteService"]
