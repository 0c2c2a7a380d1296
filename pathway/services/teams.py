"""Team dashboards: teams, their members and team invitations."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..auth.session import UserScope
from ..db.models import Invite, Team, TeamMember
from ..errors import EntitlementError, NotFoundError, PathwayError, RemoteError, ValidationError

logger = logging.getLogger(__name__)

OWNER_ROLE = "admin"


def _clean_email(value: Optional[str]) -> str:
    return (value or "").strip().lower()


class TeamService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def _gate(self) -> None:
        self.scope.entitlements.require("teams")

    def list_teams(self) -> List[Team]:
        self._gate()
        return [Team.from_record(row) for row in self.db.list_teams(self.scope.user_id)]

    def create_team(self, name: Optional[str]) -> Team:
        """Create a team owned by the caller, who also becomes its admin member."""

        self._gate()
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Please enter a team name.")

        limit = self.scope.entitlements.team_limit
        owned = [row for row in self.db.list_teams(self.scope.user_id) if row.get("owner_id") == self.scope.user_id]
        if len(owned) >= limit:
            raise EntitlementError(f"You can create up to {limit} teams.", title="Team limit reached")

        record = self.db.create_team(self.scope.user_id, name=cleaned)
        if not record:
            raise RemoteError("Failed to create team", operation="create_team")
        team = Team.from_record(record)

        try:
            if not self.db.add_team_member(team.id, self.scope.user_id, role=OWNER_ROLE):
                raise RemoteError("Failed to add team owner", operation="add_team_member")
        except PathwayError:
            logger.warning("Owner membership failed for team %s; removing team", team.id)
            self.db.delete_team(team.id)
            raise
        return team

    def list_members(self, team_id: str) -> List[TeamMember]:
        self._gate()
        if not self.db.get_team(team_id):
            raise NotFoundError("Team not found")
        return [TeamMember.from_record(row) for row in self.db.list_team_members(team_id)]

    def invite_member(self, team_id: str, email: Optional[str]) -> Invite:
        """Invite ``email`` to the team. Only the team owner may invite."""

        self._gate()
        receiver = _clean_email(email)
        if not receiver or "@" not in receiver:
            raise ValidationError("Please enter a valid email address.")

        team_record = self.db.get_team(team_id)
        if not team_record:
            raise NotFoundError("Team not found")
        if not self.db.is_team_owner(team_id):
            raise EntitlementError("Only the team owner can invite members.", title="Not allowed")
        if self.scope.email and receiver == _clean_email(self.scope.email):
            raise ValidationError("You cannot invite yourself.")

        record = self.db.create_invite(
            invite_type="team",
            sender_id=self.scope.user_id,
            receiver_email=receiver,
            team_id=team_id,
        )
        if not record:
            raise RemoteError("Failed to create invite", operation="create_invite")
        invite = Invite.from_record(record)
        team = Team.from_record(team_record)
        self._notify_receiver(receiver, team, invite)
        return invite

    def _notify_receiver(self, receiver: str, team: Team, invite: Invite) -> None:
        try:
            profiles = self.db.find_profiles_by_email(receiver)
            if not profiles:
                return
            sender = self.scope.identity.display_name
            self.db.create_notification(
                str(profiles[0].get("id")),
                notification_type="team_invite",
                title="Team Invitation",
                message=f'{sender} invited you to join "{team.name}"',
                data={"invite_id": invite.id, "team_id": team.id},
            )
        except Exception as exc:
            logger.warning("Team invite notification failed for %s: %s", receiver, exc)


__all__ = ["OWNER_ROLE", "TeamService"]
