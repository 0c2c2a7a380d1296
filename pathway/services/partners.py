"""Progress partners: one-to-one accountability links with a shared chat room."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..auth.session import UserScope
from ..db.models import Invite, Partner
from ..errors import EntitlementError, NotFoundError, RemoteError, ValidationError

logger = logging.getLogger(__name__)


class PartnerService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def list_partners(self) -> List[Partner]:
        self.scope.entitlements.require("partners")
        return [Partner.from_record(row) for row in self.db.list_partners(self.scope.user_id)]

    def active_partners(self) -> List[Partner]:
        return [partner for partner in self.list_partners() if partner.status == "accepted"]

    def invite(self, email: Optional[str]) -> Invite:
        """
        Send a partner request to ``email``.

        The target must already have an account, the caller must be under the
        active partner limit, and no partnership between the two may exist.
        The partner row and the invite are written in that order; the invite
        notification is best effort.
        """

        entitlements = self.scope.entitlements
        entitlements.require("partners")

        target = (email or "").strip().lower()
        if not target or "@" not in target:
            raise ValidationError("Please enter a valid email address.")
        own_email = (self.scope.email or "").strip().lower()
        if target == own_email:
            raise ValidationError("You cannot add yourself as a partner.")

        active = [row for row in self.db.list_partners(self.scope.user_id) if row.get("status") == "accepted"]
        if len(active) >= entitlements.active_partner_limit:
            raise EntitlementError(
                f"You can only have {entitlements.active_partner_limit} active partners at a time.",
                title="Partner limit reached",
            )

        profiles = self.db.find_profiles_by_email(target)
        if not profiles:
            raise NotFoundError("No user found with that email address.")
        receiver_id = str(profiles[0].get("id"))

        if self.db.find_partnership(self.scope.user_id, own_email, target):
            raise ValidationError("A partnership with this user already exists.")

        partner_record = self.db.create_partner(self.scope.user_id, partner_email=target)
        if not partner_record:
            raise RemoteError("Failed to create partner request", operation="create_partner")

        try:
            invite_record = self.db.create_invite(
                invite_type="partner",
                sender_id=self.scope.user_id,
                receiver_email=target,
            )
        except RemoteError:
            self.db.delete_partner(str(partner_record.get("id")))
            raise
        if not invite_record:
            self.db.delete_partner(str(partner_record.get("id")))
            raise RemoteError("Failed to create invite", operation="create_invite")
        invite = Invite.from_record(invite_record)

        try:
            self.db.create_notification(
                receiver_id,
                notification_type="partner_invite",
                title="Partner Request",
                message=f"{self.scope.identity.display_name} wants to be your progress partner!",
                data={"invite_id": invite.id, "sender_id": self.scope.user_id},
            )
        except Exception as exc:
            logger.warning("Partner invite notification failed for %s: %s", target, exc)

        return invite

    def remove(self, partner_row_id: str) -> None:
        self.scope.entitlements.require("partners")
        rows = {str(row.get("id")): row for row in self.db.list_partners(self.scope.user_id)}
        if partner_row_id not in rows:
            raise NotFoundError("Partner not found")
        self.db.delete_partner(partner_row_id)


__all__ = ["PartnerService"]
