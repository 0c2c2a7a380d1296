"""Workspaces: named partitions of a user's tasks, capped by plan."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..auth.session import UserScope
from ..core.onboarding import DEFAULT_WORKSPACE_COLOR, DEFAULT_WORKSPACE_EMOJI
from ..db.models import Workspace
from ..errors import EntitlementError, RemoteError, ValidationError

logger = logging.getLogger(__name__)


class WorkspaceService:
    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def list_workspaces(self) -> List[Workspace]:
        return [Workspace.from_record(row) for row in self.db.list_workspaces(self.scope.user_id)]

    def create_workspace(
        self,
        name: Optional[str],
        *,
        emoji: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Workspace:
        """Create an additional workspace. All gating happens before the insert."""

        entitlements = self.scope.entitlements
        entitlements.require("custom_workspaces")

        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Please enter a workspace name.")

        existing = self.db.list_workspaces(self.scope.user_id)
        if len(existing) >= entitlements.workspace_limit:
            raise EntitlementError(
                f"You've reached the maximum of {entitlements.workspace_limit} workspaces.",
                title="Workspace limit reached",
            )

        record = self.db.create_workspace(
            self.scope.user_id,
            name=cleaned,
            emoji=emoji or DEFAULT_WORKSPACE_EMOJI,
            color=color or DEFAULT_WORKSPACE_COLOR,
        )
        if not record:
            raise RemoteError("Failed to create workspace", operation="create_workspace")
        workspace = Workspace.from_record(record)

        try:
            self.db.create_notification(
                self.scope.user_id,
                notification_type="workspace_created",
                title="Workspace created",
                message=f'Workspace "{workspace.name}" has been created.',
                data={"workspace_id": workspace.id},
            )
        except Exception as exc:
            logger.warning("Workspace notification failed for %s: %s", self.scope.user_id, exc)
        return workspace


__all__ = ["WorkspaceService"]
