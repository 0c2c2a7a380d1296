"""First-run gate: workspace setup, then plan selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..auth.session import UserScope
from ..db.models import Profile, Workspace
from ..entitlements import PlanTier, normalize_plan, parse_plan
from ..errors import InvalidTransition, RemoteError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_EMOJI = "\U0001F680"
DEFAULT_WORKSPACE_COLOR = "#8B5CF6"


class OnboardingState(str, Enum):
    LOADING = "loading"
    NEEDS_WORKSPACE = "needs_workspace"
    NEEDS_PLAN_SELECTION = "needs_plan_selection"
    READY = "ready"


def resolve_onboarding_state(workspace_count: Optional[int], plan: Any, *, profile_loaded: bool = True) -> OnboardingState:
    """Pure transition rule. ``None`` counts mean the rows have not been fetched yet."""

    if workspace_count is None or not profile_loaded:
        return OnboardingState.LOADING
    if workspace_count <= 0:
        return OnboardingState.NEEDS_WORKSPACE
    if plan in (None, "") or normalize_plan(plan) == PlanTier.FREE:
        return OnboardingState.NEEDS_PLAN_SELECTION
    return OnboardingState.READY


@dataclass
class OnboardingStatus:
    state: OnboardingState
    workspace_count: int
    plan: Optional[str]

    def to_dict(self) -> dict:
        return {"state": self.state.value, "workspace_count": self.workspace_count, "plan": self.plan}


class OnboardingService:
    """Drives a user through the onboarding states using fresh rows on every call."""

    def __init__(self, db: Any, scope: UserScope) -> None:
        self.db = db
        self.scope = scope

    def status(self) -> OnboardingStatus:
        workspaces = self.db.list_workspaces(self.scope.user_id)
        record = self.db.get_profile(self.scope.user_id)
        profile = Profile.from_record(record) if record else None
        if profile is not None:
            self.scope.profile = profile
        plan = profile.plan if profile else None
        # A missing profile row means first run; treat it like an unset plan.
        state = resolve_onboarding_state(len(workspaces), plan)
        return OnboardingStatus(state=state, workspace_count=len(workspaces), plan=plan)

    def setup_workspace(
        self,
        name: str,
        *,
        emoji: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Workspace:
        """Create the user's first workspace; the plan gate does not apply here."""

        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Please enter a workspace name.")

        if self.db.list_workspaces(self.scope.user_id):
            raise InvalidTransition("Workspace setup is already complete.")

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
                notification_type="welcome",
                title="Welcome to Pathway Quest!",
                message=f'Your workspace "{workspace.name}" is ready. Start by adding your first task.',
                data={"workspace_id": workspace.id},
            )
        except Exception as exc:
            logger.warning("Welcome notification failed for %s: %s", self.scope.user_id, exc)

        return workspace

    def select_plan(self, plan: Any) -> Profile:
        tier = parse_plan(plan)
        if tier is None:
            raise ValidationError(f"Unknown plan: {plan!r}")

        self.db.update_profile(self.scope.user_id, {"plan": tier.value})
        record = self.db.get_profile(self.scope.user_id)
        if not record:
            raise RemoteError("Profile not found after plan update", operation="get_profile")
        profile = Profile.from_record(record)
        self.scope.profile = profile
        logger.info("User %s selected plan %s", self.scope.user_id, tier.value)
        return profile


__all__ = [
    "OnboardingService",
    "OnboardingState",
    "OnboardingStatus",
    "resolve_onboarding_state",
]
