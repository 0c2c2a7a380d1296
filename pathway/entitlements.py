"""Plan tiers and the static feature/limit table they unlock."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional

from .errors import EntitlementError


class PlanTier(str, Enum):
    """Subscription levels stored in ``profiles.plan``."""

    FREE = "free"
    STANDARD = "standard"
    PREMIUM = "premium"


FEATURES = (
    "calendar",
    "teams",
    "partners",
    "notifications",
    "custom_themes",
    "data_export",
    "custom_workspaces",
)

UPSELL_MESSAGES: Dict[str, str] = {
    "calendar": "Calendar view is available with Standard and Premium plans.",
    "teams": "Team dashboards are available with Premium. Upgrade to collaborate with your team!",
    "partners": "Progress partners are available with Premium. Upgrade to connect with a partner!",
    "notifications": "Push notifications are available with Standard and Premium plans.",
    "custom_themes": "Upgrade to Standard or Premium to unlock custom theme options.",
    "data_export": "Data export is available with Standard and Premium plans. Upgrade to unlock this feature!",
    "custom_workspaces": "Multiple workspaces are available with Standard and Premium plans. Upgrade to create custom workspaces!",
}


@dataclass(frozen=True)
class Entitlements:
    """Resolved feature flags and numeric caps for one plan tier."""

    plan: PlanTier
    calendar: bool = False
    teams: bool = False
    partners: bool = False
    notifications: bool = False
    custom_themes: bool = False
    data_export: bool = False
    custom_workspaces: bool = False
    workspace_limit: int = 3
    team_limit: int = 3
    category_limit: int = 8
    active_partner_limit: int = 2

    def allows(self, feature: str) -> bool:
        """Return True when ``feature`` is unlocked; unknown features are denied."""

        if feature not in FEATURES:
            return False
        return bool(getattr(self, feature))

    def require(self, feature: str) -> None:
        if not self.allows(feature):
            raise EntitlementError(UPSELL_MESSAGES.get(feature, "Upgrade your plan to use this feature."))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for entry in fields(self):
            value = getattr(self, entry.name)
            data[entry.name] = value.value if isinstance(value, PlanTier) else value
        return data


_PLAN_TABLE: Dict[PlanTier, Entitlements] = {
    PlanTier.FREE: Entitlements(plan=PlanTier.FREE),
    PlanTier.STANDARD: Entitlements(
        plan=PlanTier.STANDARD,
        calendar=True,
        notifications=True,
        custom_themes=True,
        data_export=True,
        custom_workspaces=True,
    ),
    PlanTier.PREMIUM: Entitlements(
        plan=PlanTier.PREMIUM,
        calendar=True,
        teams=True,
        partners=True,
        notifications=True,
        custom_themes=True,
        data_export=True,
        custom_workspaces=True,
        workspace_limit=5,
    ),
}


def normalize_plan(value: Any) -> PlanTier:
    """Map a raw plan value onto a known tier, treating anything unknown as free."""

    if isinstance(value, PlanTier):
        return value
    if not isinstance(value, str):
        return PlanTier.FREE
    try:
        return PlanTier(value.strip().lower())
    except ValueError:
        return PlanTier.FREE


def parse_plan(value: Any) -> Optional[PlanTier]:
    """Strict variant of :func:`normalize_plan` used for user input."""

    if isinstance(value, PlanTier):
        return value
    if not isinstance(value, str):
        return None
    try:
        return PlanTier(value.strip().lower())
    except ValueError:
        return None


def resolve_entitlements(plan: Any) -> Entitlements:
    return _PLAN_TABLE[normalize_plan(plan)]


__all__ = [
    "FEATURES",
    "Entitlements",
    "PlanTier",
    "normalize_plan",
    "parse_plan",
    "resolve_entitlements",
]
