"""
Session and profile resolution.

Answers "who is the current user" and "what does their profile row say",
and hands the result to services as a :class:`UserScope` so that plan and
preference context travels explicitly instead of through globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..db.models import Profile
from ..entitlements import Entitlements, PlanTier, normalize_plan, resolve_entitlements
from .manager import get_auth_manager

logger = logging.getLogger(__name__)


@dataclass
class Identity:
    """The authenticated user as reported by Supabase Auth."""

    user_id: str
    email: Optional[str]
    metadata: Dict[str, Any] = field(default_factory=dict)
    access_token: Optional[str] = None

    @property
    def display_name(self) -> str:
        name = self.metadata.get("name") or self.metadata.get("full_name")
        if isinstance(name, str) and name.strip():
            return name.strip()
        if self.email:
            return self.email.split("@", 1)[0]
        return self.user_id

    @classmethod
    def from_user_info(cls, user_info: Dict[str, Any], access_token: Optional[str] = None) -> "Identity":
        metadata = user_info.get("metadata") or {}
        return cls(
            user_id=str(user_info.get("id")),
            email=user_info.get("email"),
            metadata=dict(metadata) if isinstance(metadata, dict) else {},
            access_token=access_token,
        )


@dataclass
class ProfileResolution:
    """Outcome of :meth:`SessionResolver.load_profile`."""

    identity: Identity
    profile: Optional[Profile]

    @property
    def first_run(self) -> bool:
        return self.profile is None


@dataclass
class UserScope:
    """
    Everything a service needs to act for one user.

    Built per request from the identity and a freshly fetched profile, then
    passed down explicitly.
    """

    identity: Identity
    profile: Optional[Profile] = None

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    @property
    def email(self) -> Optional[str]:
        return self.identity.email or (self.profile.email if self.profile else None)

    @property
    def plan(self) -> PlanTier:
        return normalize_plan(self.profile.plan if self.profile else None)

    @property
    def entitlements(self) -> Entitlements:
        return resolve_entitlements(self.plan)

    @property
    def theme(self) -> str:
        preference = self.profile.theme_preference if self.profile else None
        return preference if preference in {"light", "dark"} else "light"

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.profile and self.profile.notifications_enabled)


class SessionResolver:
    """Resolves sessions and profiles into a per-request :class:`UserScope`."""

    def __init__(self, db: Any, auth_manager: Any = None) -> None:
        self._auth = auth_manager
        self._db = db

    def resolve_session(self, access_token: Optional[str]) -> Optional[Identity]:
        """Return the identity behind ``access_token`` or None when there is no valid session."""

        if not access_token:
            return None
        if self._auth is None:
            self._auth = get_auth_manager()
        user_info = self._auth.get_user_from_token(access_token)
        if not user_info or not user_info.get("id"):
            return None
        return Identity.from_user_info(user_info, access_token=access_token)

    def load_profile(self, identity: Identity) -> ProfileResolution:
        """Fetch the profile row; a missing row marks the first-run condition."""

        record = self._db.get_profile(identity.user_id)
        profile = Profile.from_record(record) if record else None
        if profile is None:
            logger.info("No profile row for user %s; first run", identity.user_id)
        return ProfileResolution(identity=identity, profile=profile)

    def build_scope(self, identity: Identity) -> UserScope:
        resolution = self.load_profile(identity)
        return UserScope(identity=identity, profile=resolution.profile)


__all__ = [
    "Identity",
    "ProfileResolution",
    "SessionResolver",
    "UserScope",
]
