"""Current user profile and plan entitlements."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...auth import UserScope
from ...core.streak import streak_badge
from ..dependencies import get_user_scope
from ..schemas import EntitlementsResponse, ProfileResponse, SessionProfileResponse

router = APIRouter()


@router.get("/profile", response_model=SessionProfileResponse, status_code=status.HTTP_200_OK)
def get_profile(scope: UserScope = Depends(get_user_scope)) -> SessionProfileResponse:
    """Return the authenticated user's profile; ``first_run`` is set when no row exists yet."""

    profile = scope.profile
    streak = profile.current_streak if profile else 0
    return SessionProfileResponse(
        user_id=scope.user_id,
        email=scope.email,
        display_name=(profile.name if profile and profile.name else scope.identity.display_name),
        first_run=profile is None,
        profile=ProfileResponse(**profile.to_dict()) if profile else None,
        streak_badge=streak_badge(streak),
    )


@router.get("/entitlements", response_model=EntitlementsResponse, status_code=status.HTTP_200_OK)
def get_entitlements(scope: UserScope = Depends(get_user_scope)) -> EntitlementsResponse:
    return EntitlementsResponse(**scope.entitlements.to_dict())
