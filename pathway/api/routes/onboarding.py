"""First-run gate: workspace setup and plan selection."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...auth import UserScope
from ...core.onboarding import OnboardingService
from ..dependencies import get_database, get_user_scope
from ..schemas import (
    OnboardingStatusResponse,
    PlanSelectionRequest,
    ProfileResponse,
    WorkspaceCreateRequest,
    WorkspaceResponse,
)

router = APIRouter()


@router.get("/onboarding", response_model=OnboardingStatusResponse, status_code=status.HTTP_200_OK)
def get_onboarding_status(
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> OnboardingStatusResponse:
    return OnboardingStatusResponse(**OnboardingService(db, scope).status().to_dict())


@router.post("/onboarding/workspace", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
def setup_workspace(
    payload: WorkspaceCreateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> WorkspaceResponse:
    workspace = OnboardingService(db, scope).setup_workspace(payload.name, emoji=payload.emoji, color=payload.color)
    return WorkspaceResponse(**workspace.to_dict())


@router.post("/onboarding/plan", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
def select_plan(
    payload: PlanSelectionRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> ProfileResponse:
    profile = OnboardingService(db, scope).select_plan(payload.plan)
    return ProfileResponse(**profile.to_dict())
