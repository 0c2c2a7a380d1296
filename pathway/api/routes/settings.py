"""Account settings and data export."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ...auth import UserScope
from ...errors import ValidationError
from ...services.settings import SettingsService
from ..dependencies import get_database, get_user_scope
from ..schemas import PlanSelectionRequest, ProfileResponse, SettingsUpdateRequest

router = APIRouter()


@router.patch("/settings", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
def update_settings(
    payload: SettingsUpdateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> ProfileResponse:
    """Apply each provided field in turn; omitted fields are left alone."""

    service = SettingsService(db, scope)
    profile = scope.profile
    if payload.name is not None:
        profile = service.update_name(payload.name)
    if payload.theme_preference is not None:
        profile = service.update_theme(payload.theme_preference)
    if payload.notifications_enabled is not None:
        profile = service.set_notifications(payload.notifications_enabled)

    if profile is None:
        raise ValidationError("No settings to update.")
    return ProfileResponse(**profile.to_dict())


@router.post("/settings/plan", response_model=ProfileResponse, status_code=status.HTTP_200_OK)
def change_plan(
    payload: PlanSelectionRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> ProfileResponse:
    return ProfileResponse(**SettingsService(db, scope).change_plan(payload.plan).to_dict())


@router.get("/settings/export", status_code=status.HTTP_200_OK)
def export_tasks(
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> Response:
    body = SettingsService(db, scope).export_tasks_csv()
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="pathway-quest-tasks.csv"'},
    )
