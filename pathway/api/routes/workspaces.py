"""Workspace endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...auth import UserScope
from ...services.workspaces import WorkspaceService
from ..dependencies import get_database, get_user_scope
from ..schemas import WorkspaceCreateRequest, WorkspaceResponse

router = APIRouter()


@router.get("/workspaces", response_model=List[WorkspaceResponse], status_code=status.HTTP_200_OK)
def list_workspaces(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> List[WorkspaceResponse]:
    return [WorkspaceResponse(**item.to_dict()) for item in WorkspaceService(db, scope).list_workspaces()]


@router.post("/workspaces", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
def create_workspace(
    payload: WorkspaceCreateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> WorkspaceResponse:
    """Create an additional workspace (Premium, up to the plan's limit)."""

    workspace = WorkspaceService(db, scope).create_workspace(payload.name, emoji=payload.emoji, color=payload.color)
    return WorkspaceResponse(**workspace.to_dict())
