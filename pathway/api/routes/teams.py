"""Team dashboard endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...auth import UserScope
from ...services.teams import TeamService
from ..dependencies import get_database, get_user_scope
from ..schemas import InviteEmailRequest, InviteResponse, TeamCreateRequest, TeamMemberResponse, TeamResponse

router = APIRouter()


@router.get("/teams", response_model=List[TeamResponse], status_code=status.HTTP_200_OK)
def list_teams(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> List[TeamResponse]:
    return [TeamResponse(**team.to_dict()) for team in TeamService(db, scope).list_teams()]


@router.post("/teams", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(
    payload: TeamCreateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> TeamResponse:
    return TeamResponse(**TeamService(db, scope).create_team(payload.name).to_dict())


@router.get("/teams/{team_id}/members", response_model=List[TeamMemberResponse], status_code=status.HTTP_200_OK)
def list_members(
    team_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> List[TeamMemberResponse]:
    return [TeamMemberResponse(**member.to_dict()) for member in TeamService(db, scope).list_members(team_id)]


@router.post("/teams/{team_id}/invites", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
def invite_member(
    team_id: str,
    payload: InviteEmailRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> InviteResponse:
    return InviteResponse(**TeamService(db, scope).invite_member(team_id, payload.email).to_dict())
