"""Invite inbox: list, accept and decline."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...auth import UserScope
from ...services.invites import InviteService
from ..dependencies import get_database, get_user_scope
from ..schemas import AcceptInviteResponse, InviteResponse

router = APIRouter()


@router.get("/invites", response_model=List[InviteResponse], status_code=status.HTTP_200_OK)
def list_invites(
    invite_type: Optional[str] = Query(default=None, alias="type", pattern="^(team|partner)$"),
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> List[InviteResponse]:
    """Pending invites addressed to the caller's email."""

    return [InviteResponse(**invite.to_dict()) for invite in InviteService(db, scope).list_pending(invite_type)]


@router.post("/invites/{invite_id}/accept", response_model=AcceptInviteResponse, status_code=status.HTTP_200_OK)
def accept_invite(
    invite_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> AcceptInviteResponse:
    return AcceptInviteResponse(**InviteService(db, scope).accept(invite_id).to_dict())


@router.post("/invites/{invite_id}/decline", response_model=InviteResponse, status_code=status.HTTP_200_OK)
def decline_invite(
    invite_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> InviteResponse:
    return InviteResponse(**InviteService(db, scope).decline(invite_id).to_dict())
