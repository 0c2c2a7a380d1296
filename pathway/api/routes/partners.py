"""Progress partner endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...auth import UserScope
from ...services.partners import PartnerService
from ..dependencies import get_database, get_user_scope
from ..schemas import InviteEmailRequest, InviteResponse, PartnerResponse

router = APIRouter()


@router.get("/partners", response_model=List[PartnerResponse], status_code=status.HTTP_200_OK)
def list_partners(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> List[PartnerResponse]:
    return [PartnerResponse(**partner.to_dict()) for partner in PartnerService(db, scope).list_partners()]


@router.post("/partners/invite", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
def invite_partner(
    payload: InviteEmailRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> InviteResponse:
    return InviteResponse(**PartnerService(db, scope).invite(payload.email).to_dict())


@router.delete("/partners/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_partner(
    partner_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> None:
    PartnerService(db, scope).remove(partner_id)
