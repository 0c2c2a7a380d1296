"""Partner chat rooms: messages and shared tasks."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...auth import UserScope
from ...services.chat import ChatService
from ..dependencies import get_database, get_user_scope
from ..schemas import (
    MessageCreateRequest,
    MessageResponse,
    PartnerResponse,
    PartnerTaskCreateRequest,
    PartnerTaskResponse,
)

router = APIRouter()


@router.get("/chat/rooms", response_model=List[PartnerResponse], status_code=status.HTTP_200_OK)
def list_rooms(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> List[PartnerResponse]:
    return [PartnerResponse(**partner.to_dict()) for partner in ChatService(db, scope).rooms()]


@router.get("/chat/rooms/{room_id}/messages", response_model=List[MessageResponse], status_code=status.HTTP_200_OK)
def list_messages(
    room_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> List[MessageResponse]:
    return [MessageResponse(**message.to_dict()) for message in ChatService(db, scope).list_messages(room_id)]


@router.post("/chat/rooms/{room_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    room_id: str,
    payload: MessageCreateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> MessageResponse:
    return MessageResponse(**ChatService(db, scope).send_message(room_id, payload.content).to_dict())


@router.get("/chat/rooms/{room_id}/tasks", response_model=List[PartnerTaskResponse], status_code=status.HTTP_200_OK)
def list_shared_tasks(
    room_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> List[PartnerTaskResponse]:
    return [PartnerTaskResponse(**task.to_dict()) for task in ChatService(db, scope).list_tasks(room_id)]


@router.post("/chat/rooms/{room_id}/tasks", response_model=PartnerTaskResponse, status_code=status.HTTP_201_CREATED)
def add_shared_task(
    room_id: str,
    payload: PartnerTaskCreateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> PartnerTaskResponse:
    return PartnerTaskResponse(**ChatService(db, scope).add_task(room_id, payload.title).to_dict())


@router.post(
    "/chat/rooms/{room_id}/tasks/{task_id}/toggle",
    response_model=PartnerTaskResponse,
    status_code=status.HTTP_200_OK,
)
def toggle_shared_task(
    room_id: str,
    task_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> PartnerTaskResponse:
    return PartnerTaskResponse(**ChatService(db, scope).toggle_task(room_id, task_id).to_dict())
