"""Calendar endpoints (Standard and Premium)."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...auth import UserScope
from ...services.calendar import CalendarService
from ..dependencies import get_database, get_user_scope
from ..schemas import CalendarTaskResponse, DaySummaryResponse, EventCreateRequest, EventResponse

router = APIRouter()


@router.get("/calendar/events", response_model=List[EventResponse], status_code=status.HTTP_200_OK)
def list_events(
    date: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> List[EventResponse]:
    return [EventResponse(**event.to_dict()) for event in CalendarService(db, scope).list_events(date)]


@router.post("/calendar/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> EventResponse:
    event = CalendarService(db, scope).create_event(
        payload.title,
        payload.date,
        time=payload.time,
        venue=payload.venue,
    )
    return EventResponse(**event.to_dict())


@router.get("/calendar/tasks", response_model=List[CalendarTaskResponse], status_code=status.HTTP_200_OK)
def list_calendar_tasks(
    date: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> List[CalendarTaskResponse]:
    return [CalendarTaskResponse(**task.to_dict()) for task in CalendarService(db, scope).list_tasks(date)]


@router.get("/calendar/days/{day}", response_model=DaySummaryResponse, status_code=status.HTTP_200_OK)
def day_summary(
    day: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> DaySummaryResponse:
    return DaySummaryResponse(**CalendarService(db, scope).day_summary(day).to_dict())
