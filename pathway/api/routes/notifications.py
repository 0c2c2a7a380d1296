"""Notification feed endpoints.

Each request rebuilds the feed, so marking a derived entry read only affects
the response it is returned in.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...auth import UserScope
from ...services.notifications import NotificationFeed, parse_ref
from ..dependencies import get_database, get_user_scope
from ..schemas import NotificationFeedResponse

router = APIRouter()


def _feed(db, scope: UserScope) -> NotificationFeed:
    feed = NotificationFeed(db, scope)
    feed.refresh()
    return feed


@router.get("/notifications", response_model=NotificationFeedResponse, status_code=status.HTTP_200_OK)
def get_feed(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> NotificationFeedResponse:
    return NotificationFeedResponse(**_feed(db, scope).snapshot())


@router.post("/notifications/read-all", response_model=NotificationFeedResponse, status_code=status.HTTP_200_OK)
def mark_all_read(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> NotificationFeedResponse:
    feed = _feed(db, scope)
    feed.mark_all_read()
    return NotificationFeedResponse(**feed.snapshot())


@router.post(
    "/notifications/{notification_id}/read",
    response_model=NotificationFeedResponse,
    status_code=status.HTTP_200_OK,
)
def mark_read(
    notification_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> NotificationFeedResponse:
    feed = _feed(db, scope)
    feed.mark_read(parse_ref(notification_id))
    return NotificationFeedResponse(**feed.snapshot())


@router.delete(
    "/notifications/{notification_id}",
    response_model=NotificationFeedResponse,
    status_code=status.HTTP_200_OK,
)
def dismiss(
    notification_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> NotificationFeedResponse:
    feed = _feed(db, scope)
    feed.dismiss(parse_ref(notification_id))
    return NotificationFeedResponse(**feed.snapshot())
