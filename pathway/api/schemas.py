"""Pydantic schemas for the public API."""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


# ----------------------------------------------------------------------
# Auth
# ----------------------------------------------------------------------
class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    display_name: Optional[str] = None


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class PasswordUpdateRequest(BaseModel):
    password: Optional[str] = None


class AuthSessionResponse(BaseModel):
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    confirmation_required: bool = False


# ----------------------------------------------------------------------
# Profile, entitlements, onboarding, settings
# ----------------------------------------------------------------------
class ProfileResponse(BaseModel):
    id: str
    name: str = ""
    email: Optional[str] = None
    current_streak: int = 0
    last_completed_date: Optional[dt.date] = None
    plan: Optional[str] = None
    theme_preference: Optional[str] = None
    notifications_enabled: bool = False
    avatar_url: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class SessionProfileResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    display_name: str
    first_run: bool
    profile: Optional[ProfileResponse] = None
    streak_badge: str


class EntitlementsResponse(BaseModel):
    plan: str
    calendar: bool
    teams: bool
    partners: bool
    notifications: bool
    custom_themes: bool
    data_export: bool
    custom_workspaces: bool
    workspace_limit: int
    team_limit: int
    category_limit: int
    active_partner_limit: int


class OnboardingStatusResponse(BaseModel):
    state: str
    workspace_count: int
    plan: Optional[str] = None


class PlanSelectionRequest(BaseModel):
    plan: str

    @field_validator("plan", mode="before")
    @classmethod
    def normalize_plan_value(cls, value: Optional[str]) -> str:
        return (value or "").strip().lower()


class SettingsUpdateRequest(BaseModel):
    name: Optional[str] = None
    theme_preference: Optional[str] = None
    notifications_enabled: Optional[bool] = None


# ----------------------------------------------------------------------
# Tasks, categories, progress
# ----------------------------------------------------------------------
class TaskCreateRequest(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    day: Optional[str] = None


class TaskResponse(BaseModel):
    id: str
    user_id: str
    name: str
    category: str
    day: str
    completed: bool = False
    created_at: Optional[dt.datetime] = None


class TaskToggleResponse(BaseModel):
    task: TaskResponse
    profile: Optional[ProfileResponse] = None


class CategoryCreateRequest(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None


class CategoryResponse(BaseModel):
    id: str
    user_id: str
    name: str
    color: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class CategoryProgressResponse(BaseModel):
    category: str
    completed: int
    total: int
    percent: int


class ProgressResponse(BaseModel):
    completed: int
    total: int
    percent: int
    categories: List[CategoryProgressResponse] = Field(default_factory=list)
    streak: int = 0
    badge: str


# ----------------------------------------------------------------------
# Workspaces and teams
# ----------------------------------------------------------------------
class WorkspaceCreateRequest(BaseModel):
    name: Optional[str] = None
    emoji: Optional[str] = None
    color: Optional[str] = None


class WorkspaceResponse(BaseModel):
    id: str
    user_id: str
    name: str
    emoji: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class TeamCreateRequest(BaseModel):
    name: Optional[str] = None


class TeamResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    created_at: Optional[dt.datetime] = None


class TeamMemberResponse(BaseModel):
    id: str
    team_id: str
    user_id: str
    role: str
    name: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class InviteEmailRequest(BaseModel):
    email: EmailStr


# ----------------------------------------------------------------------
# Invites, partners, chat
# ----------------------------------------------------------------------
class InviteResponse(BaseModel):
    id: str
    type: str
    sender_id: str
    receiver_email: str
    status: str
    team_id: Optional[str] = None
    sender_name: Optional[str] = None
    team_name: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class PartnerResponse(BaseModel):
    id: str
    user_id: str
    partner_email: str
    status: str
    partner_id: Optional[str] = None
    chat_room_id: Optional[str] = None
    partner_name: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class AcceptInviteResponse(BaseModel):
    invite: InviteResponse
    membership: Optional[TeamMemberResponse] = None
    partner: Optional[PartnerResponse] = None
    chat_room_id: Optional[str] = None


class MessageCreateRequest(BaseModel):
    content: Optional[str] = None


class MessageResponse(BaseModel):
    id: str
    chat_room_id: str
    sender_id: str
    content: str
    created_at: Optional[dt.datetime] = None


class PartnerTaskCreateRequest(BaseModel):
    title: Optional[str] = None


class PartnerTaskResponse(BaseModel):
    id: str
    chat_room_id: str
    created_by: str
    title: str
    completed: bool = False
    created_at: Optional[dt.datetime] = None


# ----------------------------------------------------------------------
# Calendar
# ----------------------------------------------------------------------
class EventCreateRequest(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    venue: Optional[str] = None


class EventResponse(BaseModel):
    id: str
    user_id: str
    date: Optional[dt.date] = None
    title: str
    time: Optional[str] = None
    venue: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class CalendarTaskResponse(BaseModel):
    id: str
    user_id: str
    date: Optional[dt.date] = None
    title: str
    category: str
    time: Optional[str] = None
    description: Optional[str] = None
    completed: bool = False
    created_at: Optional[dt.datetime] = None


class DaySummaryResponse(BaseModel):
    date: dt.date
    events: List[EventResponse] = Field(default_factory=list)
    tasks_by_category: Dict[str, List[CalendarTaskResponse]] = Field(default_factory=dict)


# ----------------------------------------------------------------------
# Notifications
# ----------------------------------------------------------------------
class NotificationEntry(BaseModel):
    id: str
    type: str
    title: str
    message: str
    read: bool
    derived: bool
    created_at: Optional[dt.datetime] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class NotificationFeedResponse(BaseModel):
    entries: List[NotificationEntry] = Field(default_factory=list)
    unread_count: int = 0
