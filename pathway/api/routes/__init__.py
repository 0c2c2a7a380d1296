"""Route modules for the public API."""

from . import (
    auth,
    calendar,
    categories,
    chat,
    invites,
    notifications,
    onboarding,
    partners,
    profile,
    settings,
    tasks,
    teams,
    websocket,
    workspaces,
)

__all__ = [
    "auth",
    "calendar",
    "categories",
    "chat",
    "invites",
    "notifications",
    "onboarding",
    "partners",
    "profile",
    "settings",
    "tasks",
    "teams",
    "websocket",
    "workspaces",
]
