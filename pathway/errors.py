"""Error taxonomy shared by services and the public API."""

from __future__ import annotations

from typing import Optional


class PathwayError(Exception):
    """Base class for every error raised intentionally by this package."""

    status_code: int = 500
    title: str = "Error"

    def __init__(self, message: str, *, title: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if title:
            self.title = title

    def to_dict(self) -> dict:
        return {"title": self.title, "detail": self.message}


class ValidationError(PathwayError):
    """Raised before any remote call when required input is missing or malformed."""

    status_code = 400
    title = "Validation error"


class ConfirmationRequired(ValidationError):
    """Raised when a destructive action was requested without confirmation."""

    title = "Confirmation required"


class EntitlementError(PathwayError):
    """Raised when the user's plan does not include a feature or a cap is reached."""

    status_code = 402
    title = "Premium Feature"


class AuthError(PathwayError):
    """Raised when the caller is not authenticated."""

    status_code = 401
    title = "Authentication required"


class NotFoundError(PathwayError):
    """Raised when a row the caller refers to is not visible to them."""

    status_code = 404
    title = "Not found"


class InvalidTransition(PathwayError):
    """Raised when a state change is not allowed from the current state."""

    status_code = 409
    title = "Invalid state change"


class RemoteError(PathwayError):
    """Raised when the hosted backend rejects or fails a request."""

    status_code = 502
    title = "Backend error"

    def __init__(self, message: str, *, operation: Optional[str] = None, title: Optional[str] = None) -> None:
        super().__init__(message, title=title)
        self.operation = operation


__all__ = [
    "PathwayError",
    "ValidationError",
    "ConfirmationRequired",
    "EntitlementError",
    "AuthError",
    "NotFoundError",
    "InvalidTransition",
    "RemoteError",
]
