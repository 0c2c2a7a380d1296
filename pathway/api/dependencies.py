"""FastAPI dependencies shared across the public API."""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from ..auth import Identity, SessionResolver, UserScope
from ..db import DatabaseClient, get_database_client


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_access_token(authorization: str = Header(None)) -> str:
    """Extract the bearer token from the Authorization header."""

    if not authorization:
        raise _unauthorized("Authorization header required")
    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header")

    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise _unauthorized("Invalid authorization token")
    return token


def get_database(token: str = Depends(get_access_token)) -> DatabaseClient:
    """Return a database client scoped to the caller's row policies."""

    return get_database_client(access_token=token)


def get_current_identity(token: str = Depends(get_access_token)) -> Identity:
    """Resolve the authenticated Supabase user (id, email, metadata)."""

    identity = SessionResolver(db=None).resolve_session(token)
    if identity is None:
        raise _unauthorized("Invalid or expired token")
    return identity


def get_current_user_id(identity: Identity = Depends(get_current_identity)) -> str:
    return identity.user_id


def get_user_scope(
    identity: Identity = Depends(get_current_identity),
    db=Depends(get_database),
) -> UserScope:
    """Identity plus a freshly fetched profile; plan gates read from this."""

    return SessionResolver(db=db).build_scope(identity)
