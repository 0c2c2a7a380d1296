"""Account endpoints backed by Supabase Auth."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...auth.manager import get_auth_manager
from ..dependencies import get_access_token
from ..schemas import AuthSessionResponse, PasswordUpdateRequest, SignInRequest, SignUpRequest

router = APIRouter()


@router.post("/auth/signup", response_model=AuthSessionResponse, status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpRequest) -> AuthSessionResponse:
    """Create an account. Without email confirmation no session is returned yet."""

    session = get_auth_manager().sign_up(payload.email, payload.password, payload.display_name)
    return AuthSessionResponse(**session, confirmation_required=not session.get("access_token"))


@router.post("/auth/signin", response_model=AuthSessionResponse, status_code=status.HTTP_200_OK)
def sign_in(payload: SignInRequest) -> AuthSessionResponse:
    return AuthSessionResponse(**get_auth_manager().sign_in(payload.email, payload.password))


@router.post("/auth/signout", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(token: str = Depends(get_access_token)) -> None:
    get_auth_manager().sign_out(token)


@router.put("/auth/password", status_code=status.HTTP_204_NO_CONTENT)
def update_password(payload: PasswordUpdateRequest, token: str = Depends(get_access_token)) -> None:
    get_auth_manager().update_password(token, payload.password or "")
