"""
Authentication module for Supabase integration.

This module provides:
- JWT token validation
- Sign-up, password sign-in and sign-out
- Password updates for the signed-in user
"""

import base64
import binascii
import logging
import os
from typing import Any, Dict, Optional

import jwt
import requests
from supabase import Client, create_client

from ..config import CONFIG
from ..errors import AuthError, RemoteError, ValidationError


logger = logging.getLogger(__name__)


def _first_config(name: str, env_name: str) -> Optional[str]:
    return getattr(CONFIG, name, None) or os.getenv(env_name)


class SupabaseAuthManager:
    """Manages authentication with Supabase Auth."""

    def __init__(self):
        """Initialize the AuthManager with Supabase client."""
        self.supabase_url = _first_config("supabase_url", "SUPABASE_URL")
        self.supabase_anon_key = _first_config("supabase_anon_key", "SUPABASE_ANON_KEY")
        self.jwt_secret = _first_config("supabase_jwt_secret", "SUPABASE_JWT_SECRET")
        if not all([self.supabase_url, self.supabase_anon_key]):
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY environment variables are required")

        # Sign-in and sign-up must go through the anon key.
        self.supabase: Client = create_client(self.supabase_url, self.supabase_anon_key)
        self._jwt_secret_candidates = self._prepare_jwt_secret_candidates(self.jwt_secret)

    @staticmethod
    def _prepare_jwt_secret_candidates(secret: Optional[str]) -> list:
        candidates: list = []
        if not secret:
            return candidates

        raw = secret.strip()
        if raw:
            candidates.append(raw)
            try:
                decoded = base64.b64decode(raw, validate=True)
                if decoded:
                    candidates.append(decoded)
            except (binascii.Error, ValueError):
                pass
        return candidates

    def _load_user_via_supabase(self, token: str) -> Optional[Dict[str, Any]]:
        """Fallback to Supabase SDK for token validation."""
        try:
            user = self.supabase.auth.get_user(token)
        except Exception as exc:
            logger.warning("Supabase auth get_user raised an exception: %s", exc)
            return None
        if not user or not getattr(user, "user", None):
            return None
        supa_user = user.user
        return {
            "sub": supa_user.id,
            "email": supa_user.email,
            "user_metadata": supa_user.user_metadata or {},
        }

    def verify_jwt_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode a JWT token from Supabase Auth.

        Args:
            token: The JWT token to verify

        Returns:
            Decoded token payload if valid, None if invalid
        """
        if not token:
            logger.debug("verify_jwt_token received empty token")
            return None
        try:
            for candidate in self._jwt_secret_candidates:
                try:
                    return jwt.decode(
                        token,
                        candidate,
                        algorithms=["HS256"],
                        audience="authenticated",
                    )
                except jwt.InvalidTokenError:
                    logger.debug("JWT decode failed for one candidate; trying next")
                    continue
            result = self._load_user_via_supabase(token)
            if not result:
                logger.warning("Supabase SDK could not validate token")
            return result
        except Exception:
            logger.exception("Unexpected error while decoding JWT; falling back to Supabase SDK")
            return self._load_user_via_supabase(token)

    def get_user_from_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Extract user information from a valid JWT token.

        Returns:
            Dict with ``id``, ``email`` and ``metadata`` or None if invalid
        """
        payload = self.verify_jwt_token(token)
        if not payload:
            return None

        return {
            "id": payload.get("sub"),
            "email": payload.get("email"),
            "metadata": payload.get("user_metadata", {}) or {},
        }

    # ------------------------------------------------------------------
    # Account flows
    # ------------------------------------------------------------------
    @staticmethod
    def _session_payload(response: Any) -> Dict[str, Any]:
        session = getattr(response, "session", None)
        user = getattr(response, "user", None)
        return {
            "access_token": getattr(session, "access_token", None),
            "refresh_token": getattr(session, "refresh_token", None),
            "user_id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
        }

    def sign_up(self, email: str, password: str, display_name: Optional[str] = None) -> Dict[str, Any]:
        """Register a new account; the session is empty until the email is confirmed."""
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required.")

        options: Dict[str, Any] = {}
        if display_name and display_name.strip():
            options["data"] = {"name": display_name.strip()}
        try:
            response = self.supabase.auth.sign_up(
                {"email": email.strip(), "password": password, "options": options}
            )
        except Exception as exc:
            logger.warning("Supabase sign_up failed for %s: %s", email, exc)
            raise AuthError(getattr(exc, "message", None) or str(exc), title="Sign up failed") from exc
        return self._session_payload(response)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required.")
        try:
            response = self.supabase.auth.sign_in_with_password(
                {"email": email.strip(), "password": password}
            )
        except Exception as exc:
            logger.info("Supabase sign_in rejected for %s: %s", email, exc)
            raise AuthError(getattr(exc, "message", None) or str(exc), title="Sign in failed") from exc
        return self._session_payload(response)

    def _user_request(self, method: str, path: str, token: str, **kwargs: Any) -> requests.Response:
        """Perform an auth request on behalf of the signed-in user."""

        url = f"{self.supabase_url.rstrip('/')}/auth/v1{path}"
        headers = kwargs.pop("headers", {})
        headers.setdefault("Authorization", f"Bearer {token}")
        headers.setdefault("apikey", self.supabase_anon_key)
        if "json" in kwargs and kwargs["json"] is not None:
            headers.setdefault("Content-Type", "application/json")

        try:
            response = requests.request(method, url, headers=headers, timeout=10, **kwargs)
        except requests.RequestException as exc:
            logger.exception("Supabase auth request failed", extra={"method": method, "path": path})
            raise RemoteError(str(exc), operation=f"auth:{path}") from exc

        if response.status_code >= 400:
            logger.warning(
                "Supabase auth request %s %s returned %s: %s",
                method,
                path,
                response.status_code,
                response.text,
            )
        return response

    @staticmethod
    def _response_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return str(body.get("msg") or body.get("message") or body.get("error_description") or body)
        return str(body)

    def sign_out(self, token: str) -> None:
        response = self._user_request("POST", "/logout", token)
        if response.status_code >= 400 and response.status_code != 401:
            raise RemoteError(self._response_message(response), operation="auth:logout")

    def update_password(self, token: str, new_password: str) -> None:
        if not new_password or not new_password.strip():
            raise ValidationError("Please enter a new password.")
        response = self._user_request("PUT", "/user", token, json={"password": new_password})
        if response.status_code == 401:
            raise AuthError("Invalid or expired token")
        if response.status_code >= 400:
            raise RemoteError(
                self._response_message(response),
                operation="auth:update_password",
                title="Error updating password",
            )


AuthManager = SupabaseAuthManager


# Global auth manager instance
_auth_manager: Optional[AuthManager] = None


def get_auth_manager() -> AuthManager:
    """Get the global AuthManager instance."""
    global _auth_manager
    if _auth_manager is None:
        _auth_manager = AuthManager()
    return _auth_manager
