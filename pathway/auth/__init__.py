"""
Authentication and session management

This module provides:
- User authentication via Supabase Auth
- JWT token validation
- Session and profile resolution into a per-request user scope
"""

from .manager import AuthManager, get_auth_manager
from .session import Identity, ProfileResolution, SessionResolver, UserScope

__all__ = [
    'AuthManager',
    'get_auth_manager',
    'Identity',
    'ProfileResolution',
    'SessionResolver',
    'UserScope',
]
