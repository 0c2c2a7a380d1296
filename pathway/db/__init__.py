"""
Database module for the Pathway Quest service.

This module provides:
- The Supabase client wrapper used by every service
- Record dataclasses for the backend tables
"""

from .client import DatabaseClient, get_database_client
from . import models

__all__ = [
    "DatabaseClient",
    "get_database_client",
    "models",
]
