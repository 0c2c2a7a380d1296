"""Environment-driven runtime settings for the Pathway Quest service."""

from __future__ import annotations

import os
from types import SimpleNamespace
from typing import Optional, Sequence, Tuple


def _env_str(
    name: str,
    default: Optional[str] = None,
    *,
    alias: Optional[str] = None,
    empty_to_none: bool = True,
) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None and alias:
        raw = os.getenv(alias)
    if raw is None:
        return default
    value = raw.strip()
    if not value and empty_to_none:
        return None if default is None else default
    return value if value else default


def _env_bool(name: str, default: bool, *, alias: Optional[str] = None) -> bool:
    raw = os.getenv(name)
    if raw is None and alias:
        raw = os.getenv(alias)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_tuple(name: str, default: Sequence[str]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return tuple(default)
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or tuple(default)


class Settings(SimpleNamespace):
    """Simple attribute container used throughout the codebase."""

CONFIG = Settings()


def _compute_values() -> tuple[dict[str, object], dict[str, object]]:
    # -----------------------------------------------------------------------
    # RUNTIME ENVIRONMENT
    # -----------------------------------------------------------------------
    environment = _env_str("ENV", "prod", empty_to_none=False).lower()
    if environment not in {"dev", "test", "prod"}:
        environment = "prod"
    is_development = environment == "dev"

    # -----------------------------------------------------------------------
    # SUPABASE
    # -----------------------------------------------------------------------
    supabase_url = _env_str("SUPABASE_URL", None)
    supabase_anon_key = _env_str("SUPABASE_ANON_KEY", None)
    supabase_service_role_key = _env_str("SUPABASE_SERVICE_ROLE_KEY", None)
    supabase_jwt_secret = _env_str("SUPABASE_JWT_SECRET", None)
    supabase_configured = bool(supabase_url) and bool(supabase_anon_key or supabase_service_role_key)

    # -----------------------------------------------------------------------
    # PUBLIC API
    # -----------------------------------------------------------------------
    api_title = _env_str("API_TITLE", "Pathway Quest API", empty_to_none=False)
    api_version = _env_str("API_VERSION", "1.0.0", empty_to_none=False)
    api_cors_origins = _env_tuple("API_CORS_ORIGINS", ())

    # -----------------------------------------------------------------------
    # STREAKS
    # -----------------------------------------------------------------------
    streak_mode = _env_str("STREAK_MODE", "rpc", empty_to_none=False).lower()
    if streak_mode not in {"rpc", "local"}:
        streak_mode = "rpc"
    streak_timezone = _env_str("STREAK_TIMEZONE", "UTC", empty_to_none=False)

    # -----------------------------------------------------------------------
    # NOTIFICATIONS & REALTIME
    # -----------------------------------------------------------------------
    notification_feed_limit = max(_env_int("NOTIFICATION_FEED_LIMIT", 20), 1)
    realtime_enabled = _env_bool("REALTIME_ENABLED", True)

    # -----------------------------------------------------------------------
    # LOGGING & OBSERVABILITY
    # -----------------------------------------------------------------------
    log_level = _env_str("LOG_LEVEL", "DEBUG" if is_development else "INFO", empty_to_none=False).upper()
    logfire_token = _env_str("LOGFIRE_TOKEN", None)
    enable_logfire = _env_bool("ENABLE_LOGFIRE", bool(logfire_token))

    globals_map = {
        "ENVIRONMENT": environment,
        "IS_DEVELOPMENT": is_development,
        "SUPABASE_URL": supabase_url,
        "SUPABASE_ANON_KEY": supabase_anon_key,
        "SUPABASE_SERVICE_ROLE_KEY": supabase_service_role_key,
        "SUPABASE_JWT_SECRET": supabase_jwt_secret,
        "API_TITLE": api_title,
        "API_VERSION": api_version,
        "API_CORS_ORIGINS": api_cors_origins,
        "STREAK_MODE": streak_mode,
        "STREAK_TIMEZONE": streak_timezone,
        "NOTIFICATION_FEED_LIMIT": notification_feed_limit,
        "REALTIME_ENABLED": realtime_enabled,
        "LOG_LEVEL": log_level,
        "LOGFIRE_TOKEN": logfire_token,
        "ENABLE_LOGFIRE": enable_logfire,
    }

    config_map = {
        "environment": environment,
        "is_development": is_development,
        "supabase_url": supabase_url,
        "supabase_anon_key": supabase_anon_key,
        "supabase_service_role_key": supabase_service_role_key,
        "supabase_jwt_secret": supabase_jwt_secret,
        "supabase_configured": supabase_configured,
        "api_title": api_title,
        "api_version": api_version,
        "api_cors_origins": api_cors_origins,
        "streak_mode": streak_mode,
        "streak_timezone": streak_timezone,
        "notification_feed_limit": notification_feed_limit,
        "realtime_enabled": realtime_enabled,
        "log_level": log_level,
        "logfire_token": logfire_token,
        "enable_logfire": enable_logfire,
    }

    return globals_map, config_map


def reload_config() -> None:
    globals_map, config_map = _compute_values()
    globals().update(globals_map)
    CONFIG.__dict__.update(config_map)


def load_envs(global_dir: str) -> None:
    """Load environment variables from the project's .env file."""
    from dotenv import load_dotenv

    load_dotenv(os.path.join(global_dir, ".env"))

    # Reload configuration after environment changes
    reload_config()


# Load once on import so downstream modules can use CONFIG immediately.
reload_config()
