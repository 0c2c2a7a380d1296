"""Repository-wide pytest fixtures."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from pathway.auth import Identity, UserScope
from pathway.config import reload_config
from pathway.db.models import Profile


@pytest.fixture(autouse=True)
def _set_default_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep every test on a predictable, offline configuration."""

    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-test-key")
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    monkeypatch.delenv("SUPABASE_JWT_SECRET", raising=False)
    monkeypatch.setenv("STREAK_MODE", "rpc")
    monkeypatch.setenv("STREAK_TIMEZONE", "UTC")
    monkeypatch.setenv("REALTIME_ENABLED", "false")
    monkeypatch.delenv("LOGFIRE_TOKEN", raising=False)
    monkeypatch.delenv("NOTIFICATION_FEED_LIMIT", raising=False)
    reload_config()
    yield
    monkeypatch.undo()
    reload_config()


@pytest.fixture
def identity() -> Identity:
    return Identity(
        user_id="user-123",
        email="test@example.com",
        metadata={"name": "Test User"},
        access_token="token-123",
    )


def make_scope(identity: Identity, plan: str | None = "premium", **profile_fields) -> UserScope:
    profile = Profile(id=identity.user_id, name="Test User", email=identity.email, plan=plan, **profile_fields)
    return UserScope(identity=identity, profile=profile)


@pytest.fixture
def scope_factory(identity: Identity):
    """Build a scope for ``identity`` on any plan, with extra profile fields."""

    def _factory(plan: str | None = "premium", **profile_fields) -> UserScope:
        return make_scope(identity, plan, **profile_fields)

    return _factory


@pytest.fixture
def premium_scope(identity: Identity) -> UserScope:
    return make_scope(identity, "premium")


@pytest.fixture
def standard_scope(identity: Identity) -> UserScope:
    return make_scope(identity, "standard")


@pytest.fixture
def free_scope(identity: Identity) -> UserScope:
    return make_scope(identity, "free")
