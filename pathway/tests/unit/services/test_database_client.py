"""Tests for the Supabase client wrapper using a recording query builder."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from pathway.db import client as client_module
from pathway.errors import RemoteError


class RecordingQuery:
    def __init__(self, log, target, data=None, error=None):
        self.log = log
        self.target = target
        self.data = data
        self.error = error

    def __getattr__(self, name):
        def _record(*args, **kwargs):
            self.log.append((self.target, name, args, kwargs))
            return self

        return _record

    def execute(self):
        if self.error:
            raise self.error
        return SimpleNamespace(data=self.data)


class FakeSupabase:
    def __init__(self, url, key):
        self.url = url
        self.key = key
        self.log = []
        self.responses = {}
        self.errors = {}
        self.tokens = []
        self.postgrest = SimpleNamespace(auth=self.tokens.append)

    def table(self, name):
        return RecordingQuery(self.log, name, self.responses.get(name), self.errors.get(name))

    def rpc(self, name, params):
        self.log.append(("rpc", name, (params,), {}))
        return RecordingQuery(self.log, f"rpc:{name}", self.responses.get(name), self.errors.get(name))


@pytest.fixture
def supabase(monkeypatch: pytest.MonkeyPatch):
    created = []

    def fake_create_client(url, key):
        created.append(FakeSupabase(url, key))
        return created[-1]

    monkeypatch.setattr(client_module, "create_client", fake_create_client)
    return created


def test_user_scoped_client_uses_anon_key_and_token(supabase, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
    from pathway.config import reload_config

    reload_config()

    db = client_module.get_database_client(access_token="jwt")

    assert db.using_service_role is False
    assert supabase[0].key == "anon-test-key"
    assert supabase[0].tokens == ["jwt"]


def test_get_profile_returns_first_row(supabase) -> None:
    db = client_module.SupabaseDatabaseClient(access_token="jwt")
    supabase[0].responses["profiles"] = [{"id": "u1", "name": "Ada"}]

    assert db.get_profile("u1") == {"id": "u1", "name": "Ada"}
    assert ("profiles", "eq", ("id", "u1"), {}) in supabase[0].log


def test_failures_become_remote_errors(supabase) -> None:
    db = client_module.SupabaseDatabaseClient(access_token="jwt")
    supabase[0].errors["tasks"] = RuntimeError("permission denied for table tasks")

    with pytest.raises(RemoteError) as exc:
        db.list_tasks("u1")

    assert exc.value.operation == "list_tasks"
    assert "permission denied" in exc.value.message


def test_streak_and_owner_checks_use_rpc(supabase) -> None:
    db = client_module.SupabaseDatabaseClient(access_token="jwt")
    supabase[0].responses["is_team_owner"] = True

    db.update_user_streak("u1")

    assert db.is_team_owner("team-1") is True
    assert ("rpc", "update_user_streak", ({"user_uuid": "u1"},), {}) in supabase[0].log
    assert ("rpc", "is_team_owner", ({"team_uuid": "team-1"},), {}) in supabase[0].log


def test_delete_task_reports_missing_rows(supabase) -> None:
    db = client_module.SupabaseDatabaseClient(access_token="jwt")
    supabase[0].responses["tasks"] = []

    assert db.delete_task("t1", "u1") is False


def test_list_events_filters_by_iso_date(supabase) -> None:
    db = client_module.SupabaseDatabaseClient(access_token="jwt")

    db.list_events("u1", on_date=date(2024, 5, 6))

    assert ("events", "eq", ("date", "2024-05-06"), {}) in supabase[0].log


def test_missing_configuration_raises(supabase, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SUPABASE_URL")
    from pathway.config import reload_config

    reload_config()

    with pytest.raises(ValueError):
        client_module.SupabaseDatabaseClient(access_token="jwt")
