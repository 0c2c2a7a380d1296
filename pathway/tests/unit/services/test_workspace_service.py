from __future__ import annotations

import pytest

from pathway.errors import EntitlementError, ValidationError
from pathway.services.workspaces import WorkspaceService


def _seed_workspaces(db, count: int) -> None:
    for index in range(count):
        db.seed("workspaces", user_id="user-123", name=f"ws{index}")


def test_premium_user_creates_workspace_and_is_notified(db, premium_scope) -> None:
    _seed_workspaces(db, 1)

    workspace = WorkspaceService(db, premium_scope).create_workspace("Side project", emoji="X", color="#111111")

    assert workspace.name == "Side project"
    assert workspace.emoji == "X"
    assert db.tables["notifications"][0]["type"] == "workspace_created"


def test_workspace_cap_blocks_before_insert(db, premium_scope) -> None:
    _seed_workspaces(db, 5)

    with pytest.raises(EntitlementError) as exc:
        WorkspaceService(db, premium_scope).create_workspace("Sixth")

    assert exc.value.title == "Workspace limit reached"
    assert db.writes() == []
    assert len(db.tables["workspaces"]) == 5


def test_free_plan_cannot_add_workspaces(db, free_scope) -> None:
    _seed_workspaces(db, 1)

    with pytest.raises(EntitlementError):
        WorkspaceService(db, free_scope).create_workspace("Second")

    assert db.calls == []


def test_standard_plan_adds_workspaces_up_to_three(db, standard_scope) -> None:
    _seed_workspaces(db, 1)
    service = WorkspaceService(db, standard_scope)

    service.create_workspace("Second")
    service.create_workspace("Third")
    with pytest.raises(EntitlementError) as exc:
        service.create_workspace("Fourth")

    assert exc.value.title == "Workspace limit reached"
    assert len(db.tables["workspaces"]) == 3
    assert db.count("create_workspace") == 2


def test_workspace_name_required(db, premium_scope) -> None:
    with pytest.raises(ValidationError):
        WorkspaceService(db, premium_scope).create_workspace("")

    assert db.writes() == []


def test_notification_failure_does_not_fail_creation(db, premium_scope) -> None:
    db.fail["create_notification"] = RuntimeError("down")

    workspace = WorkspaceService(db, premium_scope).create_workspace("Home")

    assert workspace.id
    assert [ws.name for ws in WorkspaceService(db, premium_scope).list_workspaces()] == ["Home"]
