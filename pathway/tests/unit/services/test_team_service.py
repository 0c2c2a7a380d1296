"""Tests for team dashboards and team invitations."""

from __future__ import annotations

import pytest

from pathway.errors import EntitlementError, NotFoundError, RemoteError, ValidationError
from pathway.services.teams import OWNER_ROLE, TeamService


def test_teams_require_premium(db, standard_scope) -> None:
    with pytest.raises(EntitlementError):
        TeamService(db, standard_scope).list_teams()

    assert db.calls == []


def test_create_team_adds_owner_as_admin(db, premium_scope) -> None:
    team = TeamService(db, premium_scope).create_team(" Robotics ")

    assert team.name == "Robotics"
    assert team.owner_id == "user-123"
    members = db.tables["team_members"]
    assert [(row["user_id"], row["role"]) for row in members] == [("user-123", OWNER_ROLE)]


def test_create_team_limit(db, premium_scope) -> None:
    for index in range(3):
        db.seed("teams", owner_id="user-123", name=f"t{index}")

    with pytest.raises(EntitlementError):
        TeamService(db, premium_scope).create_team("Fourth")

    assert db.writes() == []


def test_teams_joined_do_not_count_against_limit(db, premium_scope) -> None:
    for index in range(3):
        team = db.seed("teams", owner_id="other", name=f"t{index}")
        db.seed("team_members", team_id=team["id"], user_id="user-123", role="editor")

    team = TeamService(db, premium_scope).create_team("Mine")

    assert team.owner_id == "user-123"


def test_create_team_rolls_back_when_membership_fails(db, premium_scope) -> None:
    db.fail["add_team_member"] = RemoteError("insert failed", operation="add_team_member")

    with pytest.raises(RemoteError):
        TeamService(db, premium_scope).create_team("Robotics")

    assert db.tables["teams"] == []
    assert db.count("delete_team") == 1


def test_create_team_rolls_back_when_membership_returns_nothing(db, premium_scope, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(db, "add_team_member", lambda team_id, user_id, *, role: None)

    with pytest.raises(RemoteError) as exc:
        TeamService(db, premium_scope).create_team("Robotics")

    assert exc.value.operation == "add_team_member"
    assert db.tables["teams"] == []
    assert db.count("delete_team") == 1


def test_list_members_includes_names(db, premium_scope) -> None:
    team = db.seed("teams", owner_id="user-123", name="Robotics")
    db.seed("team_members", team_id=team["id"], user_id="user-123", role="admin")

    members = TeamService(db, premium_scope).list_members(team["id"])

    assert members[0].name == "Test User"
    assert members[0].role == "admin"


def test_list_members_unknown_team(db, premium_scope) -> None:
    with pytest.raises(NotFoundError):
        TeamService(db, premium_scope).list_members("missing")


def test_invite_member_creates_invite_and_notification(db, premium_scope) -> None:
    team = db.seed("teams", owner_id="user-123", name="Robotics")
    db.seed("profiles", id="user-456", name="Friend", email="friend@example.com")

    invite = TeamService(db, premium_scope).invite_member(team["id"], " Friend@Example.com ")

    assert invite.type == "team"
    assert invite.receiver_email == "friend@example.com"
    assert invite.team_id == team["id"]
    notification = db.tables["notifications"][0]
    assert notification["user_id"] == "user-456"
    assert notification["type"] == "team_invite"
    assert "Robotics" in notification["message"]


def test_invite_member_without_account_skips_notification(db, premium_scope) -> None:
    team = db.seed("teams", owner_id="user-123", name="Robotics")

    TeamService(db, premium_scope).invite_member(team["id"], "new@example.com")

    assert len(db.tables["invites"]) == 1
    assert db.tables["notifications"] == []


def test_only_owner_can_invite(db, premium_scope) -> None:
    team = db.seed("teams", owner_id="someone-else", name="Robotics")

    with pytest.raises(EntitlementError):
        TeamService(db, premium_scope).invite_member(team["id"], "friend@example.com")

    assert db.writes() == []


@pytest.mark.parametrize("email", ["", "not-an-email", "test@example.com"])
def test_invite_member_rejects_bad_targets(db, premium_scope, email) -> None:
    team = db.seed("teams", owner_id="user-123", name="Robotics")

    with pytest.raises(ValidationError):
        TeamService(db, premium_scope).invite_member(team["id"], email)

    assert db.writes() == []
