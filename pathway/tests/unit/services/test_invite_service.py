"""Tests for accepting and declining team and partner invites."""

from __future__ import annotations

import pytest

from pathway.core.saga import SagaFailed
from pathway.errors import InvalidTransition, NotFoundError, RemoteError
from pathway.services.invites import ACCEPTED_TEAM_ROLE, InviteService


@pytest.fixture
def team_invite(db):
    db.seed("profiles", id="owner-1", name="Owner", email="owner@example.com")
    team = db.seed("teams", owner_id="owner-1", name="Robotics")
    db.seed("team_members", team_id=team["id"], user_id="owner-1", role="admin")
    return db.seed(
        "invites",
        type="team",
        sender_id="owner-1",
        receiver_email="test@example.com",
        team_id=team["id"],
        status="pending",
    )


@pytest.fixture
def partner_invite(db):
    db.seed("profiles", id="sender-1", name="Sender", email="sender@example.com")
    db.seed("partners", user_id="sender-1", partner_email="test@example.com", status="pending")
    return db.seed(
        "invites",
        type="partner",
        sender_id="sender-1",
        receiver_email="test@example.com",
        status="pending",
    )


def _members_of(db, user_id):
    return [row for row in db.tables["team_members"] if row["user_id"] == user_id]


def test_list_pending_filters_by_type(db, premium_scope, team_invite, partner_invite) -> None:
    service = InviteService(db, premium_scope)

    assert {invite.type for invite in service.list_pending()} == {"team", "partner"}
    team_only = service.list_pending("team")
    assert [invite.id for invite in team_only] == [team_invite["id"]]
    assert team_only[0].team_name == "Robotics"
    assert team_only[0].sender_name == "Owner"


def test_decline_only_changes_status(db, premium_scope, team_invite) -> None:
    invite = InviteService(db, premium_scope).decline(team_invite["id"])

    assert invite.status == "declined"
    assert db.writes() == ["update_invite_status"]
    assert _members_of(db, "user-123") == []


def test_accept_team_invite_adds_one_editor_membership(db, premium_scope, team_invite) -> None:
    result = InviteService(db, premium_scope).accept(team_invite["id"])

    assert result.invite.status == "accepted"
    assert result.membership.role == ACCEPTED_TEAM_ROLE
    assert len(_members_of(db, "user-123")) == 1
    assert db.writes() == ["add_team_member", "update_invite_status"]


def test_accept_team_invite_reuses_existing_membership(db, premium_scope, team_invite) -> None:
    db.seed("team_members", team_id=team_invite["team_id"], user_id="user-123", role="viewer")

    result = InviteService(db, premium_scope).accept(team_invite["id"])

    assert result.membership.role == "viewer"
    assert len(_members_of(db, "user-123")) == 1
    assert "add_team_member" not in db.calls


def test_team_membership_rolled_back_when_status_update_fails(db, premium_scope, team_invite) -> None:
    db.fail["update_invite_status"] = RemoteError("status update failed")

    with pytest.raises(SagaFailed) as exc:
        InviteService(db, premium_scope).accept(team_invite["id"])

    assert exc.value.step == "status"
    assert _members_of(db, "user-123") == []
    assert db.tables["invites"][0]["status"] == "pending"


def test_accept_partner_invite_links_partner_and_opens_one_room(db, premium_scope, partner_invite) -> None:
    result = InviteService(db, premium_scope).accept(partner_invite["id"])

    assert len(db.tables["chat_rooms"]) == 1
    room_id = db.tables["chat_rooms"][0]["id"]
    partner = db.tables["partners"][0]
    assert partner["status"] == "accepted"
    assert partner["partner_id"] == "user-123"
    assert partner["chat_room_id"] == room_id
    assert result.chat_room_id == room_id
    assert result.partner.status == "accepted"
    assert db.tables["invites"][0]["status"] == "accepted"
    assert db.writes() == ["create_chat_room", "update_partner", "update_invite_status"]


def test_partner_accept_rolls_back_room_and_link(db, premium_scope, partner_invite) -> None:
    db.fail["update_invite_status"] = RemoteError("status update failed")

    with pytest.raises(SagaFailed):
        InviteService(db, premium_scope).accept(partner_invite["id"])

    partner = db.tables["partners"][0]
    assert partner["status"] == "pending"
    assert partner["chat_room_id"] is None
    assert partner["partner_id"] is None
    assert db.tables["chat_rooms"] == []
    assert db.tables["invites"][0]["status"] == "pending"


def test_partner_accept_reuses_existing_room(db, premium_scope, partner_invite) -> None:
    db.tables["partners"][0]["chat_room_id"] = "room-existing"

    result = InviteService(db, premium_scope).accept(partner_invite["id"])

    assert result.chat_room_id == "room-existing"
    assert "create_chat_room" not in db.calls


def test_partner_accept_without_request_row(db, premium_scope, partner_invite) -> None:
    db.tables["partners"].clear()

    with pytest.raises(NotFoundError):
        InviteService(db, premium_scope).accept(partner_invite["id"])

    assert db.writes() == []


def test_cannot_accept_twice(db, premium_scope, team_invite) -> None:
    service = InviteService(db, premium_scope)
    service.accept(team_invite["id"])

    with pytest.raises(InvalidTransition):
        service.accept(team_invite["id"])
    with pytest.raises(InvalidTransition):
        service.decline(team_invite["id"])


def test_invite_for_someone_else_is_hidden(db, premium_scope) -> None:
    other = db.seed("invites", type="team", sender_id="x", receiver_email="other@example.com", team_id="t", status="pending")

    with pytest.raises(NotFoundError):
        InviteService(db, premium_scope).accept(other["id"])
