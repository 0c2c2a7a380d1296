"""Tests for the websocket connection manager and the Supabase realtime bridge."""

from __future__ import annotations

import asyncio
import json

import pytest

from pathway.services.realtime import SUBSCRIPTIONS, ConnectionManager, RealtimeBridge, Subscription


class FakeWebSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.sent = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, text: str) -> None:
        self.sent.append(json.loads(text))


class FakeChannel:
    def __init__(self, name: str) -> None:
        self.name = name
        self.bindings = []
        self.subscribed = False

    def on_postgres_changes(self, event, *, schema, table, filter=None, callback=None):
        self.bindings.append({"event": event, "schema": schema, "table": table, "filter": filter, "callback": callback})
        return self

    async def subscribe(self):
        self.subscribed = True
        return self


class FakeRealtime:
    def __init__(self) -> None:
        self.tokens = []

    def set_auth(self, token: str) -> None:
        self.tokens.append(token)


class FakeAsyncClient:
    def __init__(self) -> None:
        self.realtime = FakeRealtime()
        self.channels = []
        self.removed = []

    def channel(self, name: str) -> FakeChannel:
        channel = FakeChannel(name)
        self.channels.append(channel)
        return channel

    async def remove_channel(self, channel: FakeChannel) -> None:
        self.removed.append(channel)


def _bridge():
    client = FakeAsyncClient()
    created = []

    async def factory(url, key):
        created.append((url, key))
        return client

    manager = ConnectionManager()
    return manager, RealtimeBridge(manager, client_factory=factory), client, created


def test_subscription_filters() -> None:
    assert Subscription("tasks", "user_id").filter_for("u1", None) == "user_id=eq.u1"
    assert Subscription("invites", "receiver_email", use_email=True).filter_for("u1", "a@b.co") == "receiver_email=eq.a@b.co"
    assert Subscription("invites", "receiver_email", use_email=True).filter_for("u1", None) is None
    assert Subscription("messages").filter_for("u1", None) is None


def test_connection_manager_tracks_last_connection() -> None:
    manager = ConnectionManager()
    first, second = FakeWebSocket(), FakeWebSocket()

    async def scenario():
        await manager.connect(first, "user-123")
        await manager.connect(second, "user-123")
        await manager.send_to_user("user-123", {"type": "refresh"})
        await manager.send_to_user("nobody", {"type": "refresh"})

    asyncio.run(scenario())

    assert first.accepted and second.accepted
    assert first.sent == [{"type": "refresh"}]
    assert manager.disconnect(first, "user-123") is False
    assert manager.is_connected("user-123")
    assert manager.disconnect(second, "user-123") is True
    assert not manager.is_connected("user-123")


def test_watch_user_subscribes_every_table_and_relays_hints() -> None:
    manager, bridge, client, created = _bridge()
    socket = FakeWebSocket()

    async def scenario():
        await manager.connect(socket, "user-123")
        await bridge.watch_user("user-123", "jwt-abc", "test@example.com")
        await bridge.watch_user("user-123", "jwt-abc", "test@example.com")
        tasks_binding = next(
            binding for channel in client.channels for binding in channel.bindings if binding["table"] == "tasks"
        )
        tasks_binding["callback"]({"data": {"type": "UPDATE", "record": {"id": "t1"}}})
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert len(created) == 1
    assert client.realtime.tokens == ["jwt-abc"]
    assert len(client.channels) == len(SUBSCRIPTIONS)
    assert all(channel.subscribed for channel in client.channels)
    assert socket.sent == [{"type": "refresh", "table": "tasks", "event": "UPDATE"}]


def test_watch_user_without_email_skips_invites() -> None:
    manager, bridge, client, _ = _bridge()

    asyncio.run(bridge.watch_user("user-123", "jwt-abc", None))

    tables = [binding["table"] for channel in client.channels for binding in channel.bindings]
    assert "invites" not in tables
    assert len(client.channels) == len(SUBSCRIPTIONS) - 1


def test_unwatch_user_removes_channels() -> None:
    manager, bridge, client, _ = _bridge()

    async def scenario():
        await bridge.watch_user("user-123", "jwt-abc", "test@example.com")
        await bridge.unwatch_user("user-123")
        await bridge.unwatch_user("user-123")

    asyncio.run(scenario())

    assert client.removed == client.channels
    assert not bridge.watching("user-123")


def test_bridge_disabled_by_config() -> None:
    _, bridge, _, _ = _bridge()

    assert bridge.enabled is False


def test_concurrent_watch_user_shares_one_client() -> None:
    clients = []

    async def factory(url, key):
        await asyncio.sleep(0)
        clients.append(FakeAsyncClient())
        return clients[-1]

    bridge = RealtimeBridge(ConnectionManager(), client_factory=factory)

    async def scenario():
        await asyncio.gather(
            bridge.watch_user("user-123", "jwt-abc", "test@example.com"),
            bridge.watch_user("user-123", "jwt-abc", "test@example.com"),
        )
        await bridge.unwatch_user("user-123")

    asyncio.run(scenario())

    assert len(clients) == 1
    assert clients[0].removed == clients[0].channels
    assert not bridge.watching("user-123")


def test_failed_subscribe_removes_partial_channels() -> None:
    manager, bridge, client, _ = _bridge()
    original_channel = client.channel

    def flaky_channel(name: str) -> FakeChannel:
        channel = original_channel(name)
        if name.startswith("profiles:"):
            async def broken_subscribe():
                raise RuntimeError("channel error")

            channel.subscribe = broken_subscribe
        return channel

    client.channel = flaky_channel

    with pytest.raises(RuntimeError):
        asyncio.run(bridge.watch_user("user-123", "jwt-abc", "test@example.com"))

    assert [channel.name.split(":")[0] for channel in client.removed] == ["notifications", "tasks", "profiles"]
    assert client.removed == client.channels
    assert not bridge.watching("user-123")
