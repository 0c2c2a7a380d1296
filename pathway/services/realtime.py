"""
Realtime bridge.

Subscribes to Supabase ``postgres_changes`` for the tables a connected user
cares about and forwards a ``refresh`` hint to that user's websockets. The
change payload is never forwarded as data; clients re-fetch through the API.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from fastapi import WebSocket
from supabase import acreate_client

from ..config import CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subscription:
    table: str
    column: Optional[str] = None
    use_email: bool = False

    def filter_for(self, user_id: str, email: Optional[str]) -> Optional[str]:
        if not self.column:
            return None
        value = email if self.use_email else user_id
        if not value:
            return None
        return f"{self.column}=eq.{value}"


SUBSCRIPTIONS = (
    Subscription("notifications", "user_id"),
    Subscription("tasks", "user_id"),
    Subscription("profiles", "id"),
    Subscription("invites", "receiver_email", use_email=True),
    Subscription("partners", "user_id"),
    Subscription("partners", "partner_id"),
    # Row policies restrict these to rooms the user belongs to.
    Subscription("messages"),
    Subscription("partner_tasks"),
    Subscription("team_members", "user_id"),
)


class ConnectionManager:
    """Tracks live WebSocket connections per user."""

    def __init__(self) -> None:
        self.active_connections: Dict[str, Set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str) -> None:
        await websocket.accept()
        self.active_connections.setdefault(user_id, set()).add(websocket)
        logger.info("Websocket opened for user=%s; active=%s", user_id, len(self.active_connections[user_id]))

    def disconnect(self, websocket: WebSocket, user_id: str) -> bool:
        """Drop ``websocket``; return True when it was the user's last connection."""

        connections = self.active_connections.get(user_id)
        if not connections:
            return True
        connections.discard(websocket)
        if not connections:
            self.active_connections.pop(user_id, None)
            return True
        return False

    def is_connected(self, user_id: str) -> bool:
        return bool(self.active_connections.get(user_id))

    async def send_to_user(self, user_id: str, message: Dict[str, Any]) -> None:
        connections = self.active_connections.get(user_id)
        if not connections:
            logger.debug("Skipped websocket fanout; user=%s has no active connections", user_id)
            return

        payload = json.dumps(message)
        disconnected: List[WebSocket] = []
        for connection in connections.copy():
            try:
                await connection.send_text(payload)
            except Exception as exc:  # pragma: no cover - network failures
                logger.warning("Failed to relay websocket message to user=%s: %s", user_id, exc)
                disconnected.append(connection)

        for connection in disconnected:
            self.disconnect(connection, user_id)


ClientFactory = Callable[[str, str], Awaitable[Any]]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class RealtimeBridge:
    """Owns one async Supabase client per watched user and its channels."""

    def __init__(self, manager: ConnectionManager, *, client_factory: Optional[ClientFactory] = None) -> None:
        self.manager = manager
        self._client_factory = client_factory or acreate_client
        self._clients: Dict[str, Any] = {}
        self._channels: Dict[str, List[Any]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    @property
    def enabled(self) -> bool:
        return bool(getattr(CONFIG, "realtime_enabled", False) and getattr(CONFIG, "supabase_configured", False))

    def watching(self, user_id: str) -> bool:
        return user_id in self._channels

    def _lock(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def _callback(self, user_id: str, table: str) -> Callable[[Any], None]:
        loop = asyncio.get_running_loop()

        def _on_change(payload: Any) -> None:
            event = None
            if isinstance(payload, dict):
                data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
                event = data.get("type") or data.get("eventType")
            hint = {"type": "refresh", "table": table, "event": event}
            asyncio.run_coroutine_threadsafe(self.manager.send_to_user(user_id, hint), loop)

        return _on_change

    async def watch_user(self, user_id: str, access_token: str, email: Optional[str] = None) -> None:
        # Concurrent connects for one user share a single client.
        async with self._lock(user_id):
            if self.watching(user_id):
                return

            client = await self._client_factory(CONFIG.supabase_url, CONFIG.supabase_anon_key)
            await _maybe_await(client.realtime.set_auth(access_token))

            channels: List[Any] = []
            try:
                for index, sub in enumerate(SUBSCRIPTIONS):
                    row_filter = sub.filter_for(user_id, email)
                    if sub.column and row_filter is None:
                        continue
                    channel = client.channel(f"{sub.table}:{user_id}:{index}")
                    channels.append(channel)
                    channel.on_postgres_changes(
                        "*",
                        schema="public",
                        table=sub.table,
                        filter=row_filter,
                        callback=self._callback(user_id, sub.table),
                    )
                    await channel.subscribe()
            except Exception:
                logger.warning("Realtime subscribe failed for user=%s; removing %s channels", user_id, len(channels))
                await self._remove_channels(user_id, client, channels)
                raise

            self._clients[user_id] = client
            self._channels[user_id] = channels
            logger.info("Realtime watching %s channels for user=%s", len(channels), user_id)

    async def unwatch_user(self, user_id: str) -> None:
        async with self._lock(user_id):
            channels = self._channels.pop(user_id, [])
            client = self._clients.pop(user_id, None)
            if client is None:
                return
            await self._remove_channels(user_id, client, channels)
            logger.info("Realtime stopped for user=%s", user_id)

    @staticmethod
    async def _remove_channels(user_id: str, client: Any, channels: List[Any]) -> None:
        for channel in channels:
            try:
                await client.remove_channel(channel)
            except Exception as exc:
                logger.warning("Failed to remove realtime channel for user=%s: %s", user_id, exc)


manager = ConnectionManager()
bridge = RealtimeBridge(manager)


__all__ = [
    "ConnectionManager",
    "RealtimeBridge",
    "SUBSCRIPTIONS",
    "Subscription",
    "bridge",
    "manager",
]
