"""WebSocket endpoint that relays refresh hints from Supabase Realtime."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from ...auth import get_auth_manager
from ...services.realtime import bridge, manager

router = APIRouter()
logger = logging.getLogger(__name__)


def validate_websocket_token(token: str, expected_user_id: str) -> Optional[Dict[str, Any]]:
    """Validate a Supabase JWT; return the user info when it belongs to ``expected_user_id``."""
    if not token:
        return None

    try:
        payload = get_auth_manager().get_user_from_token(token)
    except Exception as exc:  # pragma: no cover
        logger.warning("WebSocket auth token verification failed: %s", exc)
        return None

    if payload and payload.get("id") == expected_user_id:
        return payload
    return None


@router.websocket("/ws/{user_id}")
async def websocket_endpoint(
    websocket: WebSocket,
    user_id: str,
    token: str = Query(..., description="JWT token for authentication"),
) -> None:
    """Push ``{"type": "refresh", "table": ...}`` whenever a watched table changes."""

    user_info = validate_websocket_token(token, user_id)
    if not user_info:
        logger.warning("WebSocket authentication failed for user_id=%s", user_id)
        await websocket.close(code=1008, reason="Invalid authentication token")
        return

    await manager.connect(websocket, user_id)
    if bridge.enabled:
        try:
            await bridge.watch_user(user_id, token, user_info.get("email"))
        except Exception as exc:
            logger.warning("Realtime subscription failed for user=%s: %s", user_id, exc)

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await websocket.send_text(json.dumps({"type": "error", "detail": "Invalid JSON"}))
                continue

            msg_type = message.get("type") if isinstance(message, dict) else None
            if msg_type == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
                continue

            logger.warning("Unknown WebSocket message type: %s from user_id=%s", msg_type, user_id)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error for user=%s", user_id)
    finally:
        if manager.disconnect(websocket, user_id):
            await bridge.unwatch_user(user_id)
