"""Logging helpers shared by the API, services and realtime bridge."""

from __future__ import annotations

import logging
from typing import Any

import logfire

from .config import CONFIG

_LOGGER = logging.getLogger("pathway")
_LOGFIRE_CONFIGURED = False


def _coerce(parts: tuple[object, ...]) -> str:
    rendered = " ".join(str(part) for part in parts if part is not None)
    return rendered.strip()


def configure_logging() -> None:
    """Install the root handler and, when a token is configured, ship spans to Logfire."""

    global _LOGFIRE_CONFIGURED

    level = getattr(logging, str(getattr(CONFIG, "log_level", "INFO")), logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    _LOGGER.setLevel(level)

    token = getattr(CONFIG, "logfire_token", None)
    if _LOGFIRE_CONFIGURED or not getattr(CONFIG, "enable_logfire", False) or not token:
        return
    try:
        logfire.configure(token=token, console=False, service_name="pathway")
        _LOGGER.addHandler(logfire.LogfireLoggingHandler())
        _LOGFIRE_CONFIGURED = True
    except Exception as exc:  # pragma: no cover
        _LOGGER.warning("Failed to configure Logfire: %s", exc)


def log(*parts: object, **metadata: Any) -> None:
    """
    Emit an info-level message on the ``pathway`` logger.

    Keyword arguments are appended to the message so call sites can attach
    identifiers (``user_id``, ``task_id``) without building strings by hand.
    """

    message = _coerce(parts)
    if metadata:
        message = f"{message} | {metadata}"

    if not _LOGGER.handlers and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    _LOGGER.info(message)


__all__ = ["configure_logging", "log"]
