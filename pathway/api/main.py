"""FastAPI application exposing the public JSON API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import CONFIG
from ..errors import PathwayError
from ..logger import configure_logging
from .routes import (
    auth,
    calendar,
    categories,
    chat,
    invites,
    notifications,
    onboarding,
    partners,
    profile,
    settings,
    tasks,
    teams,
    websocket,
    workspaces,
)

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=CONFIG.api_title,
    version=CONFIG.api_version,
    description=(
        "Public JSON API for Pathway Quest clients. "
        "Authenticate using a Supabase JWT in the Authorization header."
    ),
)


def _configure_cors(api_app: FastAPI) -> None:
    origins = list(CONFIG.api_cors_origins)
    if not origins:
        return

    api_app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


_configure_cors(app)


@app.exception_handler(PathwayError)
async def pathway_error_handler(request: Request, exc: PathwayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health", tags=["health"])  # pragma: no cover - trivial fast check
def healthcheck() -> dict[str, str]:
    """Simple health endpoint for load balancers and smoke tests."""

    return {"status": "ok"}


app.include_router(auth.router, prefix="/v1", tags=["auth"])
app.include_router(profile.router, prefix="/v1", tags=["profile"])
app.include_router(onboarding.router, prefix="/v1", tags=["onboarding"])
app.include_router(settings.router, prefix="/v1", tags=["settings"])
app.include_router(tasks.router, prefix="/v1", tags=["tasks"])
app.include_router(categories.router, prefix="/v1", tags=["categories"])
app.include_router(workspaces.router, prefix="/v1", tags=["workspaces"])
app.include_router(teams.router, prefix="/v1", tags=["teams"])
app.include_router(invites.router, prefix="/v1", tags=["invites"])
app.include_router(partners.router, prefix="/v1", tags=["partners"])
app.include_router(chat.router, prefix="/v1", tags=["chat"])
app.include_router(calendar.router, prefix="/v1", tags=["calendar"])
app.include_router(notifications.router, prefix="/v1", tags=["notifications"])
app.include_router(websocket.router, prefix="/v1", tags=["websocket"])
