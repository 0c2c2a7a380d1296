"""Command-line entry point.

    python run.py serve [--host 0.0.0.0] [--port 8000] [--reload]
    python run.py inspect --user-id <uuid>

``inspect`` prints a user's profile, plan entitlements and onboarding state
using the service-role client. Requires SUPABASE_URL and
SUPABASE_SERVICE_ROLE_KEY.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from pathway.config import load_envs
from pathway.logger import configure_logging, log


def dump(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, indent=2, sort_keys=True, default=str)


def serve(host: str, port: int, reload: bool) -> int:
    import uvicorn

    log("[run] starting API", host=host, port=port)
    uvicorn.run("pathway.api.main:app", host=host, port=port, reload=reload)
    return 0


def inspect_user(user_id: str) -> int:
    from pathway.core.onboarding import resolve_onboarding_state
    from pathway.db import get_database_client
    from pathway.entitlements import resolve_entitlements

    db = get_database_client()
    profile = db.get_profile(user_id)
    if not profile:
        print("No profile found (first run)", file=sys.stderr)
        return 1

    print("Profile record:\n" + dump(profile))
    print("\nEntitlements:\n" + dump(resolve_entitlements(profile.get("plan")).to_dict()))

    workspaces = db.list_workspaces(user_id)
    state = resolve_onboarding_state(len(workspaces), profile.get("plan"))
    print(f"\nWorkspaces: {len(workspaces)}")
    print(f"Onboarding state: {state.value}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_envs(PROJECT_ROOT)
    configure_logging()

    parser = argparse.ArgumentParser(description="Pathway Quest service")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_parser = commands.add_parser("serve", help="Run the JSON API with uvicorn")
    serve_parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    serve_parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    serve_parser.add_argument("--reload", action="store_true")

    inspect_parser = commands.add_parser("inspect", help="Show a user's profile, plan and onboarding state")
    inspect_parser.add_argument("--user-id", required=True, help="Auth user UUID")

    args = parser.parse_args(argv)
    try:
        if args.command == "serve":
            return serve(args.host, args.port, args.reload)
        return inspect_user(args.user_id)
    except Exception as exc:
        print(f"[run error] {type(exc).__name__}: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
