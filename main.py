#!/usr/bin/env python3
"""
Clients Data Service -- operator CLI.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080
  python main.py issue-token --client-id acme --admin
  python main.py issue-token --client-id acme --user-name alice --ttl 600
  python main.py revoke-token <token>
  python main.py purge-sessions

Sessions are written to the same SQLite session cache the API reads
(SESSION_DB_PATH). issue-token is how an operator bootstraps the first admin
token; in production an external login service writes sessions instead.

Environment variables: see core/config.py.
"""

import argparse
import secrets
import sys
from typing import Optional

from cache.store import SessionCache
from core.config import get_settings


def _open_sessions() -> SessionCache:
    settings = get_settings()
    return SessionCache(settings.session_db_path, ttl=settings.token_ttl_seconds)


def generate_token() -> str:
    """Return a new opaque session token (256 bits of entropy, hex encoded)."""
    return secrets.token_hex(32)


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_issue_token(args: argparse.Namespace) -> int:
    record = {
        "user_id": args.user_id,
        "client_id": args.client_id,
        "user_name": args.user_name,
        "admin": args.admin,
    }
    token = generate_token()
    sessions = _open_sessions()
    try:
        sessions.set(token, record, ttl=args.ttl)
    finally:
        sessions.close()
    print(token)
    return 0


def cmd_revoke_token(args: argparse.Namespace) -> int:
    sessions = _open_sessions()
    try:
        removed = sessions.delete(args.token)
    finally:
        sessions.close()
    if not removed:
        print("  [!] Unknown token.", file=sys.stderr)
        return 1
    print("Token revoked.")
    return 0


def cmd_purge_sessions(args: argparse.Namespace) -> int:
    sessions = _open_sessions()
    try:
        removed = sessions.purge_expired()
    finally:
        sessions.close()
    print(f"Purged {removed} expired session(s).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clients-data",
        description="Clients Data Service -- client registry with owner/admin access control.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    serve.set_defaults(func=cmd_serve)

    issue = sub.add_parser("issue-token", help="Create a session and print its token")
    issue.add_argument("--client-id", required=True, help="Client the identity belongs to")
    issue.add_argument("--user-id", default=None)
    issue.add_argument("--user-name", default=None)
    issue.add_argument("--admin", action="store_true", help="Grant admin privileges")
    issue.add_argument("--ttl", type=int, default=None, help="Lifetime in seconds (default: TOKEN_TTL_SECONDS)")
    issue.set_defaults(func=cmd_issue_token)

    revoke = sub.add_parser("revoke-token", help="Delete a session")
    revoke.add_argument("token")
    revoke.set_defaults(func=cmd_revoke_token)

    purge = sub.add_parser("purge-sessions", help="Delete expired sessions")
    purge.set_defaults(func=cmd_purge_sessions)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if getattr(args, "ttl", None) is not None and args.ttl <= 0:
        print("  [!] --ttl must be a positive number of seconds.", file=sys.stderr)
        return 2
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
