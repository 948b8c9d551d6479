"""
auth/resolver.py -- Turn an opaque token into an Identity, or None.

The resolver knows nothing about how sessions are stored. Anything with a
get(token) -> dict | None method works: cache.store.SessionCache in
production, a plain dict-backed fake in tests. Expiry is the store's job;
an expired token simply comes back as None.

Session record shape (JSON object, as written by the token issuer):
    {"user_id": 1, "client_id": "abc", "user_name": "admin",
     "password": "...", "admin": true}

Only client_id is mandatory. A record without it cannot take part in
ownership checks, so it resolves to None like an unknown token.
"""

from __future__ import annotations

import logging
from typing import Protocol

from auth.models import Identity

logger = logging.getLogger("clientsdata.auth")


class SessionLookup(Protocol):
    def get(self, token: str) -> dict | None: ...


class IdentityResolver:
    """Resolve request tokens against an injected session lookup.

    Usage:
        resolver = IdentityResolver(SessionCache())
        identity = resolver.resolve(request.headers.get("X-Auth-Token"))
    """

    def __init__(self, sessions: SessionLookup) -> None:
        self._sessions = sessions

    def resolve(self, token: str | None) -> Identity | None:
        """Return the Identity for token, or None when missing, unknown, or expired."""
        if not token or not token.strip():
            return None
        record = self._sessions.get(token.strip())
        if record is None:
            return None
        return _record_to_identity(record)


def _record_to_identity(record) -> Identity | None:
    if not isinstance(record, dict) or not record.get("client_id"):
        logger.warning("Ignoring malformed session record (missing client_id)")
        return None
    user_id = record.get("user_id")
    return Identity(
        client_id=str(record["client_id"]),
        admin=record.get("admin") is True,
        user_id=str(user_id) if user_id is not None else None,
        user_name=record.get("user_name"),
        password=record.get("password"),
    )
