"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The token travels in a single request header (X-Auth-Token by default,
see Settings.token_header). The resolver registered on app.state turns it
into an Identity.

try_get_identity() is the soft variant (returns None on failure).
get_identity() wraps it and raises AuthenticationMissing (HTTP 403) if the
request carries no resolvable token. Routes receive the Identity as an
explicit argument and hand it to the access controller; nothing is stashed
on request.state.

Layer rule: no imports from api/, clients/, or cache/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import Identity
from auth.resolver import IdentityResolver
from core.config import get_settings
from core.errors import AuthenticationMissing


def try_get_identity(request: Request) -> Identity | None:
    """Resolve the request token. Returns None on any failure, never raises."""
    resolver: IdentityResolver = request.app.state.resolver
    token = request.headers.get(get_settings().token_header)
    return resolver.resolve(token)


def get_identity(request: Request) -> Identity:
    """Require a resolvable token. Raises AuthenticationMissing (403) otherwise.

    Use as a FastAPI dependency:
        @router.get("/clients")
        def route(identity: Identity = Depends(get_identity)): ...
    """
    identity = try_get_identity(request)
    if identity is None:
        raise AuthenticationMissing()
    return identity
