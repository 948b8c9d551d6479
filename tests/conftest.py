"""
tests/conftest.py -- Shared test fixtures for the clients service.

This module provides:
  - _make_test_stores(): creates an isolated in-memory client store and session cache
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - service: TestClient plus direct handles on the stores behind it
  - issue_token: callable that stores a session and returns request headers

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the client store because TestClient runs sync route handlers in a thread
pool. Plain :memory: DBs are per-connection and would present a blank schema
to each worker thread. The session cache holds a single connection guarded
by a lock, so plain :memory: is fine there.

Environment variables must be set before any api/ import: the limiter and
the app read get_settings() at import time.
"""

from __future__ import annotations

import asyncio
import os
import secrets
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: set before importing api.main so the limiter is built disabled.
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.resolver import IdentityResolver
from cache.store import SessionCache
from clients.access import ClientAccessController
from clients.store import ClientStore

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores() -> tuple[ClientStore, SessionCache]:
    """Create an isolated shared-memory client store and an in-memory session cache.

    A random suffix keeps every test's database separate.
    """
    db_url = f"sqlite:///file:test_clients_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"
    return ClientStore(db_url=db_url), SessionCache(":memory:")


def _patch_lifespan(store: ClientStore, sessions: SessionCache):
    """Return an async context manager that replaces the real lifespan.

    Skips database URL resolution (no config service, no on-disk files) and
    wires the test stores into app.state exactly as the real lifespan does.
    The purge_task is a long-sleeping coroutine so shutdown can cancel it.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.clients = store
        app.state.access = ClientAccessController(store)
        app.state.sessions = sessions
        app.state.resolver = IdentityResolver(sessions)
        app.state.purge_task = asyncio.create_task(asyncio.sleep(99999))
        yield
        app.state.purge_task.cancel()

    return test_lifespan


@dataclass
class Service:
    client: TestClient
    store: ClientStore
    sessions: SessionCache


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def service() -> Generator[Service, None, None]:
    """Yield a running TestClient with fresh, empty stores behind it."""
    store, sessions = _make_test_stores()
    app.router.lifespan_context = _patch_lifespan(store, sessions)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield Service(client=client, store=store, sessions=sessions)

    sessions.close()
    store.close()


@pytest.fixture
def issue_token(service: Service) -> Callable[..., dict[str, str]]:
    """Return issue(client_id=..., admin=...) -> headers carrying a fresh token.

    The session record mirrors what a login service writes: user id, client
    id, user name, password and the admin flag, with a one-hour lifetime.
    """

    def issue(client_id: str = "client_id", admin: bool = True, ttl: int = 3600) -> dict[str, str]:
        token = secrets.token_hex(16)
        service.sessions.set(
            token,
            {
                "user_id": 1,
                "client_id": client_id,
                "user_name": "admin",
                "password": "password",
                "admin": admin,
            },
            ttl=ttl,
        )
        return {"X-Auth-Token": token}

    return issue
