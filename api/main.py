"""
api/main.py -- FastAPI application entry point for the clients service.

Run with:      python main.py serve
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins
  3. SlowAPIMiddleware     -- enforces the default per-IP rate limit

Lifespan handles startup (database URL resolution, stores, resolver,
controller, session purge task) and shutdown (cancel purge task, close
stores) symmetrically.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.clients import router as clients_router
from auth.dependencies import try_get_identity
from auth.resolver import IdentityResolver
from cache.store import SessionCache
from clients.access import ClientAccessController
from clients.store import ClientStore
from core.bootstrap import resolve_database_url
from core.config import get_settings
from core.errors import AuthenticationMissing, ClientServiceError, ResourceConflict

_VERSION = "0.1.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("clientsdata.api")

# ---------------------------------------------------------------------------
# Background purge task
# ---------------------------------------------------------------------------


async def _purge_loop(app: FastAPI, interval: int) -> None:
    """Drop expired sessions every `interval` seconds.

    Expired sessions already read as absent; this only keeps the table from
    growing. CancelledError from task.cancel() during shutdown propagates out
    of asyncio.sleep and unwinds the coroutine.
    """
    while True:
        await asyncio.sleep(interval)
        removed = app.state.sessions.purge_expired()
        if removed:
            logger.info("Purged %d expired sessions", removed)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the service graph once and tear it down on shutdown.

    Startup order matters:
      1. Database URL first -- may call the config service and abort startup.
      2. Client store, then the controller that wraps it.
      3. Session cache, then the resolver that reads it.
      4. Purge task last -- references app.state.sessions.
    """
    logger.info("Clients service starting up")
    db_url = resolve_database_url(_settings)
    app.state.clients = ClientStore(db_url)
    app.state.access = ClientAccessController(app.state.clients)
    logger.info("Client store initialized")
    app.state.sessions = SessionCache(_settings.session_db_path, ttl=_settings.token_ttl_seconds)
    app.state.resolver = IdentityResolver(app.state.sessions)
    logger.info("Session cache initialized (token header=%s)", _settings.token_header)
    app.state.purge_task = asyncio.create_task(_purge_loop(app, _settings.session_purge_interval_seconds))

    yield

    app.state.purge_task.cancel()
    app.state.sessions.close()
    app.state.clients.close()
    logger.info("Clients service shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Clients Data Service",
    description="Client registry guarded by token identity and an owner/admin access policy.",
    version=_VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
#
# Register in the order you want the request to encounter them:
# TrustedHost -> CORS -> SlowAPI.
# ---------------------------------------------------------------------------

app.add_middleware(TrustedHostMiddleware, allowed_hosts=_settings.allowed_hosts)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", _settings.token_header],
    max_age=3600,
)

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(clients_router, tags=["Clients"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


@app.exception_handler(ClientServiceError)
async def client_service_error_handler(request: Request, exc: ClientServiceError) -> JSONResponse:
    """Render access-control outcomes (403/401/404/405/409).

    A conflict points at the client that already holds the name, both in
    the body and in the Location header.
    """
    detail = exc.detail
    headers: dict[str, str] = {}
    if isinstance(exc, ResourceConflict):
        detail = str(request.url_for("read_client", client_id=exc.client_id))
        headers["Location"] = detail
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message, detail=detail)).model_dump(),
        headers=headers,
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with a structured error when a rate limit is exceeded."""
    retry_after = int(getattr(exc, "retry_after", 60))
    response = JSONResponse(
        status_code=429,
        content=ErrorResponse(
            error=ErrorDetail(
                code="rate_limited",
                message="Too many requests.",
                detail=str(exc),
            )
        ).model_dump(),
    )
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when the request body fails validation.

    FastAPI reads the body before it resolves dependencies, so a malformed
    body can fail here before get_identity() has run. Callers without a
    resolvable token still get the 403 envelope.
    """
    if try_get_identity(request) is None:
        return await client_service_error_handler(request, AuthenticationMissing())
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=ErrorDetail(
                code="validation_error",
                message="Request validation failed.",
                detail=str(exc.errors()),
            )
        ).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return a structured error for routing-level HTTP errors (unknown path, wrong method)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=f"http_{exc.status_code}",
                message=str(exc.detail),
            )
        ).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="internal_error",
                message="An unexpected error occurred.",
            )
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) and never requires a token,
# so load balancers can probe it.
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version, and database reachability."""
    try:
        database = "ok" if request.app.state.clients.ping() else "error"
    except Exception:
        logger.exception("Health check: database ping failed")
        database = "error"
    return HealthResponse(version=_VERSION, components={"app": "ok", "database": database})
