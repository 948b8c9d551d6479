"""
api/limiter.py -- Shared slowapi rate limiter instance.

Mounted in api/main.py through SlowAPIMiddleware, which applies the default
per-IP limit to every route. Using a single shared instance ensures all
routes share the same in-memory counter store.

RATE_LIMIT_ENABLED=false turns the limiter into a no-op (the test suite
does this so module-scoped clients never trip the limit).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_settings.default_rate_limit],
    storage_uri="memory://",
    enabled=_settings.rate_limit_enabled,
)
