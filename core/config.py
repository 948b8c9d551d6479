"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the clients service happen here. No module
should call os.getenv() or os.environ.get() directly -- import get_settings()
instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. database_url -> DATABASE_URL). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment.

The database URL is deliberately allowed to be empty here. core/bootstrap.py
turns an empty value into a concrete URL (config service or local SQLite)
once, before the stores are constructed.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
clients/, or cache/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("clientsdata.config")

_DEFAULT_SESSION_DB = Path(__file__).resolve().parent.parent / "cache" / "sessions.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.

    Environment variable name mapping: field names are uppercased automatically.
    E.g. `token_header` reads from TOKEN_HEADER, `debug` reads from DEBUG.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured" -- see core/bootstrap.py.
    database_url: str = ""
    db_name: str = "clients"
    # Base URL of the configuration service, e.g. http://config:8500
    config_service_url: str = ""

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    session_db_path: str = str(_DEFAULT_SESSION_DB)
    token_header: str = "X-Auth-Token"
    token_ttl_seconds: int = 3600
    session_purge_interval_seconds: int = 3600

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    rate_limit_enabled: bool = True
    default_rate_limit: str = "120/minute"
    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = []

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_sessions(self) -> "Settings":
        """Reject session settings that would make every token unusable.

        A zero TTL expires tokens at issue time; a blank header name means
        no request could ever present a token. Both are configuration
        mistakes, so startup fails instead of answering 403 to everyone.
        """
        if not self.token_header.strip():
            raise ValueError("TOKEN_HEADER must not be blank.")
        if self.token_ttl_seconds <= 0:
            raise ValueError("TOKEN_TTL_SECONDS must be a positive number of seconds.")
        if self.session_purge_interval_seconds <= 0:
            raise ValueError("SESSION_PURGE_INTERVAL_SECONDS must be a positive number of seconds.")
        if self.debug:
            logger.warning("DEBUG mode enabled -- do not run this configuration in production.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Uses lru_cache so Settings() is instantiated exactly once -- at first call.
    All modules should call get_settings() rather than constructing Settings() directly.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
