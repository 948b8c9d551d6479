"""
core/bootstrap.py -- Resolve the database URL once, before any store is built.

Resolution order:
  1. DATABASE_URL, when set, is used verbatim.
  2. CONFIG_SERVICE_URL, when set, is asked for the Postgres base URL
     (GET {config_service_url}/config/postgres -> {"url": "..."}) and the
     database name is appended: "{url}/{db_name}".
  3. Otherwise a local SQLite file next to the clients package.

A config service that is configured but unreachable is a hard startup
failure. Falling back to SQLite in that case would silently split the data
between two databases.

The transport used to fetch configuration stays in this module. Stores and
the access controller receive a plain URL string.
"""

import logging
from pathlib import Path

import requests

from core.config import Settings
from core.errors import ConfigurationError

logger = logging.getLogger("clientsdata.bootstrap")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'clients' / 'clients.db'}"

_CONFIG_TIMEOUT = 5  # seconds

# Module-level session for connection reuse; the config service is internal,
# so 3 redirects is already generous.
_session = requests.Session()
_session.max_redirects = 3


def fetch_database_config(config_service_url: str) -> dict:
    """Fetch the Postgres connection record from the configuration service.

    Raises ConfigurationError on network failure, non-2xx status, a body
    that is not a JSON object, or a missing "url" key.
    """
    endpoint = f"{config_service_url.rstrip('/')}/config/postgres"
    try:
        resp = _session.get(endpoint, timeout=_CONFIG_TIMEOUT)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as e:
        raise ConfigurationError(f"Could not fetch database config from {endpoint}: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Config service returned invalid JSON from {endpoint}") from e
    if not isinstance(payload, dict) or not payload.get("url"):
        raise ConfigurationError(f"Config service response from {endpoint} has no 'url' key")
    return payload


def resolve_database_url(settings: Settings) -> str:
    """Return the SQLAlchemy URL the client store should connect to."""
    if settings.database_url:
        logger.info("Using DATABASE_URL from environment")
        return settings.database_url
    if settings.config_service_url:
        config = fetch_database_config(settings.config_service_url)
        logger.info("Database URL resolved via config service")
        return f"{config['url'].rstrip('/')}/{settings.db_name}"
    logger.info("No database configured -- using local SQLite file")
    return _DEFAULT_DB_URL
