"""
clients/store.py -- SQLAlchemy-backed persistence layer for clients.

Uses SQLAlchemy Core (not ORM) so the dataclass in clients/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is
a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. ClientStore is the repository;
_row_to_client is the mapper. The access controller never touches SQL.

Concurrency: UNIQUE(client_name) is enforced by the database, so two racing
inserts with the same name cannot both succeed. create_client() lets the
resulting IntegrityError propagate; the access controller reports it as a
conflict.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ClientStore()                               # SQLite default
    store = ClientStore("postgresql://user:pw@host/db") # PostgreSQL
    store.create_client(Client(client_id=str(uuid4()), client_name="acme"))
    store.get_by_name("acme")
    store.close()
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Column, MetaData, String, Table, create_engine, event, text
from sqlalchemy.engine import Engine

from clients.models import Client

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).parent / 'clients.db'}"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_clients = Table(
    "clients",
    metadata,
    Column("client_id", String(64), primary_key=True),
    Column("client_name", String(255), nullable=False, unique=True),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ClientStore:
    """Repository for Client records. Creates the table on first use."""

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def create_client(self, client: Client) -> None:
        """Insert a new client.

        Raises sqlalchemy.exc.IntegrityError if client_name (or client_id)
        already exists.
        """
        with self.engine.connect() as conn:
            conn.execute(_clients.insert().values(client_id=client.client_id, client_name=client.client_name))
            conn.commit()

    def get_by_id(self, client_id: str) -> Client | None:
        with self.engine.connect() as conn:
            row = conn.execute(_clients.select().where(_clients.c.client_id == client_id)).fetchone()
        return _row_to_client(row) if row is not None else None

    def get_by_name(self, client_name: str) -> Client | None:
        """Look up a client by exact name (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_clients.select().where(_clients.c.client_name == client_name)).fetchone()
        return _row_to_client(row) if row is not None else None

    def list_clients(self) -> list[Client]:
        """Return all clients ordered by name."""
        with self.engine.connect() as conn:
            rows = conn.execute(_clients.select().order_by(_clients.c.client_name)).fetchall()
        return [_row_to_client(r) for r in rows]

    def delete_client(self, client_id: str) -> bool:
        """Delete a client. Returns True if a row was removed, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_clients.delete().where(_clients.c.client_id == client_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_client(row) -> Client:
    return Client(client_id=row.client_id, client_name=row.client_name)
