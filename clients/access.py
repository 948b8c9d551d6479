"""
clients/access.py -- Access-control decisions and storage orchestration for clients.

Two layers:

  authorize() is the pure policy. Given a (possibly absent) identity, an
  operation and an optional target id it either returns the Scope the
  operation may act in, or raises the typed failure from core/errors.py.
  Check order is fixed: missing identity (403) before the disabled update
  (405) before privilege (401).

  ClientAccessController applies the policy and then performs the storage
  action against the ClientStore it was constructed with. It keeps no
  state between calls, so one instance serves all concurrent requests.

Policy table:
  operation | admin          | owner (target == own id) | anyone else
  ----------+----------------+--------------------------+------------
  create    | ANY            | 401                      | 401
  list      | ANY            | 401                      | 401
  read      | ANY            | OWN                      | 401
  delete    | ANY            | OWN                      | 401
  update    | 405            | 405                      | 405
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum

from sqlalchemy.exc import IntegrityError

from auth.models import Identity
from clients.models import Client
from clients.store import ClientStore
from core.errors import (
    AuthenticationMissing,
    AuthorizationDenied,
    OperationDisabled,
    ResourceConflict,
    ResourceNotFound,
)

logger = logging.getLogger("clientsdata.access")


class Operation(str, Enum):
    CREATE = "create"
    LIST = "list"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class Scope(str, Enum):
    """Where an allowed operation acts."""

    ANY = "any"  # admin: the requested target, whatever it is
    OWN = "own"  # owner: the caller's own client_id


_OWNER_OPERATIONS = frozenset({Operation.READ, Operation.DELETE})


def authorize(identity: Identity | None, operation: Operation, target_client_id: str | None = None) -> Scope:
    """Decide whether identity may perform operation on target_client_id.

    Returns the Scope on allow. Raises AuthenticationMissing,
    OperationDisabled or AuthorizationDenied otherwise.
    """
    if identity is None:
        raise AuthenticationMissing()
    if operation is Operation.UPDATE:
        raise OperationDisabled(operation.value)
    if identity.admin:
        return Scope.ANY
    if operation in _OWNER_OPERATIONS and target_client_id is not None and target_client_id == identity.client_id:
        return Scope.OWN
    logger.warning(
        "Denied %s on client %s for client_id=%s",
        operation.value,
        target_client_id or "*",
        identity.client_id,
    )
    raise AuthorizationDenied(operation.value)


class ClientAccessController:
    """Apply the client access policy and run the permitted storage action.

    Usage:
        controller = ClientAccessController(ClientStore(db_url))
        client = controller.create(identity, "acme")
        controller.delete(identity, client.client_id)
    """

    def __init__(self, store: ClientStore) -> None:
        self._store = store

    def create(self, identity: Identity, client_name: str) -> Client:
        """Create a client with a freshly generated id. Admin only.

        The name is checked first so the common duplicate case never touches
        the insert path. A concurrent create that slips past the check hits
        the UNIQUE constraint instead and is reported the same way.
        """
        authorize(identity, Operation.CREATE)
        existing = self._store.get_by_name(client_name)
        if existing is not None:
            raise ResourceConflict(existing.client_id, client_name)

        client = Client(client_id=str(uuid.uuid4()), client_name=client_name)
        try:
            self._store.create_client(client)
        except IntegrityError:
            existing = self._store.get_by_name(client_name)
            if existing is None:
                raise
            raise ResourceConflict(existing.client_id, client_name) from None
        logger.info("Client %s created (name=%s) by user %s", client.client_id, client_name, identity.user_id)
        return client

    def list(self, identity: Identity) -> list[Client]:
        authorize(identity, Operation.LIST)
        return self._store.list_clients()

    def read(self, identity: Identity, target_client_id: str) -> Client:
        """Return one client. Admins may read any; owners only their own."""
        scope = authorize(identity, Operation.READ, target_client_id)
        lookup_id = target_client_id if scope is Scope.ANY else identity.client_id
        client = self._store.get_by_id(lookup_id)
        if client is None:
            raise ResourceNotFound(lookup_id)
        return client

    def delete(self, identity: Identity, target_client_id: str) -> None:
        """Delete one client.

        Admin path: 404 when the target does not exist.
        Owner path: deletes by the caller's own id and succeeds whether or
        not a record was stored.
        """
        scope = authorize(identity, Operation.DELETE, target_client_id)
        if scope is Scope.ANY:
            if self._store.get_by_id(target_client_id) is None:
                raise ResourceNotFound(target_client_id)
            self._store.delete_client(target_client_id)
            logger.info("Client %s deleted by admin user %s", target_client_id, identity.user_id)
            return
        removed = self._store.delete_client(identity.client_id)
        logger.info("Client %s deleted by its owner (removed=%s)", identity.client_id, removed)

    def update(self, identity: Identity, target_client_id: str) -> None:
        """Always raises OperationDisabled. Clients cannot be modified."""
        authorize(identity, Operation.UPDATE, target_client_id)
