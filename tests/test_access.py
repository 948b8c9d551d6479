"""Unit tests for clients/access.py -- the access policy and controller.

Covers:
- authorize() check order: missing identity (403) > update (405) > privilege (401)
- authorize() scopes: admin -> ANY, owner read/delete -> OWN
- ClientAccessController against a real in-memory ClientStore
- Unique-constraint race on create surfaces as ResourceConflict
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import Identity
from clients.access import ClientAccessController, Operation, Scope, authorize
from clients.models import Client
from clients.store import ClientStore
from core.errors import (
    AuthenticationMissing,
    AuthorizationDenied,
    OperationDisabled,
    ResourceConflict,
    ResourceNotFound,
)

ADMIN = Identity(client_id="admin-client", admin=True, user_id="1", user_name="admin")
OWNER = Identity(client_id="foo", admin=False, user_id="2", user_name="owner")
STRANGER = Identity(client_id="another", admin=False, user_id="3", user_name="stranger")


@pytest.fixture
def store():
    s = ClientStore("sqlite:///:memory:")
    s.create_client(Client(client_id="foo", client_name="foo"))
    yield s
    s.close()


@pytest.fixture
def controller(store: ClientStore) -> ClientAccessController:
    return ClientAccessController(store)


# ---------------------------------------------------------------------------
# authorize()
# ---------------------------------------------------------------------------


class TestAuthorize:
    @pytest.mark.parametrize("operation", list(Operation))
    def test_missing_identity_is_forbidden_for_every_operation(self, operation: Operation) -> None:
        with pytest.raises(AuthenticationMissing):
            authorize(None, operation, "foo")

    @pytest.mark.parametrize("identity", [ADMIN, OWNER, STRANGER])
    def test_update_is_disabled_for_everyone(self, identity: Identity) -> None:
        with pytest.raises(OperationDisabled):
            authorize(identity, Operation.UPDATE, "foo")

    @pytest.mark.parametrize("operation", [Operation.CREATE, Operation.LIST, Operation.READ, Operation.DELETE])
    def test_admin_gets_any_scope(self, operation: Operation) -> None:
        assert authorize(ADMIN, operation, "whatever") is Scope.ANY

    @pytest.mark.parametrize("operation", [Operation.READ, Operation.DELETE])
    def test_owner_gets_own_scope(self, operation: Operation) -> None:
        assert authorize(OWNER, operation, "foo") is Scope.OWN

    @pytest.mark.parametrize("operation", [Operation.CREATE, Operation.LIST])
    def test_non_admin_cannot_create_or_list(self, operation: Operation) -> None:
        with pytest.raises(AuthorizationDenied):
            authorize(OWNER, operation)

    @pytest.mark.parametrize("operation", [Operation.READ, Operation.DELETE])
    def test_stranger_is_denied(self, operation: Operation) -> None:
        with pytest.raises(AuthorizationDenied):
            authorize(STRANGER, operation, "foo")

    def test_owner_without_target_is_denied(self) -> None:
        with pytest.raises(AuthorizationDenied):
            authorize(OWNER, Operation.READ, None)


# ---------------------------------------------------------------------------
# ClientAccessController
# ---------------------------------------------------------------------------


class TestCreate:
    def test_generates_fresh_id(self, controller: ClientAccessController, store: ClientStore) -> None:
        client = controller.create(ADMIN, "acme")
        assert client.client_name == "acme"
        assert client.client_id not in ("", "acme", "foo")
        assert store.get_by_id(client.client_id) == client

    def test_ids_are_unique(self, controller: ClientAccessController) -> None:
        a = controller.create(ADMIN, "a")
        b = controller.create(ADMIN, "b")
        assert a.client_id != b.client_id

    def test_duplicate_name_conflicts_with_existing_id(self, controller: ClientAccessController) -> None:
        with pytest.raises(ResourceConflict) as exc_info:
            controller.create(ADMIN, "foo")
        assert exc_info.value.client_id == "foo"
        assert exc_info.value.status_code == 409

    def test_non_admin_cannot_create(self, controller: ClientAccessController, store: ClientStore) -> None:
        with pytest.raises(AuthorizationDenied):
            controller.create(OWNER, "acme")
        assert store.get_by_name("acme") is None

    def test_unique_violation_after_precheck_is_conflict(self) -> None:
        """A concurrent insert wins between the name check and our insert."""
        store = MagicMock(spec=ClientStore)
        store.get_by_name.side_effect = [None, Client(client_id="winner", client_name="acme")]
        store.create_client.side_effect = IntegrityError("INSERT INTO clients", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(ResourceConflict) as exc_info:
            ClientAccessController(store).create(ADMIN, "acme")
        assert exc_info.value.client_id == "winner"

    def test_other_integrity_errors_propagate(self) -> None:
        store = MagicMock(spec=ClientStore)
        store.get_by_name.return_value = None
        store.create_client.side_effect = IntegrityError("INSERT INTO clients", {}, Exception("NOT NULL"))

        with pytest.raises(IntegrityError):
            ClientAccessController(store).create(ADMIN, "acme")


class TestList:
    def test_admin_lists(self, controller: ClientAccessController) -> None:
        controller.create(ADMIN, "bar")
        names = {c.client_name for c in controller.list(ADMIN)}
        assert names == {"foo", "bar"}

    def test_non_admin_cannot_list(self, controller: ClientAccessController) -> None:
        with pytest.raises(AuthorizationDenied):
            controller.list(OWNER)


class TestRead:
    def test_admin_reads_any(self, controller: ClientAccessController) -> None:
        assert controller.read(ADMIN, "foo") == Client(client_id="foo", client_name="foo")

    def test_admin_missing_is_not_found(self, controller: ClientAccessController) -> None:
        with pytest.raises(ResourceNotFound):
            controller.read(ADMIN, "unexisting")

    def test_owner_reads_own(self, controller: ClientAccessController) -> None:
        assert controller.read(OWNER, "foo").client_name == "foo"

    def test_owner_with_no_stored_record_is_not_found(self, controller: ClientAccessController) -> None:
        ghost = Identity(client_id="ghost")
        with pytest.raises(ResourceNotFound):
            controller.read(ghost, "ghost")

    def test_stranger_is_denied(self, controller: ClientAccessController) -> None:
        with pytest.raises(AuthorizationDenied):
            controller.read(STRANGER, "foo")


class TestDelete:
    def test_admin_deletes(self, controller: ClientAccessController, store: ClientStore) -> None:
        controller.delete(ADMIN, "foo")
        assert store.get_by_id("foo") is None

    def test_admin_delete_of_absent_is_not_found(self, controller: ClientAccessController) -> None:
        controller.delete(ADMIN, "foo")
        with pytest.raises(ResourceNotFound):
            controller.delete(ADMIN, "foo")

    def test_owner_deletes_own(self, controller: ClientAccessController, store: ClientStore) -> None:
        controller.delete(OWNER, "foo")
        assert store.get_by_id("foo") is None

    def test_owner_delete_of_absent_record_is_silent(self, controller: ClientAccessController) -> None:
        controller.delete(OWNER, "foo")
        controller.delete(OWNER, "foo")

    def test_stranger_is_denied_and_record_survives(self, controller: ClientAccessController, store: ClientStore) -> None:
        with pytest.raises(AuthorizationDenied):
            controller.delete(STRANGER, "foo")
        assert store.get_by_id("foo") is not None


class TestUpdate:
    @pytest.mark.parametrize("identity", [ADMIN, OWNER, STRANGER])
    def test_always_disabled(self, controller: ClientAccessController, identity: Identity) -> None:
        with pytest.raises(OperationDisabled):
            controller.update(identity, "foo")
