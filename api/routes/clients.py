"""
api/routes/clients.py -- Clients resource routes.

Routes:
  POST   /clients              -- create client (admin only)
  GET    /clients              -- list all clients (admin only)
  GET    /clients/{client_id}  -- client detail (admin, or the owning client)
  PUT    /clients/{client_id}  -- always 405; clients are immutable
  DELETE /clients/{client_id}  -- delete client (admin, or the owning client)

Each path is also served with a trailing slash, as a real route rather than a
redirect.

Every route takes the caller's Identity from get_identity(), which answers
403 before the handler runs when the token is missing or invalid. Policy and
storage live in clients/access.py; handlers only translate between HTTP and
the controller. Failures are raised as core/errors.py exceptions and
rendered by the handler registered in api/main.py.
"""

from fastapi import APIRouter, Depends, Request, Response

from api.models import ClientCreate, ClientResponse
from auth.dependencies import get_identity
from auth.models import Identity
from clients.access import ClientAccessController

router = APIRouter()


def _controller(request: Request) -> ClientAccessController:
    return request.app.state.access


# ---------------------------------------------------------------------------
# POST /clients -- create a client
# ---------------------------------------------------------------------------


@router.post("/clients", response_model=ClientResponse)
@router.post("/clients/", response_model=ClientResponse, include_in_schema=False, name="create_client_slash")
def create_client(
    request: Request,
    body: ClientCreate,
    identity: Identity = Depends(get_identity),
) -> ClientResponse:
    """Register a new client. The client_id is always generated here."""
    client = _controller(request).create(identity, body.client_name)
    return ClientResponse.from_client(client)


# ---------------------------------------------------------------------------
# GET /clients -- list all clients
# ---------------------------------------------------------------------------


@router.get("/clients", response_model=list[ClientResponse])
@router.get("/clients/", response_model=list[ClientResponse], include_in_schema=False, name="list_clients_slash")
def list_clients(request: Request, identity: Identity = Depends(get_identity)) -> list[ClientResponse]:
    return [ClientResponse.from_client(c) for c in _controller(request).list(identity)]


# ---------------------------------------------------------------------------
# GET /clients/{client_id} -- client detail
# ---------------------------------------------------------------------------


@router.get("/clients/{client_id}", response_model=ClientResponse)
@router.get("/clients/{client_id}/", response_model=ClientResponse, include_in_schema=False, name="read_client_slash")
def read_client(
    request: Request,
    client_id: str,
    identity: Identity = Depends(get_identity),
) -> ClientResponse:
    """Admins can read any client; other callers only the one they belong to."""
    client = _controller(request).read(identity, client_id)
    return ClientResponse.from_client(client)


# ---------------------------------------------------------------------------
# PUT /clients/{client_id} -- permanently disabled
# ---------------------------------------------------------------------------


@router.put("/clients/{client_id}")
@router.put("/clients/{client_id}/", include_in_schema=False, name="update_client_slash")
def update_client(
    request: Request,
    client_id: str,
    identity: Identity = Depends(get_identity),
) -> None:
    _controller(request).update(identity, client_id)


# ---------------------------------------------------------------------------
# DELETE /clients/{client_id} -- delete client
# ---------------------------------------------------------------------------


@router.delete("/clients/{client_id}")
@router.delete("/clients/{client_id}/", include_in_schema=False, name="delete_client_slash")
def delete_client(
    request: Request,
    client_id: str,
    identity: Identity = Depends(get_identity),
) -> Response:
    """Delete a client. Responds 200 with an empty JSON-typed body."""
    _controller(request).delete(identity, client_id)
    return Response(status_code=200, media_type="application/json")
