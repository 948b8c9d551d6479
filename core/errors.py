"""
core/errors.py -- Typed failures for the clients service.

Every access-control outcome other than "allow" is one of these exceptions.
The HTTP layer maps them to responses with a single exception handler
(api/main.py), so the controller and the auth dependency never build
responses themselves.

Status codes follow the service contract, which differs from the usual
HTTP reading: a caller with no resolvable token gets 403, a known caller
without the required privilege gets 401.

Layer rule: no imports from api/, auth/, clients/, or cache/.
"""

from __future__ import annotations


class ClientServiceError(Exception):
    """Base class for all failures that end a request with a known status."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class AuthenticationMissing(ClientServiceError):
    """No identity could be resolved from the request token."""

    status_code = 403
    code = "forbidden"

    def __init__(self) -> None:
        super().__init__("A valid authentication token is required.")


class AuthorizationDenied(ClientServiceError):
    """The identity is known but may not perform this operation on this target."""

    status_code = 401
    code = "unauthorized"

    def __init__(self, operation: str) -> None:
        super().__init__(f"Not allowed to {operation} this resource.")
        self.operation = operation


class ResourceConflict(ClientServiceError):
    """A client with the requested name already exists.

    client_id identifies the existing record; the HTTP layer turns it into
    the resource location returned to the caller.
    """

    status_code = 409
    code = "conflict"

    def __init__(self, client_id: str, client_name: str) -> None:
        super().__init__(f"Client name '{client_name}' is already taken.")
        self.client_id = client_id
        self.client_name = client_name


class ResourceNotFound(ClientServiceError):
    status_code = 404
    code = "not_found"

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Client '{client_id}' not found.")
        self.client_id = client_id


class OperationDisabled(ClientServiceError):
    """Raised for every update attempt. Clients are immutable once created."""

    status_code = 405
    code = "not_allowed"

    def __init__(self, operation: str = "update") -> None:
        super().__init__(f"The {operation} operation is not supported.")
        self.operation = operation


class ConfigurationError(Exception):
    """Startup configuration could not be resolved. Not an HTTP error."""
