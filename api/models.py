"""
API request and response models for the clients REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclass in clients/models.py, which
owns the internal domain representation. Route handlers map between the two.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from clients.models import Client

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class ClientCreate(BaseModel):
    """Request body for POST /clients.

    client_id is accepted so existing callers that send one are not rejected,
    but it is never used: the service always generates the id.
    """

    model_config = ConfigDict(extra="ignore")

    client_name: str = Field(min_length=1, max_length=255)
    client_id: Optional[str] = Field(default=None, description="Ignored. Ids are server-generated.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ClientResponse(BaseModel):
    """A single client record."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_name: str

    @classmethod
    def from_client(cls, client: Client) -> "ClientResponse":
        return cls(client_id=client.client_id, client_name=client.client_name)


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
