"""Integration schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, HttpUrl, field_validator

from src.flowbridge.n8n import ConnectionStatus
from src.flowbridge.schemas.results import SyncResult


class IntegrationConnect(BaseModel):
    """Schema for connecting an n8n instance."""

    instance_url: HttpUrl
    api_key: str = Field(min_length=1, max_length=500)
    name: str = Field(default="n8n", min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Integration name cannot be empty or whitespace only")
        return v


class IntegrationRead(BaseModel):
    """Schema for reading an integration. The API key is never returned."""

    id: UUID
    name: str
    instance_url: str
    is_active: bool
    is_verified: bool
    last_verified_at: datetime | None = None
    last_sync_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class IntegrationConnectResponse(BaseModel):
    connection: ConnectionStatus
    integration: IntegrationRead | None = None


class IntegrationSyncResponse(SyncResult):
    integration_id: UUID
