"""Connected n8n instance."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.flowbridge.models.base import utc_now


class N8nIntegration(SQLModel, table=True):
    """One connected n8n instance owned by an organization."""

    __tablename__ = "n8n_integrations"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(index=True)
    name: str = Field(default="n8n", max_length=100)
    instance_url: str = Field(max_length=500)
    api_key: str = Field(max_length=500)
    is_active: bool = Field(default=True)
    is_verified: bool = Field(default=False)
    last_verified_at: datetime | None = Field(default=None)
    last_sync_at: datetime | None = Field(default=None)
    created_by: str | None = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
