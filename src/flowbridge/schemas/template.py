"""Template schemas for API request/response."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class TemplateRead(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    category: str
    tags: list[str]
    icon: str | None = None
    required_credentials: list[str]
    author_name: str | None = None
    is_featured: bool
    install_count: int
    rating: float
    rating_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class TemplateDetail(TemplateRead):
    """Template including its workflow definition."""

    workflow_json: dict[str, Any]


class TemplateListResponse(BaseModel):
    """Offset-paginated template page."""

    items: list[TemplateRead]
    total: int
    limit: int
    offset: int


class TemplateCategory(BaseModel):
    category: str
    count: int


class TemplateInstallRequest(BaseModel):
    """custom_config maps node name -> parameters merged into that node."""

    integration_id: UUID
    custom_config: dict[str, dict[str, Any]] | None = None


class InstallationRead(BaseModel):
    id: UUID
    template_id: UUID
    template_name: str
    integration_id: UUID
    workflow_id: UUID | None = None
    workflow_name: str | None = None
    status: str
    installed_by: str | None = None
    installed_at: datetime


class UninstallRequest(BaseModel):
    delete_remote: bool = Field(
        default=False,
        description="Also delete the workflow on the n8n instance (best effort).",
    )
