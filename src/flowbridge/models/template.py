"""Reusable workflow templates and their installations."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.flowbridge.models.base import utc_now
from src.flowbridge.models.enums import InstallationStatus


class N8nTemplate(SQLModel, table=True):
    """Published workflow definition (nodes + connections).

    Only the counters and moderation flags change after publishing.
    """

    __tablename__ = "n8n_templates"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    category: str = Field(default="general", max_length=50, index=True)
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
    )
    icon: str | None = Field(default=None, max_length=50)
    workflow_json: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    required_credentials: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
    )
    author_name: str | None = Field(default=None, max_length=100)
    is_public: bool = Field(default=True)
    is_featured: bool = Field(default=False)
    is_active: bool = Field(default=True)
    install_count: int = Field(default=0)
    rating: float = Field(default=0.0)
    rating_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)


class N8nTemplateInstallation(SQLModel, table=True):
    """Links a template, the integration it was installed into, and the resulting workflow."""

    __tablename__ = "n8n_template_installations"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(index=True)
    template_id: UUID = Field(foreign_key="public.n8n_templates.id", index=True)
    integration_id: UUID = Field(foreign_key="public.n8n_integrations.id", ondelete="CASCADE")
    workflow_id: UUID | None = Field(
        default=None, foreign_key="public.n8n_workflows.id", ondelete="SET NULL"
    )
    custom_config: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    status: str = Field(default=InstallationStatus.INSTALLED.value, max_length=20)
    installed_by: str | None = Field(default=None, max_length=255)
    installed_at: datetime = Field(default_factory=utc_now)
