"""Platform event to workflow mapping."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.flowbridge.models.base import utc_now


class N8nEventMapping(SQLModel, table=True):
    """Routes a platform event type to a workflow.

    payload_transform maps output field name -> dotted path into the event data.
    trigger_count and last_triggered_at only move forward, on successful triggers.
    """

    __tablename__ = "n8n_event_mappings"
    __table_args__ = (
        Index("ix_n8n_event_mappings_org_event", "organization_id", "event_type"),
        UniqueConstraint("workflow_id", "event_type", name="uq_n8n_event_mappings_workflow_event"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(index=True)
    workflow_id: UUID = Field(foreign_key="public.n8n_workflows.id", ondelete="CASCADE")
    event_type: str = Field(max_length=100)
    payload_transform: dict[str, str] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )
    is_active: bool = Field(default=True)
    trigger_count: int = Field(default=0)
    last_triggered_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
