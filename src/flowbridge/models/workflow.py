"""Local mirror of a remote n8n workflow."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.flowbridge.models.base import utc_now
from src.flowbridge.models.enums import TriggerType


class N8nWorkflow(SQLModel, table=True):
    """Mirrored workflow - at most one row per (integration, remote workflow id).

    Rows whose remote workflow disappears are kept with is_synced=False.
    """

    __tablename__ = "n8n_workflows"
    __table_args__ = (
        UniqueConstraint(
            "integration_id", "n8n_workflow_id", name="uq_n8n_workflows_integration_remote"
        ),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(index=True)
    integration_id: UUID = Field(
        foreign_key="public.n8n_integrations.id", index=True, ondelete="CASCADE"
    )
    n8n_workflow_id: str = Field(max_length=100)
    name: str = Field(max_length=255)
    trigger_type: str = Field(default=TriggerType.MANUAL.value, max_length=20)
    trigger_config: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
    )
    is_active: bool = Field(default=False)
    is_synced: bool = Field(default=True)
    last_synced_at: datetime | None = Field(default=None)

    # Execution statistics
    total_executions: int = Field(default=0)
    successful_executions: int = Field(default=0)
    failed_executions: int = Field(default=0)
    avg_execution_time_ms: int | None = Field(default=None)
    last_execution_at: datetime | None = Field(default=None)
    last_execution_status: str | None = Field(default=None, max_length=20)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def webhook_path(self) -> str | None:
        return (self.trigger_config or {}).get("webhook_path")

    @property
    def webhook_method(self) -> str | None:
        return (self.trigger_config or {}).get("webhook_method")
