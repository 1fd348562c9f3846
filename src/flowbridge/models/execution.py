"""Tracked workflow execution."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.flowbridge.models.base import utc_now
from src.flowbridge.models.enums import ExecutionStatus, TriggerSource


class N8nExecution(SQLModel, table=True):
    """One triggered run of a mirrored workflow.

    Created as "started" before the remote call; moved to a terminal status once.
    """

    __tablename__ = "n8n_workflow_executions"
    __table_args__ = (
        Index("ix_n8n_executions_org_started", "organization_id", "started_at"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(index=True)
    workflow_id: UUID = Field(foreign_key="public.n8n_workflows.id", index=True, ondelete="CASCADE")
    trigger_source: str = Field(default=TriggerSource.MANUAL.value, max_length=20)
    triggered_by: str = Field(max_length=255)  # user id or "system"
    input_data: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    n8n_execution_id: str | None = Field(default=None, max_length=100, index=True)
    status: str = Field(default=ExecutionStatus.STARTED.value, max_length=20)
    output_data: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )
    error_message: str | None = Field(default=None, max_length=2000)
    execution_time_ms: int | None = Field(default=None)
    started_at: datetime = Field(default_factory=utc_now)
    finished_at: datetime | None = Field(default=None)

    @property
    def status_enum(self) -> ExecutionStatus:
        """Get status as ExecutionStatus enum."""
        return ExecutionStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.status_enum.is_terminal
