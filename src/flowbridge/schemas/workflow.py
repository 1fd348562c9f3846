"""Mirrored workflow schemas for API request/response."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field


class WorkflowRead(BaseModel):
    id: UUID
    integration_id: UUID
    n8n_workflow_id: str
    name: str
    trigger_type: str
    trigger_config: dict[str, Any]
    tags: list[str]
    is_active: bool
    is_synced: bool
    last_synced_at: datetime | None = None
    total_executions: int
    successful_executions: int
    failed_executions: int
    avg_execution_time_ms: int | None = None
    last_execution_at: datetime | None = None
    last_execution_status: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WorkflowExecuteRequest(BaseModel):
    """Input passed to the workflow run as `data`."""

    input_data: dict[str, Any] = Field(default_factory=dict)


class WebhookFireRequest(BaseModel):
    payload: dict[str, Any] = Field(default_factory=dict)
    # None uses the method configured on the webhook node
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] | None = None
