"""Execution schemas for API request/response."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class ExecutionRead(BaseModel):
    id: UUID
    workflow_id: UUID
    trigger_source: str
    triggered_by: str
    input_data: dict[str, Any]
    n8n_execution_id: str | None = None
    status: str
    output_data: dict[str, Any] | None = None
    error_message: str | None = None
    execution_time_ms: int | None = None
    started_at: datetime
    finished_at: datetime | None = None

    model_config = {"from_attributes": True}


class ExecutionPollRequest(BaseModel):
    """Override the configured polling budget for one call."""

    max_attempts: int | None = Field(default=None, ge=1, le=120)
    interval_seconds: float | None = Field(default=None, ge=0, le=30)
