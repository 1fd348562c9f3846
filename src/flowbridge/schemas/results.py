"""Result objects returned by the n8n services.

Service methods report failure through these instead of raising, so the
HTTP layer (and any other caller) branches on `success`.
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class OperationResult(BaseModel):
    success: bool
    error: str | None = None


class SyncResult(BaseModel):
    success: bool = True
    synced: int = 0
    added: int = 0
    updated: int = 0
    removed: int = 0
    errors: list[str] = Field(default_factory=list)


class ExecuteResult(BaseModel):
    success: bool
    execution_id: UUID | None = None
    n8n_execution_id: str | None = None
    error: str | None = None


class PollResult(BaseModel):
    success: bool
    status: str
    output_data: Any = None
    error: str | None = None


class EventTriggerResult(BaseModel):
    triggered: int = 0
    errors: list[str] = Field(default_factory=list)


class TemplateInstallResult(BaseModel):
    success: bool
    workflow_id: UUID | None = None
    n8n_workflow_id: str | None = None
    installation_id: UUID | None = None
    error: str | None = None


class WebhookTriggerResult(BaseModel):
    success: bool
    response: Any = None
    error: str | None = None
