"""DTOs for n8n REST API responses.

These are transient: fetched from the remote instance, never stored as-is.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _RemoteModel(BaseModel):
    # n8n returns numeric ids for executions and some workflow fields
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


class RemoteTag(_RemoteModel):
    id: str | None = None
    name: str


class RemoteWorkflow(_RemoteModel):
    id: str
    name: str
    active: bool = False
    nodes: list[dict[str, Any]] = Field(default_factory=list)
    connections: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    tags: list[RemoteTag] = Field(default_factory=list)

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]


class WorkflowPage(_RemoteModel):
    data: list[RemoteWorkflow] = Field(default_factory=list)
    next_cursor: str | None = Field(default=None, alias="nextCursor")


class RemoteExecution(_RemoteModel):
    id: str
    finished: bool = False
    status: str | None = None
    mode: str | None = None
    workflow_id: str | None = Field(default=None, alias="workflowId")
    started_at: datetime | None = Field(default=None, alias="startedAt")
    stopped_at: datetime | None = Field(default=None, alias="stoppedAt")
    data: dict[str, Any] | None = None

    @property
    def duration_ms(self) -> int | None:
        if self.started_at is None or self.stopped_at is None:
            return None
        return int((self.stopped_at - self.started_at).total_seconds() * 1000)


class ExecutionPage(_RemoteModel):
    data: list[RemoteExecution] = Field(default_factory=list)
    next_cursor: str | None = Field(default=None, alias="nextCursor")


class WebhookInfo(_RemoteModel):
    node_name: str
    path: str
    method: str = "GET"


class ConnectionStatus(BaseModel):
    connected: bool
    instance_url: str | None = None
    error: str | None = None
