"""Event mapping schemas for API request/response."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class EventMappingCreate(BaseModel):
    """Schema for mapping a platform event type to a workflow.

    payload_transform maps output field -> dotted path into the event data,
    e.g. {"email": "user.email"}.
    """

    workflow_id: UUID
    event_type: str = Field(min_length=1, max_length=100)
    payload_transform: dict[str, str] | None = None
    is_active: bool = True

    @field_validator("event_type")
    @classmethod
    def validate_event_type(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Event type cannot be empty or whitespace only")
        return v

    @field_validator("payload_transform")
    @classmethod
    def validate_payload_transform(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        if v is None:
            return v
        for target, path in v.items():
            if not target or not path.strip():
                raise ValueError("Payload transform entries need a field name and a path")
        return v


class EventMappingRead(BaseModel):
    id: UUID
    workflow_id: UUID
    event_type: str
    payload_transform: dict[str, str] | None = None
    is_active: bool
    trigger_count: int
    last_triggered_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class EventFireRequest(BaseModel):
    event_type: str = Field(min_length=1, max_length=100)
    data: dict[str, Any] = Field(default_factory=dict)
