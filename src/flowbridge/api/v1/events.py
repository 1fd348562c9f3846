"""Event mapping endpoints and event delivery."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.flowbridge.api.dependencies import EventServiceDep, ReadScope, RequestScope
from src.flowbridge.schemas.event import EventFireRequest, EventMappingCreate, EventMappingRead
from src.flowbridge.schemas.results import EventTriggerResult
from src.flowbridge.services.errors import WorkflowNotFoundError

router = APIRouter(prefix="/events", tags=["events"])


@router.get(
    "/mappings",
    response_model=list[EventMappingRead],
    summary="List event mappings",
)
async def list_mappings(
    organization_id: ReadScope,
    service: EventServiceDep,
    event_type: Annotated[str | None, Query(description="Filter by event type")] = None,
) -> list[EventMappingRead]:
    mappings = await service.list_mappings(organization_id, event_type)
    return [EventMappingRead.model_validate(m) for m in mappings]


@router.post(
    "/mappings",
    response_model=EventMappingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create event mapping",
    responses={
        404: {"description": "Workflow not found"},
        409: {"description": "Workflow already mapped to this event type"},
    },
)
async def create_mapping(
    request: EventMappingCreate,
    scope: RequestScope,
    service: EventServiceDep,
) -> EventMappingRead:
    organization_id, _ = scope
    try:
        mapping = await service.create_mapping(
            organization_id,
            request.workflow_id,
            request.event_type,
            payload_transform=request.payload_transform,
            is_active=request.is_active,
        )
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return EventMappingRead.model_validate(mapping)


@router.delete(
    "/mappings/{mapping_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event mapping",
    responses={404: {"description": "Event mapping not found"}},
)
async def delete_mapping(
    mapping_id: UUID,
    scope: RequestScope,
    service: EventServiceDep,
) -> None:
    organization_id, _ = scope
    result = await service.delete_mapping(mapping_id, organization_id)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)


@router.post(
    "/trigger",
    response_model=EventTriggerResult,
    summary="Trigger event",
    description=(
        "Start every workflow mapped to the event type. One failure does not stop the rest."
    ),
)
async def trigger_event(
    request: EventFireRequest,
    scope: RequestScope,
    service: EventServiceDep,
) -> EventTriggerResult:
    organization_id, _ = scope
    return await service.trigger_workflows_for_event(
        organization_id, request.event_type, request.data
    )
