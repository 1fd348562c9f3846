"""Mirrored workflow endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.flowbridge.api.dependencies import (
    ExecutionServiceDep,
    ReadScope,
    RequestScope,
    WorkflowServiceDep,
)
from src.flowbridge.models import TriggerSource
from src.flowbridge.schemas.pagination import PaginatedResponse
from src.flowbridge.schemas.results import ExecuteResult, OperationResult, WebhookTriggerResult
from src.flowbridge.schemas.workflow import (
    WebhookFireRequest,
    WorkflowExecuteRequest,
    WorkflowRead,
)

router = APIRouter(prefix="/workflows", tags=["workflows"])


@router.get(
    "",
    response_model=PaginatedResponse[WorkflowRead],
    summary="List workflows",
    description="List mirrored workflows with cursor-based pagination.",
)
async def list_workflows(
    organization_id: ReadScope,
    service: WorkflowServiceDep,
    integration_id: Annotated[UUID | None, Query(description="Filter by integration")] = None,
    synced_only: Annotated[bool, Query(description="Hide workflows removed remotely")] = False,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[WorkflowRead]:
    workflows, next_cursor, has_more = await service.list_workflows(
        organization_id, cursor, limit, integration_id=integration_id, synced_only=synced_only
    )
    return PaginatedResponse(
        items=[WorkflowRead.model_validate(w) for w in workflows],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{workflow_id}",
    response_model=WorkflowRead,
    summary="Get workflow",
    responses={404: {"description": "Workflow not found"}},
)
async def get_workflow(
    workflow_id: UUID,
    organization_id: ReadScope,
    service: WorkflowServiceDep,
) -> WorkflowRead:
    workflow = await service.get_workflow(workflow_id, organization_id)
    if workflow is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Workflow {workflow_id} not found",
        )
    return WorkflowRead.model_validate(workflow)


@router.post(
    "/{workflow_id}/execute",
    response_model=ExecuteResult,
    summary="Execute workflow",
    description=(
        "Start a tracked run. Returns as soon as n8n accepts it; "
        "poll the execution for completion."
    ),
)
async def execute_workflow(
    workflow_id: UUID,
    scope: RequestScope,
    service: ExecutionServiceDep,
    request: WorkflowExecuteRequest | None = None,
) -> ExecuteResult:
    organization_id, user_id = scope
    return await service.execute_workflow(
        workflow_id,
        organization_id,
        user_id,
        input_data=request.input_data if request else None,
        triggered_by=TriggerSource.MANUAL,
    )


@router.post(
    "/{workflow_id}/activate",
    response_model=OperationResult,
    summary="Activate workflow",
)
async def activate_workflow(
    workflow_id: UUID,
    scope: RequestScope,
    service: WorkflowServiceDep,
) -> OperationResult:
    organization_id, _ = scope
    return await service.set_active(workflow_id, organization_id, True)


@router.post(
    "/{workflow_id}/deactivate",
    response_model=OperationResult,
    summary="Deactivate workflow",
)
async def deactivate_workflow(
    workflow_id: UUID,
    scope: RequestScope,
    service: WorkflowServiceDep,
) -> OperationResult:
    organization_id, _ = scope
    return await service.set_active(workflow_id, organization_id, False)


@router.post(
    "/{workflow_id}/webhook",
    response_model=WebhookTriggerResult,
    summary="Fire webhook",
    description="Call the workflow's public webhook directly. The run is not tracked.",
)
async def fire_webhook(
    workflow_id: UUID,
    scope: RequestScope,
    service: WorkflowServiceDep,
    request: WebhookFireRequest | None = None,
) -> WebhookTriggerResult:
    organization_id, _ = scope
    request = request or WebhookFireRequest()
    return await service.fire_webhook(
        workflow_id, organization_id, request.payload, method=request.method
    )
