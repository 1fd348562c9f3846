"""Tracked execution endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.flowbridge.api.dependencies import ExecutionServiceDep, ReadScope, RequestScope
from src.flowbridge.models import ExecutionStatus
from src.flowbridge.schemas.execution import ExecutionPollRequest, ExecutionRead
from src.flowbridge.schemas.pagination import PaginatedResponse
from src.flowbridge.schemas.results import PollResult

router = APIRouter(prefix="/executions", tags=["executions"])


@router.get(
    "",
    response_model=PaginatedResponse[ExecutionRead],
    summary="List executions",
    description="List tracked executions, newest first.",
)
async def list_executions(
    organization_id: ReadScope,
    service: ExecutionServiceDep,
    workflow_id: Annotated[UUID | None, Query(description="Filter by workflow")] = None,
    status_filter: Annotated[
        ExecutionStatus | None, Query(alias="status", description="Filter by status")
    ] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[ExecutionRead]:
    executions, next_cursor, has_more = await service.list_executions(
        organization_id,
        cursor,
        limit,
        workflow_id=workflow_id,
        status=status_filter.value if status_filter else None,
    )
    return PaginatedResponse(
        items=[ExecutionRead.model_validate(e) for e in executions],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{execution_id}",
    response_model=ExecutionRead,
    summary="Get execution",
    responses={404: {"description": "Execution not found"}},
)
async def get_execution(
    execution_id: UUID,
    organization_id: ReadScope,
    service: ExecutionServiceDep,
) -> ExecutionRead:
    execution = await service.get_execution(execution_id, organization_id)
    if execution is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Execution {execution_id} not found",
        )
    return ExecutionRead.model_validate(execution)


@router.post(
    "/{execution_id}/poll",
    response_model=PollResult,
    summary="Poll execution",
    description=(
        "Wait for the remote run to finish and record the outcome. "
        'Returns status "timeout" (nothing written) if it is still running.'
    ),
)
async def poll_execution(
    execution_id: UUID,
    scope: RequestScope,
    service: ExecutionServiceDep,
    request: ExecutionPollRequest | None = None,
) -> PollResult:
    organization_id, _ = scope
    request = request or ExecutionPollRequest()
    return await service.poll_execution_status(
        execution_id,
        organization_id,
        max_attempts=request.max_attempts,
        interval=request.interval_seconds,
    )
