"""Repository for N8nExecution entity."""

from typing import Any
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from src.flowbridge.models import (
    ExecutionStatus,
    N8nExecution,
    N8nIntegration,
    N8nWorkflow,
    TriggerSource,
)
from src.flowbridge.models.base import utc_now
from src.flowbridge.repositories.base import BaseRepository


class ExecutionRepository(BaseRepository[N8nExecution]):
    """Repository for tracked workflow executions."""

    model = N8nExecution

    async def create_started(
        self,
        organization_id: UUID,
        workflow_id: UUID,
        trigger_source: TriggerSource | str,
        triggered_by: str,
        input_data: dict[str, Any] | None = None,
    ) -> N8nExecution:
        """Add an execution in the "started" state and flush it to get an id."""
        execution = N8nExecution(
            organization_id=organization_id,
            workflow_id=workflow_id,
            trigger_source=(
                trigger_source.value
                if isinstance(trigger_source, TriggerSource)
                else trigger_source
            ),
            triggered_by=triggered_by,
            input_data=input_data or {},
            status=ExecutionStatus.STARTED.value,
        )
        self.add(execution)
        await self.session.flush()
        return execution

    async def attach_remote_id(self, execution_id: UUID, n8n_execution_id: str | None) -> None:
        await self.session.execute(
            update(N8nExecution)
            .where(N8nExecution.id == execution_id)  # type: ignore[arg-type]
            .values(n8n_execution_id=n8n_execution_id)
        )

    async def complete(
        self,
        execution_id: UUID,
        status: ExecutionStatus,
        output_data: dict[str, Any] | None = None,
        error_message: str | None = None,
        execution_time_ms: int | None = None,
    ) -> bool:
        """Move a started execution to a terminal state.

        The WHERE clause only matches rows still in "started", so a terminal
        row is never overwritten.

        Returns:
            True if this call performed the transition.
        """
        if not status.is_terminal:
            raise ValueError(f"{status.value} is not a terminal execution status")
        result = await self.session.execute(
            update(N8nExecution)
            .where(
                N8nExecution.id == execution_id,  # type: ignore[arg-type]
                N8nExecution.status == ExecutionStatus.STARTED.value,  # type: ignore[arg-type]
            )
            .values(
                status=status.value,
                output_data=output_data,
                error_message=error_message[:2000] if error_message else None,
                execution_time_ms=execution_time_ms,
                finished_at=utc_now(),
            )
            .returning(N8nExecution.id)
        )
        return result.scalar_one_or_none() is not None

    async def get_for_organization(
        self, execution_id: UUID, organization_id: UUID
    ) -> N8nExecution | None:
        result = await self.session.execute(
            select(N8nExecution).where(
                N8nExecution.id == execution_id,
                N8nExecution.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_with_chain(
        self, execution_id: UUID, organization_id: UUID
    ) -> tuple[N8nExecution, N8nWorkflow, N8nIntegration] | None:
        """Load an execution with its workflow and that workflow's integration."""
        result = await self.session.execute(
            select(N8nExecution, N8nWorkflow, N8nIntegration)
            .join(N8nWorkflow, N8nWorkflow.id == N8nExecution.workflow_id)  # type: ignore[arg-type]
            .join(N8nIntegration, N8nIntegration.id == N8nWorkflow.integration_id)  # type: ignore[arg-type]
            .where(
                N8nExecution.id == execution_id,
                N8nExecution.organization_id == organization_id,
            )
        )
        row = result.first()
        if row is None:
            return None
        return row[0], row[1], row[2]

    async def list_by_organization(
        self,
        organization_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        workflow_id: UUID | None = None,
        status: str | None = None,
    ) -> tuple[list[N8nExecution], str | None, bool]:
        """List executions newest first.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(N8nExecution).where(N8nExecution.organization_id == organization_id)
        if workflow_id:
            query = query.where(N8nExecution.workflow_id == workflow_id)
        if status:
            query = query.where(N8nExecution.status == status)
        return await self.paginate(query, cursor, limit, N8nExecution.started_at)
