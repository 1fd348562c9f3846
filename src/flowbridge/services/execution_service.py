"""Tracked workflow execution: start, then poll to completion."""

import asyncio
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.flowbridge.core.config import get_settings
from src.flowbridge.core.logging import get_logger
from src.flowbridge.models import ExecutionStatus, N8nExecution, TriggerSource
from src.flowbridge.n8n import N8nClient, N8nError, RemoteExecution
from src.flowbridge.repositories import ExecutionRepository, WorkflowRepository
from src.flowbridge.schemas.results import ExecuteResult, PollResult
from src.flowbridge.services.errors import (
    ExecutionNotFoundError,
    FlowbridgeError,
    IntegrationInactiveError,
    WorkflowNotFoundError,
)
from src.flowbridge.services.types import ClientFactory

logger = get_logger(__name__)


class ExecutionService:
    """Runs one mirrored workflow once and records its lifecycle.

    The execution row is committed in "started" before the remote call, and
    moved to a terminal status exactly once, either by immediate failure
    handling or by poll_execution_status.
    """

    def __init__(
        self,
        workflow_repo: WorkflowRepository,
        execution_repo: ExecutionRepository,
        session: AsyncSession,
        client_factory: ClientFactory = N8nClient.from_integration,
    ):
        self.workflow_repo = workflow_repo
        self.execution_repo = execution_repo
        self.session = session
        self.client_factory = client_factory

    async def execute_workflow(
        self,
        workflow_id: UUID,
        organization_id: UUID,
        user_id: str,
        input_data: dict[str, Any] | None = None,
        triggered_by: TriggerSource = TriggerSource.MANUAL,
    ) -> ExecuteResult:
        """Start a remote run. Completion is not known when this returns."""
        try:
            loaded = await self.workflow_repo.get_with_integration(workflow_id, organization_id)
            if loaded is None:
                raise WorkflowNotFoundError()
            workflow, integration = loaded
            if not integration.is_active:
                raise IntegrationInactiveError()

            execution = await self.execution_repo.create_started(
                organization_id=organization_id,
                workflow_id=workflow.id,
                trigger_source=triggered_by,
                triggered_by=user_id,
                input_data=input_data,
            )
            await self.session.commit()
        except FlowbridgeError as e:
            return ExecuteResult(success=False, error=str(e))
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Could not record execution", workflow_id=str(workflow_id), error=str(e))
            return ExecuteResult(success=False, error=f"Could not record execution: {e}")

        try:
            async with self.client_factory(integration) as client:
                n8n_execution_id = await client.execute_workflow(
                    workflow.n8n_workflow_id, input_data
                )
        except N8nError as e:
            await self.execution_repo.complete(
                execution.id, ExecutionStatus.ERROR, error_message=str(e)
            )
            await self.session.commit()
            logger.warning(
                "Workflow execution failed to start",
                workflow_id=str(workflow.id),
                execution_id=str(execution.id),
                error=str(e),
            )
            return ExecuteResult(success=False, execution_id=execution.id, error=str(e))

        await self.execution_repo.attach_remote_id(execution.id, n8n_execution_id)
        await self.session.commit()

        logger.info(
            "Workflow execution started",
            workflow_id=str(workflow.id),
            execution_id=str(execution.id),
            n8n_execution_id=n8n_execution_id,
            trigger_source=triggered_by.value,
        )
        return ExecuteResult(
            success=True, execution_id=execution.id, n8n_execution_id=n8n_execution_id
        )

    async def poll_execution_status(
        self,
        execution_id: UUID,
        organization_id: UUID,
        max_attempts: int | None = None,
        interval: float | None = None,
    ) -> PollResult:
        """Wait for a started execution to finish remotely.

        Returns status "timeout" without writing anything when the attempt
        budget runs out, so the caller can poll again later. A row that is
        already terminal is answered from the database alone.
        """
        settings = get_settings()
        max_attempts = max_attempts if max_attempts is not None else settings.n8n_poll_max_attempts
        interval = interval if interval is not None else settings.n8n_poll_interval_seconds

        loaded = await self.execution_repo.get_with_chain(execution_id, organization_id)
        if loaded is None:
            return PollResult(success=False, status="error", error=str(ExecutionNotFoundError()))
        execution, workflow, integration = loaded

        if execution.is_terminal:
            return self._stored_result(execution)
        if not execution.n8n_execution_id:
            return PollResult(success=False, status="error", error="No n8n execution ID")

        async with self.client_factory(integration) as client:
            for attempt in range(1, max_attempts + 1):
                remote = await self._fetch_remote(client, execution, attempt)
                if remote is not None and remote.finished:
                    return await self._finish(execution, workflow.id, remote)
                if attempt < max_attempts:
                    await asyncio.sleep(interval)

        logger.info(
            "Execution polling timed out",
            execution_id=str(execution.id),
            attempts=max_attempts,
        )
        return PollResult(success=False, status="timeout", error="Polling timed out")

    async def _fetch_remote(
        self, client: N8nClient, execution: N8nExecution, attempt: int
    ) -> RemoteExecution | None:
        try:
            return await client.get_execution(execution.n8n_execution_id)  # type: ignore[arg-type]
        except N8nError as e:
            logger.warning(
                "Execution status fetch failed",
                execution_id=str(execution.id),
                attempt=attempt,
                error=str(e),
            )
            return None

    async def _finish(
        self, execution: N8nExecution, workflow_id: UUID, remote: RemoteExecution
    ) -> PollResult:
        succeeded = remote.status == ExecutionStatus.SUCCESS.value
        status = ExecutionStatus.SUCCESS if succeeded else ExecutionStatus.ERROR
        error_message = None if succeeded else f"Execution finished with status {remote.status}"

        applied = await self.execution_repo.complete(
            execution.id,
            status,
            output_data=remote.data,
            error_message=error_message,
            execution_time_ms=remote.duration_ms,
        )
        if applied:
            await self.workflow_repo.record_execution_stats(
                workflow_id, succeeded, remote.duration_ms
            )
        await self.session.commit()

        if not applied:
            # Another poller completed the row first; report what was stored
            await self.session.refresh(execution)
            logger.info(
                "Execution already completed",
                execution_id=str(execution.id),
                status=execution.status,
            )
            return self._stored_result(execution)

        logger.info(
            "Execution finished",
            execution_id=str(execution.id),
            status=status.value,
            execution_time_ms=remote.duration_ms,
        )
        return PollResult(
            success=succeeded, status=status.value, output_data=remote.data, error=error_message
        )

    @staticmethod
    def _stored_result(execution: N8nExecution) -> PollResult:
        return PollResult(
            success=execution.status == ExecutionStatus.SUCCESS.value,
            status=execution.status,
            output_data=execution.output_data,
            error=execution.error_message,
        )

    async def get_execution(self, execution_id: UUID, organization_id: UUID) -> N8nExecution | None:
        return await self.execution_repo.get_for_organization(execution_id, organization_id)

    async def list_executions(
        self,
        organization_id: UUID,
        cursor: str | None,
        limit: int,
        workflow_id: UUID | None = None,
        status: str | None = None,
    ) -> tuple[list[N8nExecution], str | None, bool]:
        return await self.execution_repo.list_by_organization(
            organization_id, cursor, limit, workflow_id=workflow_id, status=status
        )
