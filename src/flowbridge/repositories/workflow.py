"""Repository for N8nWorkflow (local mirror) entity."""

from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlalchemy.dialects.postgresql import insert
from sqlmodel import select

from src.flowbridge.models import ExecutionStatus, N8nIntegration, N8nWorkflow
from src.flowbridge.models.base import utc_now
from src.flowbridge.repositories.base import BaseRepository

# Columns identifying the row; never rewritten by an upsert
_UPSERT_KEY_COLUMNS = {"organization_id", "integration_id", "n8n_workflow_id"}


class WorkflowRepository(BaseRepository[N8nWorkflow]):
    """Repository for mirrored workflows."""

    model = N8nWorkflow

    async def get_for_organization(
        self, workflow_id: UUID, organization_id: UUID
    ) -> N8nWorkflow | None:
        result = await self.session.execute(
            select(N8nWorkflow).where(
                N8nWorkflow.id == workflow_id,
                N8nWorkflow.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_with_integration(
        self, workflow_id: UUID, organization_id: UUID
    ) -> tuple[N8nWorkflow, N8nIntegration] | None:
        """Load a workflow together with the integration it belongs to."""
        result = await self.session.execute(
            select(N8nWorkflow, N8nIntegration)
            .join(N8nIntegration, N8nIntegration.id == N8nWorkflow.integration_id)  # type: ignore[arg-type]
            .where(
                N8nWorkflow.id == workflow_id,
                N8nWorkflow.organization_id == organization_id,
            )
        )
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]

    async def list_by_organization(
        self,
        organization_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        integration_id: UUID | None = None,
        synced_only: bool = False,
    ) -> tuple[list[N8nWorkflow], str | None, bool]:
        """List mirrored workflows with cursor pagination.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(N8nWorkflow).where(N8nWorkflow.organization_id == organization_id)
        if integration_id:
            query = query.where(N8nWorkflow.integration_id == integration_id)
        if synced_only:
            query = query.where(N8nWorkflow.is_synced == True)  # noqa: E712
        return await self.paginate(query, cursor, limit, N8nWorkflow.created_at)

    async def remote_id_map(self, integration_id: UUID) -> dict[str, UUID]:
        """Map remote workflow id -> local id for every mirrored row of an integration."""
        result = await self.session.execute(
            select(N8nWorkflow.n8n_workflow_id, N8nWorkflow.id).where(
                N8nWorkflow.integration_id == integration_id
            )
        )
        return {remote_id: local_id for remote_id, local_id in result.all()}

    async def upsert(
        self,
        organization_id: UUID,
        integration_id: UUID,
        n8n_workflow_id: str,
        name: str,
        trigger_type: str,
        trigger_config: dict[str, Any],
        is_active: bool = False,
        tags: list[str] | None = None,
    ) -> UUID:
        """Insert or refresh the mirror row for one remote workflow.

        Keyed by (integration_id, n8n_workflow_id): re-running never duplicates,
        and concurrent writers end up last-write-wins.

        Returns:
            The local workflow id.
        """
        now = utc_now()
        values = {
            "organization_id": organization_id,
            "integration_id": integration_id,
            "n8n_workflow_id": n8n_workflow_id,
            "name": name,
            "trigger_type": trigger_type,
            "trigger_config": trigger_config,
            "tags": tags or [],
            "is_active": is_active,
            "is_synced": True,
            "last_synced_at": now,
            "updated_at": now,
        }
        stmt = insert(N8nWorkflow).values(**values)
        stmt = stmt.on_conflict_do_update(
            constraint="uq_n8n_workflows_integration_remote",
            set_={
                key: stmt.excluded[key] for key in values if key not in _UPSERT_KEY_COLUMNS
            },
        ).returning(N8nWorkflow.id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def mark_unsynced(self, workflow_ids: list[UUID]) -> int:
        """Soft-remove mirror rows whose remote workflow is gone."""
        if not workflow_ids:
            return 0
        result = await self.session.execute(
            update(N8nWorkflow)
            .where(N8nWorkflow.id.in_(workflow_ids))  # type: ignore[attr-defined]
            .values(is_synced=False, updated_at=utc_now())
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def set_active(self, workflow_id: UUID, is_active: bool) -> None:
        await self.session.execute(
            update(N8nWorkflow)
            .where(N8nWorkflow.id == workflow_id)  # type: ignore[arg-type]
            .values(is_active=is_active, updated_at=utc_now())
        )

    async def record_execution_stats(
        self, workflow_id: UUID, success: bool, execution_time_ms: int | None = None
    ) -> None:
        """Atomically bump execution counters after a run reaches a terminal state.

        avg_execution_time_ms is a running average over successful runs only.
        """
        now = utc_now()
        values: dict[str, Any] = {
            "total_executions": N8nWorkflow.total_executions + 1,
            "successful_executions": N8nWorkflow.successful_executions + (1 if success else 0),
            "failed_executions": N8nWorkflow.failed_executions + (0 if success else 1),
            "last_execution_at": now,
            "last_execution_status": (
                ExecutionStatus.SUCCESS.value if success else ExecutionStatus.ERROR.value
            ),
            "updated_at": now,
        }
        if success and execution_time_ms is not None:
            values["avg_execution_time_ms"] = (
                func.coalesce(N8nWorkflow.avg_execution_time_ms, 0)
                * N8nWorkflow.successful_executions
                + execution_time_ms
            ) // (N8nWorkflow.successful_executions + 1)
        await self.session.execute(
            update(N8nWorkflow)
            .where(N8nWorkflow.id == workflow_id)  # type: ignore[arg-type]
            .values(**values)
        )

    async def delete_by_id(self, workflow_id: UUID) -> None:
        await self.session.execute(
            delete(N8nWorkflow).where(N8nWorkflow.id == workflow_id)  # type: ignore[arg-type]
        )
