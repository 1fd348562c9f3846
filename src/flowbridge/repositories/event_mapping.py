"""Repository for N8nEventMapping entity."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from src.flowbridge.models import N8nEventMapping, N8nWorkflow
from src.flowbridge.models.base import utc_now
from src.flowbridge.repositories.base import BaseRepository


class EventMappingRepository(BaseRepository[N8nEventMapping]):
    """Repository for event -> workflow mappings."""

    model = N8nEventMapping

    async def list_for_event(
        self, organization_id: UUID, event_type: str
    ) -> list[tuple[N8nEventMapping, N8nWorkflow]]:
        """Active mappings for an event, each with its target workflow."""
        result = await self.session.execute(
            select(N8nEventMapping, N8nWorkflow)
            .join(N8nWorkflow, N8nWorkflow.id == N8nEventMapping.workflow_id)  # type: ignore[arg-type]
            .where(
                N8nEventMapping.organization_id == organization_id,
                N8nEventMapping.event_type == event_type,
                N8nEventMapping.is_active == True,  # noqa: E712
            )
            .order_by(N8nEventMapping.created_at)  # type: ignore[arg-type]
        )
        return [(mapping, workflow) for mapping, workflow in result.all()]

    async def record_trigger(self, mapping_id: UUID) -> None:
        """Atomic counter bump after a successful trigger."""
        await self.session.execute(
            update(N8nEventMapping)
            .where(N8nEventMapping.id == mapping_id)  # type: ignore[arg-type]
            .values(
                trigger_count=N8nEventMapping.trigger_count + 1,
                last_triggered_at=utc_now(),
            )
        )

    async def get_for_organization(
        self, mapping_id: UUID, organization_id: UUID
    ) -> N8nEventMapping | None:
        result = await self.session.execute(
            select(N8nEventMapping).where(
                N8nEventMapping.id == mapping_id,
                N8nEventMapping.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_organization(
        self, organization_id: UUID, event_type: str | None = None
    ) -> list[N8nEventMapping]:
        query = select(N8nEventMapping).where(N8nEventMapping.organization_id == organization_id)
        if event_type:
            query = query.where(N8nEventMapping.event_type == event_type)
        result = await self.session.execute(
            query.order_by(N8nEventMapping.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())
