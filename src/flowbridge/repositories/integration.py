"""Repository for N8nIntegration entity."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from src.flowbridge.models import N8nIntegration
from src.flowbridge.models.base import utc_now
from src.flowbridge.repositories.base import BaseRepository


class IntegrationRepository(BaseRepository[N8nIntegration]):
    """Repository for connected n8n instances."""

    model = N8nIntegration

    async def get_for_organization(
        self, integration_id: UUID, organization_id: UUID
    ) -> N8nIntegration | None:
        """Get an integration only if the organization owns it."""
        result = await self.session.execute(
            select(N8nIntegration).where(
                N8nIntegration.id == integration_id,
                N8nIntegration.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_organization(self, organization_id: UUID) -> list[N8nIntegration]:
        result = await self.session.execute(
            select(N8nIntegration)
            .where(N8nIntegration.organization_id == organization_id)
            .order_by(N8nIntegration.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def mark_synced(self, integration_id: UUID) -> None:
        """Record a completed sync pass. A sync also proves the credentials work."""
        now = utc_now()
        await self.session.execute(
            update(N8nIntegration)
            .where(N8nIntegration.id == integration_id)  # type: ignore[arg-type]
            .values(last_sync_at=now, is_verified=True, last_verified_at=now, updated_at=now)
        )

    async def mark_verified(self, integration_id: UUID, verified: bool) -> None:
        now = utc_now()
        values: dict = {"is_verified": verified, "updated_at": now}
        if verified:
            values["last_verified_at"] = now
        await self.session.execute(
            update(N8nIntegration)
            .where(N8nIntegration.id == integration_id)  # type: ignore[arg-type]
            .values(**values)
        )
