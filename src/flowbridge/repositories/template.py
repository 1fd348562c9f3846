"""Repositories for N8nTemplate and N8nTemplateInstallation."""

from uuid import UUID

from sqlalchemy import delete, func, or_, update
from sqlmodel import select

from src.flowbridge.models import N8nTemplate, N8nTemplateInstallation, N8nWorkflow
from src.flowbridge.repositories.base import BaseRepository


class TemplateRepository(BaseRepository[N8nTemplate]):
    """Repository for the template catalogue."""

    model = N8nTemplate

    async def list_public(
        self,
        category: str | None = None,
        featured: bool = False,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[N8nTemplate], int]:
        """List public, active templates, most installed first.

        Returns:
            Tuple of (templates, total matching count)
        """
        query = select(N8nTemplate).where(
            N8nTemplate.is_public == True,  # noqa: E712
            N8nTemplate.is_active == True,  # noqa: E712
        )
        if category:
            query = query.where(N8nTemplate.category == category)
        if featured:
            query = query.where(N8nTemplate.is_featured == True)  # noqa: E712
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    N8nTemplate.name.ilike(pattern),  # type: ignore[attr-defined]
                    N8nTemplate.description.ilike(pattern),  # type: ignore[union-attr]
                )
            )

        total = await self.session.scalar(select(func.count()).select_from(query.subquery()))
        result = await self.session.execute(
            query.order_by(N8nTemplate.install_count.desc())  # type: ignore[attr-defined]
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def category_counts(self) -> list[tuple[str, int]]:
        """(category, template count) pairs, largest first."""
        count = func.count().label("count")
        result = await self.session.execute(
            select(N8nTemplate.category, count)
            .where(
                N8nTemplate.is_public == True,  # noqa: E712
                N8nTemplate.is_active == True,  # noqa: E712
            )
            .group_by(N8nTemplate.category)
            .order_by(count.desc())
        )
        return [(category, n) for category, n in result.all()]

    async def increment_install_count(self, template_id: UUID) -> None:
        await self.session.execute(
            update(N8nTemplate)
            .where(N8nTemplate.id == template_id)  # type: ignore[arg-type]
            .values(install_count=N8nTemplate.install_count + 1)
        )


class TemplateInstallationRepository(BaseRepository[N8nTemplateInstallation]):
    """Repository for template installations."""

    model = N8nTemplateInstallation

    async def get_for_organization(
        self, installation_id: UUID, organization_id: UUID
    ) -> N8nTemplateInstallation | None:
        result = await self.session.execute(
            select(N8nTemplateInstallation).where(
                N8nTemplateInstallation.id == installation_id,
                N8nTemplateInstallation.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_organization(
        self, organization_id: UUID
    ) -> list[tuple[N8nTemplateInstallation, N8nTemplate, N8nWorkflow | None]]:
        """Installations newest first, with their template and (if still present) workflow."""
        result = await self.session.execute(
            select(N8nTemplateInstallation, N8nTemplate, N8nWorkflow)
            .join(N8nTemplate, N8nTemplate.id == N8nTemplateInstallation.template_id)  # type: ignore[arg-type]
            .outerjoin(N8nWorkflow, N8nWorkflow.id == N8nTemplateInstallation.workflow_id)  # type: ignore[arg-type]
            .where(N8nTemplateInstallation.organization_id == organization_id)
            .order_by(N8nTemplateInstallation.installed_at.desc())  # type: ignore[attr-defined]
        )
        return [(inst, template, workflow) for inst, template, workflow in result.all()]

    async def delete_by_id(self, installation_id: UUID) -> None:
        await self.session.execute(
            delete(N8nTemplateInstallation).where(
                N8nTemplateInstallation.id == installation_id  # type: ignore[arg-type]
            )
        )
