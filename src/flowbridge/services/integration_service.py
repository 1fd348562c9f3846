"""Connected n8n instances."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.flowbridge.core.logging import get_logger
from src.flowbridge.models import N8nIntegration
from src.flowbridge.models.base import utc_now
from src.flowbridge.n8n import ConnectionStatus, N8nClient
from src.flowbridge.repositories import IntegrationRepository
from src.flowbridge.schemas.results import OperationResult
from src.flowbridge.services.types import ClientFactory

logger = get_logger(__name__)


class IntegrationService:
    """Connect, verify and disconnect n8n instances for an organization."""

    def __init__(
        self,
        integration_repo: IntegrationRepository,
        session: AsyncSession,
        client_factory: ClientFactory = N8nClient.from_integration,
    ):
        self.integration_repo = integration_repo
        self.session = session
        self.client_factory = client_factory

    async def list_integrations(self, organization_id: UUID) -> list[N8nIntegration]:
        return await self.integration_repo.list_by_organization(organization_id)

    async def get_integration(
        self, integration_id: UUID, organization_id: UUID
    ) -> N8nIntegration | None:
        return await self.integration_repo.get_for_organization(integration_id, organization_id)

    async def connect(
        self,
        organization_id: UUID,
        instance_url: str,
        api_key: str,
        name: str = "n8n",
        user_id: str | None = None,
    ) -> tuple[N8nIntegration | None, ConnectionStatus]:
        """Verify an instance and store it if reachable.

        Returns:
            Tuple of (stored integration or None, connection status)
        """
        integration = N8nIntegration(
            organization_id=organization_id,
            name=name,
            instance_url=instance_url.rstrip("/"),
            api_key=api_key,
            created_by=user_id,
        )
        async with self.client_factory(integration) as client:
            status = await client.test_connection()
        if not status.connected:
            logger.info("n8n connection rejected", instance_url=integration.instance_url)
            return None, status

        integration.is_verified = True
        integration.last_verified_at = utc_now()
        self.integration_repo.add(integration)
        await self.session.commit()
        await self.session.refresh(integration)

        logger.info("n8n integration connected", integration_id=str(integration.id))
        return integration, status

    async def verify_integration(
        self, integration_id: UUID, organization_id: UUID
    ) -> ConnectionStatus:
        """Check stored credentials still work and record the outcome."""
        integration = await self.integration_repo.get_for_organization(
            integration_id, organization_id
        )
        if integration is None:
            return ConnectionStatus(connected=False, error="Integration not found")

        async with self.client_factory(integration) as client:
            status = await client.test_connection()
        await self.integration_repo.mark_verified(integration.id, status.connected)
        await self.session.commit()

        logger.info(
            "n8n integration verified",
            integration_id=str(integration.id),
            connected=status.connected,
        )
        return status

    async def disconnect(self, integration_id: UUID, organization_id: UUID) -> OperationResult:
        """Delete an integration. Its mirrored workflows go with it."""
        integration = await self.integration_repo.get_for_organization(
            integration_id, organization_id
        )
        if integration is None:
            return OperationResult(success=False, error="Integration not found")

        await self.integration_repo.delete(integration)
        await self.session.commit()
        logger.info("n8n integration disconnected", integration_id=str(integration_id))
        return OperationResult(success=True)
