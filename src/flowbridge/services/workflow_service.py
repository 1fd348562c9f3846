"""Mirrored workflow reads and remote lifecycle passthrough."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.flowbridge.core.logging import get_logger
from src.flowbridge.models import N8nWorkflow
from src.flowbridge.n8n import N8nClient, N8nError
from src.flowbridge.repositories import WorkflowRepository
from src.flowbridge.schemas.results import OperationResult, WebhookTriggerResult
from src.flowbridge.services.errors import (
    FlowbridgeError,
    IntegrationInactiveError,
    WorkflowNotFoundError,
)
from src.flowbridge.services.types import ClientFactory

logger = get_logger(__name__)


class WorkflowService:
    """Workflow listing, activation and the untracked webhook path.

    fire_webhook calls the public webhook URL and, unlike ExecutionService,
    writes nothing locally.
    """

    def __init__(
        self,
        workflow_repo: WorkflowRepository,
        session: AsyncSession,
        client_factory: ClientFactory = N8nClient.from_integration,
    ):
        self.workflow_repo = workflow_repo
        self.session = session
        self.client_factory = client_factory

    async def list_workflows(
        self,
        organization_id: UUID,
        cursor: str | None,
        limit: int,
        integration_id: UUID | None = None,
        synced_only: bool = False,
    ) -> tuple[list[N8nWorkflow], str | None, bool]:
        return await self.workflow_repo.list_by_organization(
            organization_id, cursor, limit, integration_id=integration_id, synced_only=synced_only
        )

    async def get_workflow(self, workflow_id: UUID, organization_id: UUID) -> N8nWorkflow | None:
        return await self.workflow_repo.get_for_organization(workflow_id, organization_id)

    async def set_active(
        self, workflow_id: UUID, organization_id: UUID, active: bool
    ) -> OperationResult:
        """Activate or deactivate remotely, then mirror the new state."""
        try:
            loaded = await self.workflow_repo.get_with_integration(workflow_id, organization_id)
            if loaded is None:
                raise WorkflowNotFoundError()
            workflow, integration = loaded
            if not integration.is_active:
                raise IntegrationInactiveError()

            async with self.client_factory(integration) as client:
                if active:
                    remote = await client.activate_workflow(workflow.n8n_workflow_id)
                else:
                    remote = await client.deactivate_workflow(workflow.n8n_workflow_id)
        except FlowbridgeError as e:
            return OperationResult(success=False, error=str(e))
        except N8nError as e:
            logger.warning(
                "Workflow activation change failed",
                workflow_id=str(workflow_id),
                active=active,
                error=str(e),
            )
            return OperationResult(success=False, error=str(e))

        await self.workflow_repo.set_active(workflow.id, remote.active)
        await self.session.commit()
        logger.info(
            "Workflow activation changed", workflow_id=str(workflow.id), active=remote.active
        )
        return OperationResult(success=True)

    async def fire_webhook(
        self,
        workflow_id: UUID,
        organization_id: UUID,
        payload: dict[str, Any] | None = None,
        method: str | None = None,
    ) -> WebhookTriggerResult:
        """Call the workflow's public webhook directly. Nothing is recorded.

        The HTTP method defaults to the one configured on the webhook node,
        then to POST for rows synced before the method was stored.
        """
        try:
            loaded = await self.workflow_repo.get_with_integration(workflow_id, organization_id)
            if loaded is None:
                raise WorkflowNotFoundError()
            workflow, integration = loaded
            if not workflow.webhook_path:
                return WebhookTriggerResult(success=False, error="Workflow has no webhook")

            async with self.client_factory(integration) as client:
                response = await client.trigger_webhook(
                    workflow.webhook_path, payload, method or workflow.webhook_method or "POST"
                )
        except FlowbridgeError as e:
            return WebhookTriggerResult(success=False, error=str(e))
        except N8nError as e:
            logger.warning("Webhook call failed", workflow_id=str(workflow_id), error=str(e))
            return WebhookTriggerResult(success=False, error=str(e))

        return WebhookTriggerResult(success=True, response=response)
