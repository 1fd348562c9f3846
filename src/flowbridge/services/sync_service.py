"""Remote -> local workflow synchronization."""

from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.flowbridge.core.config import get_settings
from src.flowbridge.core.logging import get_logger
from src.flowbridge.n8n import (
    N8nClient,
    N8nError,
    RemoteWorkflow,
    WebhookInfo,
    classify_trigger_type,
)
from src.flowbridge.repositories import IntegrationRepository, WorkflowRepository
from src.flowbridge.schemas.results import SyncResult
from src.flowbridge.services.errors import FlowbridgeError, IntegrationNotFoundError
from src.flowbridge.services.types import ClientFactory

logger = get_logger(__name__)


class WorkflowSyncService:
    """Mirrors an integration's remote workflows into n8n_workflows.

    Safe to re-run at any time: rows are upserted by remote id, and rows whose
    remote workflow vanished are flagged is_synced=False instead of deleted.
    Two concurrent syncs of one integration are not serialized here.
    """

    def __init__(
        self,
        integration_repo: IntegrationRepository,
        workflow_repo: WorkflowRepository,
        session: AsyncSession,
        client_factory: ClientFactory = N8nClient.from_integration,
    ):
        self.integration_repo = integration_repo
        self.workflow_repo = workflow_repo
        self.session = session
        self.client_factory = client_factory

    async def sync_workflows(self, integration_id: UUID, organization_id: UUID) -> SyncResult:
        """Run one sync pass for an integration.

        Per-workflow failures are collected in `errors` and do not stop the
        pass; `success` is True only when no error was collected.
        """
        result = SyncResult()

        try:
            integration = await self.integration_repo.get_for_organization(
                integration_id, organization_id
            )
            if integration is None:
                raise IntegrationNotFoundError()

            async with self.client_factory(integration) as client:
                remote_workflows = await self._fetch_remote_workflows(client)
                existing = await self.workflow_repo.remote_id_map(integration.id)
                seen: set[str] = set()

                for workflow in remote_workflows:
                    seen.add(workflow.id)
                    trigger_type = classify_trigger_type(workflow.nodes)
                    webhook = await self._lookup_webhook(client, workflow)
                    try:
                        async with self.session.begin_nested():
                            await self.workflow_repo.upsert(
                                organization_id=organization_id,
                                integration_id=integration.id,
                                n8n_workflow_id=workflow.id,
                                name=workflow.name,
                                trigger_type=trigger_type.value,
                                trigger_config={
                                    "active": workflow.active,
                                    "webhook_path": webhook.path if webhook else None,
                                    "webhook_method": webhook.method if webhook else None,
                                },
                                is_active=workflow.active,
                                tags=workflow.tag_names,
                            )
                    except SQLAlchemyError as e:
                        logger.warning(
                            "Workflow upsert failed",
                            integration_id=str(integration.id),
                            n8n_workflow_id=workflow.id,
                            error=str(e),
                        )
                        result.errors.append(f"Failed to sync {workflow.name}: {e}")
                        continue

                    result.synced += 1
                    if workflow.id in existing:
                        result.updated += 1
                    else:
                        result.added += 1

            removed_ids = [
                local_id for remote_id, local_id in existing.items() if remote_id not in seen
            ]
            await self.workflow_repo.mark_unsynced(removed_ids)
            result.removed = len(removed_ids)

            await self.integration_repo.mark_synced(integration.id)
            await self.session.commit()
        except FlowbridgeError as e:
            result.errors.append(str(e))
        except (N8nError, SQLAlchemyError) as e:
            await self.session.rollback()
            logger.error(
                "Workflow sync failed",
                integration_id=str(integration_id),
                error=str(e),
            )
            result.errors.append(f"Sync failed: {e}")

        result.success = not result.errors
        logger.info(
            "Workflow sync finished",
            integration_id=str(integration_id),
            synced=result.synced,
            added=result.added,
            updated=result.updated,
            removed=result.removed,
            errors=len(result.errors),
        )
        return result

    async def _fetch_remote_workflows(self, client: N8nClient) -> list[RemoteWorkflow]:
        """One page by default; every page when n8n_sync_all_pages is set."""
        settings = get_settings()
        page = await client.list_workflows(limit=settings.n8n_sync_page_limit)
        workflows = list(page.data)
        if not settings.n8n_sync_all_pages:
            if page.next_cursor:
                logger.warning(
                    "Remote has more workflows than one sync page",
                    page_limit=settings.n8n_sync_page_limit,
                )
            return workflows

        while page.next_cursor:
            page = await client.list_workflows(
                limit=settings.n8n_sync_page_limit, cursor=page.next_cursor
            )
            workflows.extend(page.data)
        return workflows

    async def _lookup_webhook(
        self, client: N8nClient, workflow: RemoteWorkflow
    ) -> WebhookInfo | None:
        """First webhook node of a workflow, or None. Lookup errors are ignored."""
        try:
            webhooks = await client.get_webhooks(workflow.id)
        except N8nError as e:
            logger.warning(
                "Webhook lookup failed",
                n8n_workflow_id=workflow.id,
                error=str(e),
            )
            return None
        return webhooks[0] if webhooks else None
