"""Template catalogue and installation into a connected instance."""

import copy
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.flowbridge.core.logging import get_logger
from src.flowbridge.models import (
    InstallationStatus,
    N8nTemplate,
    N8nTemplateInstallation,
    N8nWorkflow,
)
from src.flowbridge.n8n import N8nClient, N8nError, classify_trigger_type, extract_webhooks
from src.flowbridge.repositories import (
    IntegrationRepository,
    TemplateInstallationRepository,
    TemplateRepository,
    WorkflowRepository,
)
from src.flowbridge.schemas.results import OperationResult, TemplateInstallResult
from src.flowbridge.services.errors import (
    FlowbridgeError,
    InstallationNotFoundError,
    IntegrationNotFoundError,
    TemplateNotFoundError,
)
from src.flowbridge.services.types import ClientFactory

logger = get_logger(__name__)


def build_workflow_definition(
    template_json: dict[str, Any],
    template_name: str,
    custom_config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Turn a stored template into a create-workflow request body.

    custom_config maps node name -> parameters to merge into that node.
    Nodes whose name has no entry are copied unchanged.
    """
    nodes = copy.deepcopy(template_json.get("nodes") or [])
    if custom_config:
        for node in nodes:
            patch = custom_config.get(node.get("name"))
            if isinstance(patch, dict):
                node["parameters"] = {**(node.get("parameters") or {}), **patch}

    return {
        "name": f"{template_name} (from template)",
        "nodes": nodes,
        "connections": copy.deepcopy(template_json.get("connections") or {}),
        "settings": {**(template_json.get("settings") or {}), "executionOrder": "v1"},
    }


class TemplateService:
    """Template browsing, install and uninstall.

    Install is not transactional across the remote call: a failure after the
    remote workflow is created can leave it without a local record.
    """

    def __init__(
        self,
        template_repo: TemplateRepository,
        installation_repo: TemplateInstallationRepository,
        integration_repo: IntegrationRepository,
        workflow_repo: WorkflowRepository,
        session: AsyncSession,
        client_factory: ClientFactory = N8nClient.from_integration,
    ):
        self.template_repo = template_repo
        self.installation_repo = installation_repo
        self.integration_repo = integration_repo
        self.workflow_repo = workflow_repo
        self.session = session
        self.client_factory = client_factory

    async def list_templates(
        self,
        category: str | None = None,
        featured: bool = False,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[N8nTemplate], int]:
        return await self.template_repo.list_public(
            category=category, featured=featured, search=search, limit=limit, offset=offset
        )

    async def list_categories(self) -> list[tuple[str, int]]:
        return await self.template_repo.category_counts()

    async def get_template(self, template_id: UUID) -> N8nTemplate | None:
        template = await self.template_repo.get_by_id(template_id)
        if template is None or not template.is_active:
            return None
        return template

    async def list_installations(
        self, organization_id: UUID
    ) -> list[tuple[N8nTemplateInstallation, N8nTemplate, N8nWorkflow | None]]:
        return await self.installation_repo.list_by_organization(organization_id)

    async def install_template(
        self,
        template_id: UUID,
        integration_id: UUID,
        organization_id: UUID,
        user_id: str,
        custom_config: dict[str, Any] | None = None,
    ) -> TemplateInstallResult:
        """Create a remote workflow from a template and record the install."""
        try:
            template = await self.get_template(template_id)
            if template is None:
                raise TemplateNotFoundError()
            integration = await self.integration_repo.get_for_organization(
                integration_id, organization_id
            )
            if integration is None:
                raise IntegrationNotFoundError("n8n integration not found")

            definition = build_workflow_definition(
                template.workflow_json, template.name, custom_config
            )
            async with self.client_factory(integration) as client:
                remote = await client.create_workflow(definition)

            webhooks = extract_webhooks(definition["nodes"])
            workflow_id = await self.workflow_repo.upsert(
                organization_id=organization_id,
                integration_id=integration.id,
                n8n_workflow_id=remote.id,
                name=remote.name,
                trigger_type=classify_trigger_type(definition["nodes"]).value,
                trigger_config={
                    "active": remote.active,
                    "webhook_path": webhooks[0]["path"] if webhooks else None,
                    "webhook_method": webhooks[0]["method"] if webhooks else None,
                },
                is_active=remote.active,
                tags=remote.tag_names,
            )

            installation = N8nTemplateInstallation(
                organization_id=organization_id,
                template_id=template.id,
                integration_id=integration.id,
                workflow_id=workflow_id,
                custom_config=custom_config or {},
                status=InstallationStatus.INSTALLED.value,
                installed_by=user_id,
            )
            self.installation_repo.add(installation)
            await self.template_repo.increment_install_count(template.id)
            await self.session.commit()
        except FlowbridgeError as e:
            return TemplateInstallResult(success=False, error=str(e))
        except (N8nError, SQLAlchemyError) as e:
            await self.session.rollback()
            logger.error(
                "Template install failed",
                template_id=str(template_id),
                integration_id=str(integration_id),
                error=str(e),
            )
            return TemplateInstallResult(success=False, error=str(e))

        logger.info(
            "Template installed",
            template_id=str(template.id),
            workflow_id=str(workflow_id),
            n8n_workflow_id=remote.id,
        )
        return TemplateInstallResult(
            success=True,
            workflow_id=workflow_id,
            n8n_workflow_id=remote.id,
            installation_id=installation.id,
        )

    async def uninstall_template(
        self,
        installation_id: UUID,
        organization_id: UUID,
        delete_remote: bool = False,
    ) -> OperationResult:
        """Remove an installation and its local workflow.

        Remote deletion is attempted only when asked, and its failure is
        logged without stopping the local cleanup.
        """
        try:
            installation = await self.installation_repo.get_for_organization(
                installation_id, organization_id
            )
            if installation is None:
                raise InstallationNotFoundError()

            workflow = (
                await self.workflow_repo.get_by_id(installation.workflow_id)
                if installation.workflow_id
                else None
            )
            if delete_remote and workflow is not None:
                await self._delete_remote(installation.integration_id, workflow)

            if workflow is not None:
                await self.workflow_repo.delete_by_id(workflow.id)
            await self.installation_repo.delete_by_id(installation.id)
            await self.session.commit()
        except FlowbridgeError as e:
            return OperationResult(success=False, error=str(e))
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Template uninstall failed", installation_id=str(installation_id), error=str(e)
            )
            return OperationResult(success=False, error=str(e))

        logger.info("Template uninstalled", installation_id=str(installation_id))
        return OperationResult(success=True)

    async def _delete_remote(self, integration_id: UUID, workflow: N8nWorkflow) -> None:
        integration = await self.integration_repo.get_by_id(integration_id)
        if integration is None:
            return
        try:
            async with self.client_factory(integration) as client:
                await client.delete_workflow(workflow.n8n_workflow_id)
        except N8nError as e:
            logger.warning(
                "Remote workflow delete failed",
                workflow_id=str(workflow.id),
                n8n_workflow_id=workflow.n8n_workflow_id,
                error=str(e),
            )
