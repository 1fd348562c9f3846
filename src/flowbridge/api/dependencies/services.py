"""Service factory dependencies.

Every service gets a fresh client per call through N8nClient.from_integration,
so nothing remote is shared between requests.
"""

from typing import Annotated

from fastapi import Depends

from src.flowbridge.api.dependencies.db import DBSession
from src.flowbridge.api.dependencies.repositories import (
    EventMappingRepo,
    ExecutionRepo,
    IntegrationRepo,
    TemplateInstallationRepo,
    TemplateRepo,
    WorkflowRepo,
)
from src.flowbridge.services import (
    EventService,
    ExecutionService,
    IntegrationService,
    TemplateService,
    WorkflowService,
    WorkflowSyncService,
)


def get_integration_service(
    integration_repo: IntegrationRepo, session: DBSession
) -> IntegrationService:
    return IntegrationService(integration_repo, session)


def get_sync_service(
    integration_repo: IntegrationRepo,
    workflow_repo: WorkflowRepo,
    session: DBSession,
) -> WorkflowSyncService:
    return WorkflowSyncService(integration_repo, workflow_repo, session)


def get_workflow_service(workflow_repo: WorkflowRepo, session: DBSession) -> WorkflowService:
    return WorkflowService(workflow_repo, session)


def get_execution_service(
    workflow_repo: WorkflowRepo,
    execution_repo: ExecutionRepo,
    session: DBSession,
) -> ExecutionService:
    return ExecutionService(workflow_repo, execution_repo, session)


def get_event_service(
    mapping_repo: EventMappingRepo,
    workflow_repo: WorkflowRepo,
    execution_repo: ExecutionRepo,
    session: DBSession,
) -> EventService:
    """Event routing reuses the tracked execution path."""
    execution_service = ExecutionService(workflow_repo, execution_repo, session)
    return EventService(mapping_repo, workflow_repo, execution_service, session)


def get_template_service(
    template_repo: TemplateRepo,
    installation_repo: TemplateInstallationRepo,
    integration_repo: IntegrationRepo,
    workflow_repo: WorkflowRepo,
    session: DBSession,
) -> TemplateService:
    return TemplateService(
        template_repo, installation_repo, integration_repo, workflow_repo, session
    )


IntegrationServiceDep = Annotated[IntegrationService, Depends(get_integration_service)]
SyncServiceDep = Annotated[WorkflowSyncService, Depends(get_sync_service)]
WorkflowServiceDep = Annotated[WorkflowService, Depends(get_workflow_service)]
ExecutionServiceDep = Annotated[ExecutionService, Depends(get_execution_service)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
TemplateServiceDep = Annotated[TemplateService, Depends(get_template_service)]
