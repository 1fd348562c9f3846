"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.flowbridge.api.dependencies.db import DBSession
from src.flowbridge.repositories import (
    EventMappingRepository,
    ExecutionRepository,
    IntegrationRepository,
    TemplateInstallationRepository,
    TemplateRepository,
    WorkflowRepository,
)


def get_integration_repository(session: DBSession) -> IntegrationRepository:
    return IntegrationRepository(session)


def get_workflow_repository(session: DBSession) -> WorkflowRepository:
    return WorkflowRepository(session)


def get_execution_repository(session: DBSession) -> ExecutionRepository:
    return ExecutionRepository(session)


def get_event_mapping_repository(session: DBSession) -> EventMappingRepository:
    return EventMappingRepository(session)


def get_template_repository(session: DBSession) -> TemplateRepository:
    return TemplateRepository(session)


def get_template_installation_repository(session: DBSession) -> TemplateInstallationRepository:
    return TemplateInstallationRepository(session)


IntegrationRepo = Annotated[IntegrationRepository, Depends(get_integration_repository)]
WorkflowRepo = Annotated[WorkflowRepository, Depends(get_workflow_repository)]
ExecutionRepo = Annotated[ExecutionRepository, Depends(get_execution_repository)]
EventMappingRepo = Annotated[EventMappingRepository, Depends(get_event_mapping_repository)]
TemplateRepo = Annotated[TemplateRepository, Depends(get_template_repository)]
TemplateInstallationRepo = Annotated[
    TemplateInstallationRepository, Depends(get_template_installation_repository)
]
