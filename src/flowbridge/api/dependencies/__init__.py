"""FastAPI dependency injection definitions."""

from src.flowbridge.api.dependencies.db import DBSession, get_db_session
from src.flowbridge.api.dependencies.organization import (
    OrganizationID,
    ReadScope,
    RequestScope,
    UserID,
    get_organization_id_from_header,
    get_user_id_from_header,
)
from src.flowbridge.api.dependencies.repositories import (
    EventMappingRepo,
    ExecutionRepo,
    IntegrationRepo,
    TemplateInstallationRepo,
    TemplateRepo,
    WorkflowRepo,
)
from src.flowbridge.api.dependencies.services import (
    EventServiceDep,
    ExecutionServiceDep,
    IntegrationServiceDep,
    SyncServiceDep,
    TemplateServiceDep,
    WorkflowServiceDep,
    get_event_service,
    get_execution_service,
    get_integration_service,
    get_sync_service,
    get_template_service,
    get_workflow_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Organization
    "OrganizationID",
    "ReadScope",
    "RequestScope",
    "UserID",
    "get_organization_id_from_header",
    "get_user_id_from_header",
    # Repositories
    "EventMappingRepo",
    "ExecutionRepo",
    "IntegrationRepo",
    "TemplateInstallationRepo",
    "TemplateRepo",
    "WorkflowRepo",
    # Services
    "EventServiceDep",
    "ExecutionServiceDep",
    "IntegrationServiceDep",
    "SyncServiceDep",
    "TemplateServiceDep",
    "WorkflowServiceDep",
    "get_event_service",
    "get_execution_service",
    "get_integration_service",
    "get_sync_service",
    "get_template_service",
    "get_workflow_service",
]
