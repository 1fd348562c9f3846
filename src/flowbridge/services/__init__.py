"""Service exports."""

from src.flowbridge.services.errors import (
    ExecutionNotFoundError,
    FlowbridgeError,
    InstallationNotFoundError,
    IntegrationInactiveError,
    IntegrationNotFoundError,
    TemplateNotFoundError,
    WorkflowNotFoundError,
)
from src.flowbridge.services.event_service import EventService
from src.flowbridge.services.execution_service import ExecutionService
from src.flowbridge.services.integration_service import IntegrationService
from src.flowbridge.services.sync_service import WorkflowSyncService
from src.flowbridge.services.template_service import TemplateService, build_workflow_definition
from src.flowbridge.services.types import SYSTEM_USER, ClientFactory
from src.flowbridge.services.workflow_service import WorkflowService

__all__ = [
    "SYSTEM_USER",
    "ClientFactory",
    "EventService",
    "ExecutionNotFoundError",
    "ExecutionService",
    "FlowbridgeError",
    "InstallationNotFoundError",
    "IntegrationInactiveError",
    "IntegrationNotFoundError",
    "IntegrationService",
    "TemplateNotFoundError",
    "TemplateService",
    "WorkflowNotFoundError",
    "WorkflowService",
    "WorkflowSyncService",
    "build_workflow_definition",
]
