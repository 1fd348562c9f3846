from src.flowbridge.schemas.event import EventFireRequest, EventMappingCreate, EventMappingRead
from src.flowbridge.schemas.execution import ExecutionPollRequest, ExecutionRead
from src.flowbridge.schemas.integration import (
    IntegrationConnect,
    IntegrationConnectResponse,
    IntegrationRead,
    IntegrationSyncResponse,
)
from src.flowbridge.schemas.pagination import PaginatedResponse
from src.flowbridge.schemas.results import (
    EventTriggerResult,
    ExecuteResult,
    OperationResult,
    PollResult,
    SyncResult,
    TemplateInstallResult,
    WebhookTriggerResult,
)
from src.flowbridge.schemas.template import (
    InstallationRead,
    TemplateCategory,
    TemplateDetail,
    TemplateInstallRequest,
    TemplateListResponse,
    TemplateRead,
    UninstallRequest,
)
from src.flowbridge.schemas.workflow import WebhookFireRequest, WorkflowExecuteRequest, WorkflowRead

__all__ = [
    # Events
    "EventFireRequest",
    "EventMappingCreate",
    "EventMappingRead",
    # Executions
    "ExecutionPollRequest",
    "ExecutionRead",
    # Integrations
    "IntegrationConnect",
    "IntegrationConnectResponse",
    "IntegrationRead",
    "IntegrationSyncResponse",
    # Pagination
    "PaginatedResponse",
    # Results
    "EventTriggerResult",
    "ExecuteResult",
    "OperationResult",
    "PollResult",
    "SyncResult",
    "TemplateInstallResult",
    "WebhookTriggerResult",
    # Templates
    "InstallationRead",
    "TemplateCategory",
    "TemplateDetail",
    "TemplateInstallRequest",
    "TemplateListResponse",
    "TemplateRead",
    "UninstallRequest",
    # Workflows
    "WebhookFireRequest",
    "WorkflowExecuteRequest",
    "WorkflowRead",
]
