"""n8n remote API client and the pure helpers around it."""

from src.flowbridge.n8n.client import N8nClient
from src.flowbridge.n8n.exceptions import (
    N8nAPIError,
    N8nConnectionError,
    N8nError,
    N8nResponseError,
)
from src.flowbridge.n8n.models import (
    ConnectionStatus,
    ExecutionPage,
    RemoteExecution,
    RemoteWorkflow,
    WebhookInfo,
    WorkflowPage,
)
from src.flowbridge.n8n.transform import apply_transform, resolve_path
from src.flowbridge.n8n.triggers import (
    DEFAULT_TRIGGER_RULES,
    classify_trigger_type,
    extract_webhooks,
)

__all__ = [
    "DEFAULT_TRIGGER_RULES",
    "ConnectionStatus",
    "ExecutionPage",
    "N8nAPIError",
    "N8nClient",
    "N8nConnectionError",
    "N8nError",
    "N8nResponseError",
    "RemoteExecution",
    "RemoteWorkflow",
    "WebhookInfo",
    "WorkflowPage",
    "apply_transform",
    "classify_trigger_type",
    "extract_webhooks",
    "resolve_path",
]
