"""Model exports.

Import from here: `from src.flowbridge.models import N8nWorkflow, N8nExecution`
"""

from src.flowbridge.models.enums import (
    ExecutionStatus,
    InstallationStatus,
    TriggerSource,
    TriggerType,
)
from src.flowbridge.models.event_mapping import N8nEventMapping
from src.flowbridge.models.execution import N8nExecution
from src.flowbridge.models.integration import N8nIntegration
from src.flowbridge.models.template import N8nTemplate, N8nTemplateInstallation
from src.flowbridge.models.workflow import N8nWorkflow

__all__ = [
    # Enums
    "ExecutionStatus",
    "InstallationStatus",
    "TriggerSource",
    "TriggerType",
    # Models
    "N8nEventMapping",
    "N8nExecution",
    "N8nIntegration",
    "N8nTemplate",
    "N8nTemplateInstallation",
    "N8nWorkflow",
]
