"""Repository layer - data access abstraction."""

from src.flowbridge.repositories.base import BaseRepository
from src.flowbridge.repositories.event_mapping import EventMappingRepository
from src.flowbridge.repositories.execution import ExecutionRepository
from src.flowbridge.repositories.integration import IntegrationRepository
from src.flowbridge.repositories.template import (
    TemplateInstallationRepository,
    TemplateRepository,
)
from src.flowbridge.repositories.workflow import WorkflowRepository

__all__ = [
    "BaseRepository",
    "EventMappingRepository",
    "ExecutionRepository",
    "IntegrationRepository",
    "TemplateInstallationRepository",
    "TemplateRepository",
    "WorkflowRepository",
]
