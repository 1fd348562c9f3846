"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import IntegrationFactory, WorkflowFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.execution import EventMappingFactory, ExecutionFactory
from tests.factories.integration import IntegrationFactory, WorkflowFactory
from tests.factories.template import TemplateFactory, webhook_workflow_json

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Integrations
    "IntegrationFactory",
    "WorkflowFactory",
    # Executions
    "EventMappingFactory",
    "ExecutionFactory",
    # Templates
    "TemplateFactory",
    "webhook_workflow_json",
]
