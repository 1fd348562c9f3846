from collections.abc import Callable
from typing import TypeAlias

from src.flowbridge.models import N8nIntegration
from src.flowbridge.n8n import N8nClient

# Builds a fresh client from the integration's stored credentials
ClientFactory: TypeAlias = Callable[[N8nIntegration], N8nClient]

SYSTEM_USER = "system"
