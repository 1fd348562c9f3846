"""Domain errors raised inside services.

Services convert these into failed result objects at their public boundary;
the message is what the caller sees.
"""


class FlowbridgeError(Exception):
    """Base class for lookup and state errors in the n8n services."""


class IntegrationNotFoundError(FlowbridgeError):
    def __init__(self, message: str = "Integration not found"):
        super().__init__(message)


class IntegrationInactiveError(FlowbridgeError):
    def __init__(self, message: str = "n8n integration is not active"):
        super().__init__(message)


class WorkflowNotFoundError(FlowbridgeError):
    def __init__(self, message: str = "Workflow not found"):
        super().__init__(message)


class ExecutionNotFoundError(FlowbridgeError):
    def __init__(self, message: str = "Execution not found"):
        super().__init__(message)


class TemplateNotFoundError(FlowbridgeError):
    def __init__(self, message: str = "Template not found"):
        super().__init__(message)


class InstallationNotFoundError(FlowbridgeError):
    def __init__(self, message: str = "Installation not found"):
        super().__init__(message)
