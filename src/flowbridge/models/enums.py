"""Shared enums for models."""

from enum import Enum


class TriggerType(str, Enum):
    """How a workflow is started, as classified from its node list."""

    WEBHOOK = "webhook"
    SCHEDULE = "schedule"
    EVENT = "event"
    MANUAL = "manual"


class TriggerSource(str, Enum):
    """What caused a tracked execution to start."""

    MANUAL = "manual"
    EVENT = "event"
    SCHEDULE = "schedule"


class ExecutionStatus(str, Enum):
    """Local execution lifecycle status.

    STARTED is the only non-terminal state. The rest are written once.
    """

    STARTED = "started"
    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"

    @property
    def is_terminal(self) -> bool:
        return self is not ExecutionStatus.STARTED


class InstallationStatus(str, Enum):
    """Template installation status."""

    INSTALLED = "installed"
    FAILED = "failed"
