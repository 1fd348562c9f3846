"""In-memory stand-ins for repositories, the session and the n8n client.

The real repositories rely on PostgreSQL-only SQL (ON CONFLICT upserts,
UPDATE ... RETURNING), so service tests run against these instead. They
follow the same contracts: upsert keyed by (integration_id, n8n_workflow_id),
write-once completion, counters that only move on success.
"""

import contextlib
import itertools
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.flowbridge.models import (
    ExecutionStatus,
    N8nEventMapping,
    N8nExecution,
    N8nIntegration,
    N8nTemplate,
    N8nTemplateInstallation,
    N8nWorkflow,
    TriggerSource,
)
from src.flowbridge.models.base import utc_now
from src.flowbridge.n8n import (
    ConnectionStatus,
    N8nAPIError,
    RemoteExecution,
    RemoteWorkflow,
    WebhookInfo,
    WorkflowPage,
    extract_webhooks,
)


class FakeStore:
    """Rows per table, keyed by id."""

    def __init__(self) -> None:
        self.integrations: dict[UUID, N8nIntegration] = {}
        self.workflows: dict[UUID, N8nWorkflow] = {}
        self.executions: dict[UUID, N8nExecution] = {}
        self.mappings: dict[UUID, N8nEventMapping] = {}
        self.templates: dict[UUID, N8nTemplate] = {}
        self.installations: dict[UUID, N8nTemplateInstallation] = {}


class FakeSession:
    """AsyncSession double: counts commits/rollbacks, nested transactions are no-ops."""

    def __init__(self) -> None:
        self.commit = AsyncMock()
        self.rollback = AsyncMock()
        self.refresh = AsyncMock()
        self.flush = AsyncMock()

    def begin_nested(self) -> contextlib.nullcontext:
        return contextlib.nullcontext()


# --- Repositories ---


class FakeIntegrationRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_id(self, id: UUID) -> N8nIntegration | None:
        return self.store.integrations.get(id)

    async def get_for_organization(
        self, integration_id: UUID, organization_id: UUID
    ) -> N8nIntegration | None:
        integration = self.store.integrations.get(integration_id)
        if integration is None or integration.organization_id != organization_id:
            return None
        return integration

    async def list_by_organization(self, organization_id: UUID) -> list[N8nIntegration]:
        return [i for i in self.store.integrations.values() if i.organization_id == organization_id]

    def add(self, entity: N8nIntegration) -> None:
        self.store.integrations[entity.id] = entity

    async def delete(self, entity: N8nIntegration) -> None:
        self.store.integrations.pop(entity.id, None)
        for workflow_id in [
            w.id for w in self.store.workflows.values() if w.integration_id == entity.id
        ]:
            del self.store.workflows[workflow_id]

    async def mark_synced(self, integration_id: UUID) -> None:
        integration = self.store.integrations[integration_id]
        now = utc_now()
        integration.last_sync_at = now
        integration.is_verified = True
        integration.last_verified_at = now

    async def mark_verified(self, integration_id: UUID, verified: bool) -> None:
        integration = self.store.integrations[integration_id]
        integration.is_verified = verified
        if verified:
            integration.last_verified_at = utc_now()


class FakeWorkflowRepository:
    def __init__(self, store: FakeStore, fail_upsert_for: set[str] | None = None) -> None:
        self.store = store
        self.fail_upsert_for = fail_upsert_for or set()
        self.upsert_calls: list[dict[str, Any]] = []

    async def get_by_id(self, id: UUID) -> N8nWorkflow | None:
        return self.store.workflows.get(id)

    async def get_for_organization(
        self, workflow_id: UUID, organization_id: UUID
    ) -> N8nWorkflow | None:
        workflow = self.store.workflows.get(workflow_id)
        if workflow is None or workflow.organization_id != organization_id:
            return None
        return workflow

    async def get_with_integration(
        self, workflow_id: UUID, organization_id: UUID
    ) -> tuple[N8nWorkflow, N8nIntegration] | None:
        workflow = await self.get_for_organization(workflow_id, organization_id)
        if workflow is None:
            return None
        integration = self.store.integrations.get(workflow.integration_id)
        if integration is None:
            return None
        return workflow, integration

    async def list_by_organization(
        self,
        organization_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        integration_id: UUID | None = None,
        synced_only: bool = False,
    ) -> tuple[list[N8nWorkflow], str | None, bool]:
        items = [
            w
            for w in self.store.workflows.values()
            if w.organization_id == organization_id
            and (integration_id is None or w.integration_id == integration_id)
            and (not synced_only or w.is_synced)
        ]
        return items[:limit], None, len(items) > limit

    async def remote_id_map(self, integration_id: UUID) -> dict[str, UUID]:
        return {
            w.n8n_workflow_id: w.id
            for w in self.store.workflows.values()
            if w.integration_id == integration_id
        }

    async def upsert(
        self,
        organization_id: UUID,
        integration_id: UUID,
        n8n_workflow_id: str,
        name: str,
        trigger_type: str,
        trigger_config: dict[str, Any],
        is_active: bool = False,
        tags: list[str] | None = None,
    ) -> UUID:
        self.upsert_calls.append(
            {
                "n8n_workflow_id": n8n_workflow_id,
                "name": name,
                "trigger_type": trigger_type,
                "trigger_config": trigger_config,
                "is_active": is_active,
                "tags": tags,
            }
        )
        if n8n_workflow_id in self.fail_upsert_for:
            raise SQLAlchemyError(f"upsert rejected for {n8n_workflow_id}")

        now = utc_now()
        for workflow in self.store.workflows.values():
            if (
                workflow.integration_id == integration_id
                and workflow.n8n_workflow_id == n8n_workflow_id
            ):
                workflow.name = name
                workflow.trigger_type = trigger_type
                workflow.trigger_config = trigger_config
                workflow.is_active = is_active
                workflow.tags = tags or []
                workflow.is_synced = True
                workflow.last_synced_at = now
                workflow.updated_at = now
                return workflow.id

        workflow = N8nWorkflow(
            organization_id=organization_id,
            integration_id=integration_id,
            n8n_workflow_id=n8n_workflow_id,
            name=name,
            trigger_type=trigger_type,
            trigger_config=trigger_config,
            is_active=is_active,
            tags=tags or [],
            is_synced=True,
            last_synced_at=now,
        )
        self.store.workflows[workflow.id] = workflow
        return workflow.id

    async def mark_unsynced(self, workflow_ids: list[UUID]) -> int:
        for workflow_id in workflow_ids:
            self.store.workflows[workflow_id].is_synced = False
        return len(workflow_ids)

    async def set_active(self, workflow_id: UUID, is_active: bool) -> None:
        self.store.workflows[workflow_id].is_active = is_active

    async def record_execution_stats(
        self, workflow_id: UUID, success: bool, execution_time_ms: int | None = None
    ) -> None:
        workflow = self.store.workflows[workflow_id]
        if success and execution_time_ms is not None:
            previous = workflow.avg_execution_time_ms or 0
            workflow.avg_execution_time_ms = (
                previous * workflow.successful_executions + execution_time_ms
            ) // (workflow.successful_executions + 1)
        workflow.total_executions += 1
        if success:
            workflow.successful_executions += 1
        else:
            workflow.failed_executions += 1
        workflow.last_execution_at = utc_now()
        workflow.last_execution_status = (
            ExecutionStatus.SUCCESS.value if success else ExecutionStatus.ERROR.value
        )

    async def delete_by_id(self, workflow_id: UUID) -> None:
        self.store.workflows.pop(workflow_id, None)
        for installation in self.store.installations.values():
            if installation.workflow_id == workflow_id:
                installation.workflow_id = None


class FakeExecutionRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.complete_calls = 0

    async def create_started(
        self,
        organization_id: UUID,
        workflow_id: UUID,
        trigger_source: TriggerSource | str,
        triggered_by: str,
        input_data: dict[str, Any] | None = None,
    ) -> N8nExecution:
        execution = N8nExecution(
            organization_id=organization_id,
            workflow_id=workflow_id,
            trigger_source=(
                trigger_source.value
                if isinstance(trigger_source, TriggerSource)
                else trigger_source
            ),
            triggered_by=triggered_by,
            input_data=input_data or {},
            status=ExecutionStatus.STARTED.value,
        )
        self.store.executions[execution.id] = execution
        return execution

    async def attach_remote_id(self, execution_id: UUID, n8n_execution_id: str | None) -> None:
        self.store.executions[execution_id].n8n_execution_id = n8n_execution_id

    async def complete(
        self,
        execution_id: UUID,
        status: ExecutionStatus,
        output_data: dict[str, Any] | None = None,
        error_message: str | None = None,
        execution_time_ms: int | None = None,
    ) -> bool:
        if not status.is_terminal:
            raise ValueError(f"{status.value} is not a terminal execution status")
        self.complete_calls += 1
        execution = self.store.executions.get(execution_id)
        if execution is None or execution.status != ExecutionStatus.STARTED.value:
            return False
        execution.status = status.value
        execution.output_data = output_data
        execution.error_message = error_message[:2000] if error_message else None
        execution.execution_time_ms = execution_time_ms
        execution.finished_at = utc_now()
        return True

    async def get_for_organization(
        self, execution_id: UUID, organization_id: UUID
    ) -> N8nExecution | None:
        execution = self.store.executions.get(execution_id)
        if execution is None or execution.organization_id != organization_id:
            return None
        return execution

    async def get_with_chain(
        self, execution_id: UUID, organization_id: UUID
    ) -> tuple[N8nExecution, N8nWorkflow, N8nIntegration] | None:
        execution = await self.get_for_organization(execution_id, organization_id)
        if execution is None:
            return None
        workflow = self.store.workflows[execution.workflow_id]
        return execution, workflow, self.store.integrations[workflow.integration_id]

    async def list_by_organization(
        self,
        organization_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        workflow_id: UUID | None = None,
        status: str | None = None,
    ) -> tuple[list[N8nExecution], str | None, bool]:
        items = [
            e
            for e in self.store.executions.values()
            if e.organization_id == organization_id
            and (workflow_id is None or e.workflow_id == workflow_id)
            and (status is None or e.status == status)
        ]
        return items[:limit], None, len(items) > limit


class FakeEventMappingRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def list_for_event(
        self, organization_id: UUID, event_type: str
    ) -> list[tuple[N8nEventMapping, N8nWorkflow]]:
        mappings = sorted(
            (
                m
                for m in self.store.mappings.values()
                if m.organization_id == organization_id
                and m.event_type == event_type
                and m.is_active
            ),
            key=lambda m: m.created_at,
        )
        return [(m, self.store.workflows[m.workflow_id]) for m in mappings]

    async def record_trigger(self, mapping_id: UUID) -> None:
        mapping = self.store.mappings[mapping_id]
        mapping.trigger_count += 1
        mapping.last_triggered_at = utc_now()

    async def get_for_organization(
        self, mapping_id: UUID, organization_id: UUID
    ) -> N8nEventMapping | None:
        mapping = self.store.mappings.get(mapping_id)
        if mapping is None or mapping.organization_id != organization_id:
            return None
        return mapping

    async def list_by_organization(
        self, organization_id: UUID, event_type: str | None = None
    ) -> list[N8nEventMapping]:
        return [
            m
            for m in self.store.mappings.values()
            if m.organization_id == organization_id
            and (event_type is None or m.event_type == event_type)
        ]

    def add(self, entity: N8nEventMapping) -> None:
        self.store.mappings[entity.id] = entity

    async def delete(self, entity: N8nEventMapping) -> None:
        self.store.mappings.pop(entity.id, None)


class FakeTemplateRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_id(self, id: UUID) -> N8nTemplate | None:
        return self.store.templates.get(id)

    async def list_public(
        self,
        category: str | None = None,
        featured: bool = False,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[N8nTemplate], int]:
        needle = search.lower() if search else None
        matches = [
            t
            for t in self.store.templates.values()
            if t.is_public
            and t.is_active
            and (category is None or t.category == category)
            and (not featured or t.is_featured)
            and (
                needle is None
                or needle in t.name.lower()
                or needle in (t.description or "").lower()
            )
        ]
        matches.sort(key=lambda t: t.install_count, reverse=True)
        return matches[offset : offset + limit], len(matches)

    async def category_counts(self) -> list[tuple[str, int]]:
        counts: dict[str, int] = {}
        for template in self.store.templates.values():
            if template.is_public and template.is_active:
                counts[template.category] = counts.get(template.category, 0) + 1
        return sorted(counts.items(), key=lambda item: item[1], reverse=True)

    async def increment_install_count(self, template_id: UUID) -> None:
        self.store.templates[template_id].install_count += 1


class FakeTemplateInstallationRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    def add(self, entity: N8nTemplateInstallation) -> None:
        self.store.installations[entity.id] = entity

    async def get_for_organization(
        self, installation_id: UUID, organization_id: UUID
    ) -> N8nTemplateInstallation | None:
        installation = self.store.installations.get(installation_id)
        if installation is None or installation.organization_id != organization_id:
            return None
        return installation

    async def list_by_organization(
        self, organization_id: UUID
    ) -> list[tuple[N8nTemplateInstallation, N8nTemplate, N8nWorkflow | None]]:
        return [
            (
                inst,
                self.store.templates[inst.template_id],
                self.store.workflows.get(inst.workflow_id) if inst.workflow_id else None,
            )
            for inst in self.store.installations.values()
            if inst.organization_id == organization_id
        ]

    async def delete_by_id(self, installation_id: UUID) -> None:
        self.store.installations.pop(installation_id, None)


# --- Remote client ---


class FakeN8nClient:
    """Scriptable N8nClient double.

    Failures are injected per remote id through the *_errors dicts; execution
    polling replays `execution_responses[id]` one entry per call, repeating
    the last entry once exhausted.
    """

    def __init__(self, workflows: list[RemoteWorkflow] | None = None) -> None:
        self.instance_url = "https://n8n.example.com"
        self.workflows: list[RemoteWorkflow] = workflows or []
        self.page_size: int | None = None
        self.list_error: Exception | None = None
        self.webhook_errors: dict[str, Exception] = {}
        self.execute_errors: dict[str, Exception] = {}
        self.execution_responses: dict[str, list[RemoteExecution | Exception]] = {}
        self.create_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.activation_error: Exception | None = None
        self.webhook_response: Any = {"ok": True}
        self.connection = ConnectionStatus(connected=True, instance_url=self.instance_url)
        self.on_execute = None

        self.integrations_used: list[UUID] = []
        self.calls: list[tuple[Any, ...]] = []
        self.created: list[dict[str, Any]] = []
        self.closed = 0
        self._ids = itertools.count(1000)

    async def __aenter__(self) -> "FakeN8nClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.closed += 1

    async def list_workflows(
        self, active: bool | None = None, limit: int | None = None, cursor: str | None = None
    ) -> WorkflowPage:
        self.calls.append(("list_workflows", limit, cursor))
        if self.list_error is not None:
            raise self.list_error
        if self.page_size is None:
            return WorkflowPage(data=self.workflows)
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        next_cursor = str(end) if end < len(self.workflows) else None
        return WorkflowPage(data=self.workflows[start:end], next_cursor=next_cursor)

    async def get_webhooks(self, workflow_id: str) -> list[WebhookInfo]:
        self.calls.append(("get_webhooks", workflow_id))
        if workflow_id in self.webhook_errors:
            raise self.webhook_errors[workflow_id]
        workflow = next(w for w in self.workflows if w.id == workflow_id)
        return [WebhookInfo.model_validate(w) for w in extract_webhooks(workflow.nodes)]

    async def execute_workflow(
        self, workflow_id: str, input_data: dict[str, Any] | None = None
    ) -> str | None:
        self.calls.append(("execute_workflow", workflow_id, input_data))
        if self.on_execute is not None:
            self.on_execute()
        if workflow_id in self.execute_errors:
            raise self.execute_errors[workflow_id]
        return str(next(self._ids))

    async def get_execution(self, execution_id: str, include_data: bool = True) -> RemoteExecution:
        self.calls.append(("get_execution", execution_id))
        responses = self.execution_responses.get(execution_id)
        if not responses:
            raise N8nAPIError(404, "Execution not found", method="GET", path=execution_id)
        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def create_workflow(self, definition: dict[str, Any]) -> RemoteWorkflow:
        self.calls.append(("create_workflow", definition["name"]))
        if self.create_error is not None:
            raise self.create_error
        self.created.append(definition)
        return RemoteWorkflow(
            id=f"remote-{next(self._ids)}",
            name=definition["name"],
            active=False,
            nodes=definition["nodes"],
            connections=definition["connections"],
            settings=definition["settings"],
        )

    async def delete_workflow(self, workflow_id: str) -> None:
        self.calls.append(("delete_workflow", workflow_id))
        if self.delete_error is not None:
            raise self.delete_error

    async def activate_workflow(self, workflow_id: str) -> RemoteWorkflow:
        self.calls.append(("activate_workflow", workflow_id))
        if self.activation_error is not None:
            raise self.activation_error
        return RemoteWorkflow(id=workflow_id, name="remote", active=True)

    async def deactivate_workflow(self, workflow_id: str) -> RemoteWorkflow:
        self.calls.append(("deactivate_workflow", workflow_id))
        if self.activation_error is not None:
            raise self.activation_error
        return RemoteWorkflow(id=workflow_id, name="remote", active=False)

    async def trigger_webhook(
        self, path: str, payload: dict[str, Any] | None = None, method: str = "POST"
    ) -> Any:
        self.calls.append(("trigger_webhook", path, payload, method))
        return self.webhook_response

    async def test_connection(self) -> ConnectionStatus:
        self.calls.append(("test_connection",))
        return self.connection

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]
