"""HTTP-level tests for the n8n API routes.

Services are wired to the in-memory fakes through dependency overrides, so
these exercise routing, header scoping, validation and response shapes
without a database or a live n8n instance.
"""

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.flowbridge.api.dependencies import (
    get_event_service,
    get_execution_service,
    get_integration_service,
    get_sync_service,
    get_template_service,
    get_workflow_service,
)
from src.flowbridge.main import create_app
from src.flowbridge.n8n import RemoteExecution, RemoteWorkflow
from src.flowbridge.services import (
    EventService,
    ExecutionService,
    IntegrationService,
    TemplateService,
    WorkflowService,
    WorkflowSyncService,
)
from tests.factories import EventMappingFactory, TemplateFactory, WorkflowFactory
from tests.fakes import (
    FakeEventMappingRepository,
    FakeExecutionRepository,
    FakeIntegrationRepository,
    FakeTemplateInstallationRepository,
    FakeTemplateRepository,
    FakeWorkflowRepository,
)

pytestmark = pytest.mark.unit

PREFIX = "/api/v1/n8n"


@pytest.fixture
def app(store, session, client_factory) -> FastAPI:
    app = create_app()
    integrations = FakeIntegrationRepository(store)
    workflows = FakeWorkflowRepository(store)
    executions = FakeExecutionRepository(store)

    def execution_service() -> ExecutionService:
        return ExecutionService(workflows, executions, session, client_factory)

    app.dependency_overrides[get_integration_service] = lambda: IntegrationService(
        integrations, session, client_factory
    )
    app.dependency_overrides[get_sync_service] = lambda: WorkflowSyncService(
        integrations, workflows, session, client_factory
    )
    app.dependency_overrides[get_workflow_service] = lambda: WorkflowService(
        workflows, session, client_factory
    )
    app.dependency_overrides[get_execution_service] = execution_service
    app.dependency_overrides[get_event_service] = lambda: EventService(
        FakeEventMappingRepository(store), workflows, execution_service(), session
    )
    app.dependency_overrides[get_template_service] = lambda: TemplateService(
        FakeTemplateRepository(store),
        FakeTemplateInstallationRepository(store),
        integrations,
        workflows,
        session,
        client_factory,
    )
    return app


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def headers(organization_id) -> dict[str, str]:
    return {"X-Organization-ID": str(organization_id), "X-User-ID": "user-1"}


@pytest.fixture
def workflow(store, integration):
    workflow = WorkflowFactory.with_webhook(integration, n8n_workflow_id="wf-remote")
    store.workflows[workflow.id] = workflow
    return workflow


class TestScopeHeaders:
    """Tests for organization and user header handling."""

    async def test_missing_organization_header(self, api_client):
        response = await api_client.get(f"{PREFIX}/integrations")

        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "X-Organization-ID header is required"
        assert body["request_id"] == response.headers["X-Request-ID"]

    async def test_malformed_organization_header(self, api_client):
        response = await api_client.get(
            f"{PREFIX}/integrations", headers={"X-Organization-ID": "not-a-uuid"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "X-Organization-ID must be a UUID"

    async def test_write_requires_user_header(self, api_client, integration, organization_id):
        response = await api_client.post(
            f"{PREFIX}/integrations/{integration.id}/sync",
            headers={"X-Organization-ID": str(organization_id)},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "X-User-ID header is required"


class TestIntegrationRoutes:
    """Tests for /integrations."""

    async def test_list_hides_api_key(self, api_client, headers, integration):
        response = await api_client.get(f"{PREFIX}/integrations", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert [i["id"] for i in body] == [str(integration.id)]
        assert "api_key" not in body[0]

    async def test_connect(self, api_client, headers, store):
        response = await api_client.post(
            f"{PREFIX}/integrations",
            headers=headers,
            json={"instance_url": "https://n8n.acme.io", "api_key": "key", "name": "Acme"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["connection"]["connected"] is True
        assert body["integration"]["name"] == "Acme"
        assert len(store.integrations) == 1

    async def test_other_organization_gets_404(self, api_client, integration):
        response = await api_client.get(
            f"{PREFIX}/integrations/{integration.id}",
            headers={"X-Organization-ID": str(uuid4())},
        )

        assert response.status_code == 404

    async def test_sync(self, api_client, headers, integration, n8n_client):
        n8n_client.workflows = [RemoteWorkflow(id="1", name="Lead intake")]

        response = await api_client.post(
            f"{PREFIX}/integrations/{integration.id}/sync", headers=headers
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "synced": 1,
            "added": 1,
            "updated": 0,
            "removed": 0,
            "errors": [],
        }

    async def test_sync_unknown_integration_reports_error(self, api_client, headers):
        response = await api_client.post(f"{PREFIX}/integrations/{uuid4()}/sync", headers=headers)

        assert response.status_code == 200
        assert response.json()["errors"] == ["Integration not found"]


class TestWorkflowRoutes:
    """Tests for /workflows and /executions."""

    async def test_list_workflows(self, api_client, headers, workflow):
        response = await api_client.get(f"{PREFIX}/workflows", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["has_more"] is False
        assert body["items"][0]["trigger_config"]["webhook_path"] == "hook"

    async def test_unknown_workflow(self, api_client, headers):
        response = await api_client.get(f"{PREFIX}/workflows/{uuid4()}", headers=headers)

        assert response.status_code == 404
        assert "request_id" in response.json()

    async def test_execute_then_poll(self, api_client, headers, workflow, n8n_client):
        response = await api_client.post(
            f"{PREFIX}/workflows/{workflow.id}/execute",
            headers=headers,
            json={"input_data": {"lead": "ada"}},
        )
        assert response.status_code == 200
        started = response.json()
        assert started["success"] is True

        n8n_client.execution_responses[started["n8n_execution_id"]] = [
            RemoteExecution(id=started["n8n_execution_id"], finished=True, status="success")
        ]
        response = await api_client.post(
            f"{PREFIX}/executions/{started['execution_id']}/poll",
            headers=headers,
            json={"max_attempts": 1, "interval_seconds": 0},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "success"

        response = await api_client.get(
            f"{PREFIX}/executions/{started['execution_id']}", headers=headers
        )
        assert response.json()["input_data"] == {"lead": "ada"}

    async def test_execute_without_body(self, api_client, headers, workflow, n8n_client):
        response = await api_client.post(
            f"{PREFIX}/workflows/{workflow.id}/execute", headers=headers
        )

        assert response.status_code == 200
        assert n8n_client.called("execute_workflow")[0][2] is None

    async def test_fire_webhook(self, api_client, headers, workflow, n8n_client):
        response = await api_client.post(
            f"{PREFIX}/workflows/{workflow.id}/webhook",
            headers=headers,
            json={"payload": {"a": 1}, "method": "PUT"},
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert n8n_client.called("trigger_webhook") == [
            ("trigger_webhook", "hook", {"a": 1}, "PUT")
        ]

    async def test_fire_webhook_defaults_to_node_method(
        self, api_client, headers, store, integration, n8n_client
    ):
        workflow = WorkflowFactory.with_webhook(integration, path="status", method="GET")
        store.workflows[workflow.id] = workflow

        response = await api_client.post(
            f"{PREFIX}/workflows/{workflow.id}/webhook",
            headers=headers,
            json={"payload": {"q": "1"}},
        )

        assert response.status_code == 200
        assert n8n_client.called("trigger_webhook") == [
            ("trigger_webhook", "status", {"q": "1"}, "GET")
        ]


class TestEventRoutes:
    """Tests for /events."""

    async def test_trigger_event(self, api_client, headers, store, workflow):
        mapping = EventMappingFactory.for_workflow(workflow, event_type="user.created")
        store.mappings[mapping.id] = mapping

        response = await api_client.post(
            f"{PREFIX}/events/trigger",
            headers=headers,
            json={"event_type": "user.created", "data": {"id": 1}},
        )

        assert response.status_code == 200
        assert response.json() == {"triggered": 1, "errors": []}
        assert mapping.trigger_count == 1

    async def test_create_mapping_for_unknown_workflow(self, api_client, headers):
        response = await api_client.post(
            f"{PREFIX}/events/mappings",
            headers=headers,
            json={"workflow_id": str(uuid4()), "event_type": "user.created"},
        )

        assert response.status_code == 404

    async def test_create_mapping_rejects_blank_event_type(self, api_client, headers, workflow):
        response = await api_client.post(
            f"{PREFIX}/events/mappings",
            headers=headers,
            json={"workflow_id": str(workflow.id), "event_type": "   "},
        )

        assert response.status_code == 422


class TestTemplateRoutes:
    """Tests for /templates."""

    async def test_categories(self, api_client, headers, store):
        for category in ["sales", "ops", "sales"]:
            template = TemplateFactory.build(category=category)
            store.templates[template.id] = template

        response = await api_client.get(f"{PREFIX}/templates/categories", headers=headers)

        assert response.status_code == 200
        assert response.json() == [
            {"category": "sales", "count": 2},
            {"category": "ops", "count": 1},
        ]

    async def test_install_and_list(self, api_client, headers, store, integration):
        template = TemplateFactory.build()
        store.templates[template.id] = template

        response = await api_client.post(
            f"{PREFIX}/templates/{template.id}/install",
            headers=headers,
            json={"integration_id": str(integration.id)},
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

        response = await api_client.get(f"{PREFIX}/templates/installations", headers=headers)
        assert [i["template_name"] for i in response.json()] == [template.name]

    async def test_unknown_template_detail(self, api_client, headers):
        response = await api_client.get(f"{PREFIX}/templates/{uuid4()}", headers=headers)

        assert response.status_code == 404
