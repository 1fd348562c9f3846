"""Async client for the n8n public REST API (v1)."""

import time
from types import TracebackType
from typing import Any, Self, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.flowbridge.core.config import get_settings
from src.flowbridge.core.logging import get_logger
from src.flowbridge.models import N8nIntegration
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
from src.flowbridge.n8n.triggers import extract_webhooks

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

API_KEY_HEADER = "X-N8N-API-KEY"


class N8nClient:
    """Thin wrapper over one n8n instance.

    Short-lived by intent: build one per top-level operation from the
    stored integration so a rotated API key is always picked up.

    Usage:
        async with N8nClient.from_integration(integration) as client:
            page = await client.list_workflows(limit=100)
    """

    def __init__(
        self,
        instance_url: str,
        api_key: str,
        timeout: float | None = None,
        webhook_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.instance_url = instance_url.rstrip("/")
        self._webhook_timeout = webhook_timeout or settings.n8n_webhook_timeout_seconds
        self._http = httpx.AsyncClient(
            base_url=f"{self.instance_url}/api/v1",
            headers={API_KEY_HEADER: api_key, "Accept": "application/json"},
            timeout=timeout or settings.n8n_http_timeout_seconds,
            transport=transport,
        )
        # Webhooks are public endpoints, so no API key on this client
        self._webhook_http = httpx.AsyncClient(
            base_url=f"{self.instance_url}/webhook",
            timeout=self._webhook_timeout,
            transport=transport,
        )

    @classmethod
    def from_integration(cls, integration: N8nIntegration) -> Self:
        """Build a client from the integration's current credentials."""
        return cls(integration.instance_url, integration.api_key)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()
        await self._webhook_http.aclose()

    async def _send(
        self,
        http: httpx.AsyncClient,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        start_time = time.monotonic()
        try:
            response = await http.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.warning("n8n request failed", method=method, path=path, error=str(e))
            raise N8nConnectionError(f"Could not reach n8n at {self.instance_url}: {e}") from e

        logger.debug(
            "n8n request",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        if response.is_error:
            raise N8nAPIError(response.status_code, response.text, method=method, path=path)
        return response

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        response = await self._send(self._http, method, path, params=params, json=json)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise N8nResponseError(f"n8n returned a non-JSON body for {method} {path}") from e

    async def _fetch(
        self,
        model: type[ModelT],
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> ModelT:
        data = await self._request(method, path, params=params, json=json)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning("Unexpected n8n response", method=method, path=path, error=str(e))
            raise N8nResponseError(
                f"Unexpected n8n response for {method} {path}: {e.error_count()} invalid field(s)"
            ) from e

    # --- Workflows ---

    async def list_workflows(
        self,
        active: bool | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> WorkflowPage:
        """List one page of workflows. Follow next_cursor for more."""
        params: dict[str, Any] = {}
        if active is not None:
            params["active"] = "true" if active else "false"
        if limit is not None:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor
        return await self._fetch(WorkflowPage, "GET", "/workflows", params=params)

    async def get_workflow(self, workflow_id: str) -> RemoteWorkflow:
        return await self._fetch(RemoteWorkflow, "GET", f"/workflows/{workflow_id}")

    async def create_workflow(self, definition: dict[str, Any]) -> RemoteWorkflow:
        return await self._fetch(RemoteWorkflow, "POST", "/workflows", json=definition)

    async def update_workflow(self, workflow_id: str, patch: dict[str, Any]) -> RemoteWorkflow:
        return await self._fetch(RemoteWorkflow, "PUT", f"/workflows/{workflow_id}", json=patch)

    async def delete_workflow(self, workflow_id: str) -> None:
        await self._request("DELETE", f"/workflows/{workflow_id}")

    async def activate_workflow(self, workflow_id: str) -> RemoteWorkflow:
        return await self._fetch(RemoteWorkflow, "POST", f"/workflows/{workflow_id}/activate")

    async def deactivate_workflow(self, workflow_id: str) -> RemoteWorkflow:
        return await self._fetch(
            RemoteWorkflow, "POST", f"/workflows/{workflow_id}/deactivate"
        )

    async def execute_workflow(
        self, workflow_id: str, input_data: dict[str, Any] | None = None
    ) -> str | None:
        """Start a run. Returns the remote execution id.

        Completion is not known at this point; poll get_execution for that.
        """
        result = await self._request(
            "POST", f"/workflows/{workflow_id}/run", json={"data": input_data or {}}
        )
        if not isinstance(result, dict):
            raise N8nResponseError(f"Unexpected n8n response for POST /workflows/{workflow_id}/run")
        execution_id = result.get("id") or result.get("executionId")
        if execution_id is None and isinstance(result.get("data"), dict):
            execution_id = result["data"].get("executionId")
        return str(execution_id) if execution_id is not None else None

    # --- Executions ---

    async def list_executions(
        self,
        workflow_id: str | None = None,
        status: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> ExecutionPage:
        params: dict[str, Any] = {}
        if workflow_id:
            params["workflowId"] = workflow_id
        if status:
            params["status"] = status
        if limit is not None:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor
        return await self._fetch(ExecutionPage, "GET", "/executions", params=params)

    async def get_execution(self, execution_id: str, include_data: bool = True) -> RemoteExecution:
        params = {"includeData": "true"} if include_data else None
        return await self._fetch(
            RemoteExecution, "GET", f"/executions/{execution_id}", params=params
        )

    # --- Webhooks ---

    async def get_webhooks(self, workflow_id: str) -> list[WebhookInfo]:
        """Webhook nodes of a workflow, found by matching node type strings."""
        workflow = await self.get_workflow(workflow_id)
        return [WebhookInfo.model_validate(w) for w in extract_webhooks(workflow.nodes)]

    async def trigger_webhook(
        self,
        path: str,
        payload: dict[str, Any] | None = None,
        method: str = "POST",
    ) -> Any:
        """Call the instance's public webhook URL directly (no API key, untracked)."""
        method = method.upper()
        if method == "GET":
            response = await self._send(
                self._webhook_http, method, f"/{path.lstrip('/')}", params=payload or None
            )
        else:
            response = await self._send(
                self._webhook_http, method, f"/{path.lstrip('/')}", json=payload or {}
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"response": response.text}

    # --- Health ---

    async def test_connection(self) -> ConnectionStatus:
        """Cheapest authenticated call: list one workflow."""
        try:
            await self.list_workflows(limit=1)
        except N8nError as e:
            return ConnectionStatus(connected=False, instance_url=self.instance_url, error=str(e))
        return ConnectionStatus(connected=True, instance_url=self.instance_url)
