"""n8n integration endpoints - connect, verify, sync, disconnect."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.flowbridge.api.dependencies import (
    IntegrationServiceDep,
    ReadScope,
    RequestScope,
    SyncServiceDep,
)
from src.flowbridge.n8n import ConnectionStatus
from src.flowbridge.schemas.integration import (
    IntegrationConnect,
    IntegrationConnectResponse,
    IntegrationRead,
)
from src.flowbridge.schemas.results import SyncResult

router = APIRouter(prefix="/integrations", tags=["integrations"])


@router.get(
    "",
    response_model=list[IntegrationRead],
    summary="List integrations",
    description="List the organization's connected n8n instances, newest first.",
)
async def list_integrations(
    organization_id: ReadScope,
    service: IntegrationServiceDep,
) -> list[IntegrationRead]:
    integrations = await service.list_integrations(organization_id)
    return [IntegrationRead.model_validate(i) for i in integrations]


@router.post(
    "",
    response_model=IntegrationConnectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Connect n8n instance",
    description="Verify the instance URL and API key, then store the integration.",
    responses={
        201: {"description": "Instance reachable and stored"},
        400: {"description": "Instance could not be reached with these credentials"},
    },
)
async def connect_integration(
    request: IntegrationConnect,
    scope: RequestScope,
    service: IntegrationServiceDep,
) -> IntegrationConnectResponse:
    organization_id, user_id = scope
    integration, connection = await service.connect(
        organization_id,
        str(request.instance_url),
        request.api_key,
        name=request.name,
        user_id=user_id,
    )
    if integration is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not connect to n8n: {connection.error}",
        )
    return IntegrationConnectResponse(
        connection=connection,
        integration=IntegrationRead.model_validate(integration),
    )


@router.get(
    "/{integration_id}",
    response_model=IntegrationRead,
    summary="Get integration",
    responses={404: {"description": "Integration not found"}},
)
async def get_integration(
    integration_id: UUID,
    organization_id: ReadScope,
    service: IntegrationServiceDep,
) -> IntegrationRead:
    integration = await service.get_integration(integration_id, organization_id)
    if integration is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Integration {integration_id} not found",
        )
    return IntegrationRead.model_validate(integration)


@router.delete(
    "/{integration_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Disconnect integration",
    description="Delete the integration and its mirrored workflows.",
    responses={404: {"description": "Integration not found"}},
)
async def disconnect_integration(
    integration_id: UUID,
    scope: RequestScope,
    service: IntegrationServiceDep,
) -> None:
    organization_id, _ = scope
    result = await service.disconnect(integration_id, organization_id)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)


@router.post(
    "/{integration_id}/verify",
    response_model=ConnectionStatus,
    summary="Verify integration",
    description="Re-check the stored credentials against the instance.",
)
async def verify_integration(
    integration_id: UUID,
    scope: RequestScope,
    service: IntegrationServiceDep,
) -> ConnectionStatus:
    organization_id, _ = scope
    return await service.verify_integration(integration_id, organization_id)


@router.post(
    "/{integration_id}/sync",
    response_model=SyncResult,
    summary="Sync workflows",
    description=(
        "Mirror the instance's workflows locally. Safe to re-run; "
        "workflows removed remotely are flagged unsynced, not deleted."
    ),
)
async def sync_integration(
    integration_id: UUID,
    scope: RequestScope,
    service: SyncServiceDep,
) -> SyncResult:
    organization_id, _ = scope
    return await service.sync_workflows(integration_id, organization_id)
