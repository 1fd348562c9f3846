"""Template catalogue and installation endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.flowbridge.api.dependencies import ReadScope, RequestScope, TemplateServiceDep
from src.flowbridge.schemas.results import OperationResult, TemplateInstallResult
from src.flowbridge.schemas.template import (
    InstallationRead,
    TemplateCategory,
    TemplateDetail,
    TemplateInstallRequest,
    TemplateListResponse,
    TemplateRead,
)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get(
    "",
    response_model=TemplateListResponse,
    summary="List templates",
    description="Public templates, most installed first.",
)
async def list_templates(
    service: TemplateServiceDep,
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    featured: Annotated[bool, Query(description="Only featured templates")] = False,
    search: Annotated[
        str | None, Query(max_length=100, description="Search name and description")
    ] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> TemplateListResponse:
    templates, total = await service.list_templates(
        category=category, featured=featured, search=search, limit=limit, offset=offset
    )
    return TemplateListResponse(
        items=[TemplateRead.model_validate(t) for t in templates],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/categories",
    response_model=list[TemplateCategory],
    summary="List template categories",
)
async def list_categories(service: TemplateServiceDep) -> list[TemplateCategory]:
    counts = await service.list_categories()
    return [TemplateCategory(category=category, count=count) for category, count in counts]


@router.get(
    "/installations",
    response_model=list[InstallationRead],
    summary="List installations",
    description="The organization's installed templates, newest first.",
)
async def list_installations(
    organization_id: ReadScope,
    service: TemplateServiceDep,
) -> list[InstallationRead]:
    rows = await service.list_installations(organization_id)
    return [
        InstallationRead(
            id=installation.id,
            template_id=template.id,
            template_name=template.name,
            integration_id=installation.integration_id,
            workflow_id=installation.workflow_id,
            workflow_name=workflow.name if workflow else None,
            status=installation.status,
            installed_by=installation.installed_by,
            installed_at=installation.installed_at,
        )
        for installation, template, workflow in rows
    ]


@router.delete(
    "/installations/{installation_id}",
    response_model=OperationResult,
    summary="Uninstall template",
    description="Remove the installation and its local workflow.",
)
async def uninstall_template(
    installation_id: UUID,
    scope: RequestScope,
    service: TemplateServiceDep,
    delete_remote: Annotated[
        bool, Query(description="Also delete the workflow on n8n (best effort)")
    ] = False,
) -> OperationResult:
    organization_id, _ = scope
    return await service.uninstall_template(
        installation_id, organization_id, delete_remote=delete_remote
    )


@router.get(
    "/{template_id}",
    response_model=TemplateDetail,
    summary="Get template",
    responses={404: {"description": "Template not found"}},
)
async def get_template(template_id: UUID, service: TemplateServiceDep) -> TemplateDetail:
    template = await service.get_template(template_id)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template {template_id} not found",
        )
    return TemplateDetail.model_validate(template)


@router.post(
    "/{template_id}/install",
    response_model=TemplateInstallResult,
    summary="Install template",
    description="Create a workflow from the template on the given n8n integration.",
)
async def install_template(
    template_id: UUID,
    request: TemplateInstallRequest,
    scope: RequestScope,
    service: TemplateServiceDep,
) -> TemplateInstallResult:
    organization_id, user_id = scope
    return await service.install_template(
        template_id,
        request.integration_id,
        organization_id,
        user_id,
        custom_config=request.custom_config,
    )
