from fastapi import APIRouter

from src.flowbridge.api.v1 import events, executions, integrations, templates, workflows

api_router = APIRouter(prefix="/api/v1/n8n")
api_router.include_router(integrations.router)
api_router.include_router(workflows.router)
api_router.include_router(executions.router)
api_router.include_router(events.router)
api_router.include_router(templates.router)
