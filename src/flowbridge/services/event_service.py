"""Platform event fan-out to mapped workflows."""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.flowbridge.core.logging import get_logger
from src.flowbridge.models import N8nEventMapping, TriggerSource
from src.flowbridge.n8n import apply_transform
from src.flowbridge.repositories import EventMappingRepository, WorkflowRepository
from src.flowbridge.schemas.results import EventTriggerResult, OperationResult
from src.flowbridge.services.errors import WorkflowNotFoundError
from src.flowbridge.services.execution_service import ExecutionService
from src.flowbridge.services.types import SYSTEM_USER

logger = get_logger(__name__)


class EventService:
    """Routes one platform event to every active mapping for it.

    Mappings are processed one at a time, in creation order. A failing
    mapping is reported in `errors` and never stops the rest.
    """

    def __init__(
        self,
        mapping_repo: EventMappingRepository,
        workflow_repo: WorkflowRepository,
        execution_service: ExecutionService,
        session: AsyncSession,
    ):
        self.mapping_repo = mapping_repo
        self.workflow_repo = workflow_repo
        self.execution_service = execution_service
        self.session = session

    async def trigger_workflows_for_event(
        self,
        organization_id: UUID,
        event_type: str,
        event_data: dict[str, Any],
    ) -> EventTriggerResult:
        result = EventTriggerResult()

        try:
            mappings = await self.mapping_repo.list_for_event(organization_id, event_type)
        except SQLAlchemyError as e:
            logger.error("Event mapping lookup failed", event_type=event_type, error=str(e))
            result.errors.append(f"Event trigger error: {e}")
            return result

        if not mappings:
            return result

        for mapping, workflow in mappings:
            payload = (
                apply_transform(event_data, mapping.payload_transform)
                if mapping.payload_transform
                else event_data
            )
            execution = await self.execution_service.execute_workflow(
                workflow.id,
                organization_id,
                SYSTEM_USER,
                input_data=payload,
                triggered_by=TriggerSource.EVENT,
            )
            if not execution.success:
                result.errors.append(f"{workflow.name}: {execution.error}")
                continue

            result.triggered += 1
            try:
                await self.mapping_repo.record_trigger(mapping.id)
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.warning(
                    "Could not record mapping trigger",
                    mapping_id=str(mapping.id),
                    error=str(e),
                )

        logger.info(
            "Event routed",
            event_type=event_type,
            mappings=len(mappings),
            triggered=result.triggered,
            errors=len(result.errors),
        )
        return result

    async def list_mappings(
        self, organization_id: UUID, event_type: str | None = None
    ) -> list[N8nEventMapping]:
        return await self.mapping_repo.list_by_organization(organization_id, event_type)

    async def create_mapping(
        self,
        organization_id: UUID,
        workflow_id: UUID,
        event_type: str,
        payload_transform: dict[str, str] | None = None,
        is_active: bool = True,
    ) -> N8nEventMapping:
        """Map an event type to one of the organization's workflows.

        Raises:
            WorkflowNotFoundError: If the workflow is not the organization's
            ValueError: If the workflow is already mapped to this event type
        """
        workflow = await self.workflow_repo.get_for_organization(workflow_id, organization_id)
        if workflow is None:
            raise WorkflowNotFoundError()

        mapping = N8nEventMapping(
            organization_id=organization_id,
            workflow_id=workflow.id,
            event_type=event_type,
            payload_transform=payload_transform,
            is_active=is_active,
        )
        try:
            self.mapping_repo.add(mapping)
            await self.session.commit()
            await self.session.refresh(mapping)
        except IntegrityError as e:
            await self.session.rollback()
            raise ValueError(
                f"Workflow is already mapped to event '{event_type}'"
            ) from e
        return mapping

    async def delete_mapping(self, mapping_id: UUID, organization_id: UUID) -> OperationResult:
        mapping = await self.mapping_repo.get_for_organization(mapping_id, organization_id)
        if mapping is None:
            return OperationResult(success=False, error="Event mapping not found")
        await self.mapping_repo.delete(mapping)
        await self.session.commit()
        return OperationResult(success=True)
