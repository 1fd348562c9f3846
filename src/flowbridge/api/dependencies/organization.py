"""Organization and acting-user header extraction.

Authentication happens upstream; these headers are trusted as given.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.flowbridge.core.logging import bind_organization_context


async def get_organization_id_from_header(
    x_organization_id: Annotated[str | None, Header()] = None,
) -> UUID:
    """Extract and parse the organization id header."""
    if not x_organization_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Organization-ID header is required",
        )
    try:
        return UUID(x_organization_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Organization-ID must be a UUID",
        ) from e


async def get_user_id_from_header(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-ID header is required",
        )
    return x_user_id


OrganizationID = Annotated[UUID, Depends(get_organization_id_from_header)]
UserID = Annotated[str, Depends(get_user_id_from_header)]


async def get_request_scope(organization_id: OrganizationID, user_id: UserID) -> tuple[UUID, str]:
    """Organization + user for write endpoints, bound to the log context."""
    bind_organization_context(organization_id, user_id)
    return organization_id, user_id


async def get_read_scope(organization_id: OrganizationID) -> UUID:
    """Organization for read endpoints, bound to the log context."""
    bind_organization_context(organization_id)
    return organization_id


RequestScope = Annotated[tuple[UUID, str], Depends(get_request_scope)]
ReadScope = Annotated[UUID, Depends(get_read_scope)]
