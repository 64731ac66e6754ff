"""Audit trail of the current tenant."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.teamgate.api.dependencies import AuditServiceDep, require_permission
from src.teamgate.core.catalog import AUDIT_VIEW
from src.teamgate.schemas import AuditLogRead, PaginatedResponse
from src.teamgate.services import AuthorizedContext

router = APIRouter(prefix="/audit", tags=["audit"])

AuditViewer = Annotated[AuthorizedContext, Depends(require_permission(AUDIT_VIEW))]

CursorQuery = Annotated[str | None, Query(description="Pagination cursor")]
LimitQuery = Annotated[int, Query(ge=1, le=100, description="Items per page")]
ActionQuery = Annotated[str | None, Query(description="Filter by action type")]


@router.get(
    "/logs",
    response_model=PaginatedResponse[AuditLogRead],
    summary="Audit entries of the current tenant, newest first",
    responses={403: {"description": "Permission denied"}},
)
async def list_audit_logs(
    ctx: AuditViewer,
    audit_service: AuditServiceDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = 50,
    action: ActionQuery = None,
) -> PaginatedResponse[AuditLogRead]:
    logs, next_cursor, has_more = await audit_service.list_logs(
        ctx.require_tenant(), cursor=cursor, limit=limit, action=action
    )
    return PaginatedResponse(
        items=[AuditLogRead.model_validate(log) for log in logs],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/logs/entity/{entity_type}/{entity_id}",
    response_model=list[AuditLogRead],
    summary="History of one entity in the current tenant, oldest first",
    responses={403: {"description": "Permission denied"}},
)
async def get_entity_history(
    entity_type: str,
    entity_id: UUID,
    ctx: AuditViewer,
    audit_service: AuditServiceDep,
) -> list[AuditLogRead]:
    logs = await audit_service.list_entity_history(ctx.require_tenant(), entity_type, entity_id)
    return [AuditLogRead.model_validate(log) for log in logs]
