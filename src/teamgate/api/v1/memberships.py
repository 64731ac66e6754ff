from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.teamgate.api.dependencies import (
    CurrentIdentity,
    MembershipServiceDep,
    require_permission,
)
from src.teamgate.core.catalog import (
    MEMBERSHIPS_APPROVE,
    MEMBERSHIPS_REJECT,
    MEMBERSHIPS_VIEW_PENDING,
)
from src.teamgate.schemas import (
    ApproveRequest,
    GroupedMembershipsRead,
    MembershipRead,
    PaginatedResponse,
    RejectRequest,
)
from src.teamgate.services import AuthorizedContext

router = APIRouter(prefix="/memberships", tags=["memberships"])


@router.get(
    "",
    response_model=GroupedMembershipsRead,
    summary="My memberships grouped by status",
)
async def list_my_memberships(
    identity: CurrentIdentity,
    membership_service: MembershipServiceDep,
) -> GroupedMembershipsRead:
    grouped = await membership_service.list_my_memberships(identity.user_id)
    return GroupedMembershipsRead(
        pending=[MembershipRead.model_validate(m) for m in grouped.pending],
        approved=[MembershipRead.model_validate(m) for m in grouped.approved],
        rejected=[MembershipRead.model_validate(m) for m in grouped.rejected],
        total=grouped.total,
    )


@router.get(
    "/pending",
    response_model=PaginatedResponse[MembershipRead],
    summary="Pending requests for the current tenant",
    description="Master admins must select a tenant with the X-Tenant-ID header.",
)
async def list_pending_memberships(
    ctx: Annotated[AuthorizedContext, Depends(require_permission(MEMBERSHIPS_VIEW_PENDING))],
    membership_service: MembershipServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> PaginatedResponse[MembershipRead]:
    items, next_cursor, has_more = await membership_service.list_pending(ctx, cursor, limit)
    return PaginatedResponse(
        items=[MembershipRead.model_validate(m) for m in items],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/{membership_id}", response_model=MembershipRead)
async def get_membership(
    membership_id: UUID,
    identity: CurrentIdentity,
    membership_service: MembershipServiceDep,
) -> MembershipRead:
    membership = await membership_service.get_membership(identity, membership_id)
    return MembershipRead.model_validate(membership)


@router.post(
    "/{membership_id}/approve",
    response_model=MembershipRead,
    responses={
        403: {"description": "Tenant admin of the membership's tenant required"},
        404: {"description": "Membership or role not found"},
        409: {"description": "Membership is no longer pending"},
    },
)
async def approve_membership(
    membership_id: UUID,
    data: ApproveRequest,
    ctx: Annotated[AuthorizedContext, Depends(require_permission(MEMBERSHIPS_APPROVE))],
    membership_service: MembershipServiceDep,
) -> MembershipRead:
    membership = await membership_service.approve(ctx, membership_id, data.role_id)
    return MembershipRead.model_validate(membership)


@router.post(
    "/{membership_id}/reject",
    response_model=MembershipRead,
    responses={
        403: {"description": "Tenant admin of the membership's tenant required"},
        409: {"description": "Membership is no longer pending"},
    },
)
async def reject_membership(
    membership_id: UUID,
    data: RejectRequest,
    ctx: Annotated[AuthorizedContext, Depends(require_permission(MEMBERSHIPS_REJECT))],
    membership_service: MembershipServiceDep,
) -> MembershipRead:
    membership = await membership_service.reject(ctx, membership_id, data.reason)
    return MembershipRead.model_validate(membership)
