"""Master admin endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.teamgate.api.dependencies import MasterAdmin, TenantServiceDep, UserAdminServiceDep
from src.teamgate.schemas import (
    MasterAdminUpdate,
    PaginatedResponse,
    TenantCreate,
    TenantRead,
    UserAdminRead,
)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/tenants",
    response_model=PaginatedResponse[TenantRead],
    summary="List all tenants",
    responses={403: {"description": "Master admin required"}},
)
async def list_all_tenants(
    ctx: MasterAdmin,
    tenant_service: TenantServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> PaginatedResponse[TenantRead]:
    tenants, next_cursor, has_more = await tenant_service.list_all(ctx, cursor, limit)
    return PaginatedResponse(
        items=[TenantRead.model_validate(t) for t in tenants],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "/tenants",
    response_model=TenantRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tenant without joining it",
)
async def create_tenant(
    data: TenantCreate,
    ctx: MasterAdmin,
    tenant_service: TenantServiceDep,
) -> TenantRead:
    tenant = await tenant_service.create_as_master(
        ctx, data.name, data.description, data.is_discoverable
    )
    return TenantRead.model_validate(tenant)


@router.get(
    "/users",
    response_model=PaginatedResponse[UserAdminRead],
    summary="List all users, newest first",
    responses={403: {"description": "Master admin required"}},
)
async def list_users(
    ctx: MasterAdmin,
    user_admin_service: UserAdminServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> PaginatedResponse[UserAdminRead]:
    users, next_cursor, has_more = await user_admin_service.list_users(ctx, cursor, limit)
    return PaginatedResponse(
        items=[UserAdminRead.model_validate(u) for u in users],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.patch(
    "/users/{user_id}",
    response_model=UserAdminRead,
    summary="Grant or revoke master admin",
    responses={
        404: {"description": "User not found"},
        409: {"description": "Own account, or the tenant's last tenant admin"},
    },
)
async def update_master_admin(
    user_id: UUID,
    data: MasterAdminUpdate,
    ctx: MasterAdmin,
    user_admin_service: UserAdminServiceDep,
) -> UserAdminRead:
    """Both directions detach the user from its tenant and role."""
    user = await user_admin_service.set_master_admin(ctx, user_id, data.is_master_admin)
    return UserAdminRead.model_validate(user)
