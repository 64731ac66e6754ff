from typing import Annotated

from fastapi import APIRouter, Depends

from src.teamgate.api.dependencies import CurrentAccount, TenantServiceDep, require_permission
from src.teamgate.core.catalog import TENANT_MANAGE
from src.teamgate.schemas import DiscoverableTenantRead, TenantRead, TenantUpdate
from src.teamgate.services import AuthorizedContext

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get(
    "/discoverable",
    response_model=list[DiscoverableTenantRead],
    summary="Tenants open to join requests",
)
async def list_discoverable_tenants(
    _account: CurrentAccount,
    tenant_service: TenantServiceDep,
) -> list[DiscoverableTenantRead]:
    rows = await tenant_service.list_discoverable()
    return [
        DiscoverableTenantRead(
            id=tenant.id,
            name=tenant.name,
            description=tenant.description,
            member_count=count,
        )
        for tenant, count in rows
    ]


@router.patch(
    "/current",
    response_model=TenantRead,
    summary="Update the current tenant's settings",
    responses={403: {"description": "Tenant admin required"}},
)
async def update_current_tenant(
    data: TenantUpdate,
    ctx: Annotated[AuthorizedContext, Depends(require_permission(TENANT_MANAGE))],
    tenant_service: TenantServiceDep,
) -> TenantRead:
    tenant = await tenant_service.update_current(
        ctx,
        name=data.name,
        description=data.description,
        is_discoverable=data.is_discoverable,
    )
    return TenantRead.model_validate(tenant)
