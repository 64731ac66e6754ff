from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.teamgate.api.dependencies import RoleServiceDep, require_permission
from src.teamgate.core.catalog import ROLES_MANAGE, ROLES_READ
from src.teamgate.models import Role
from src.teamgate.schemas import RoleCreate, RolePermissionsUpdate, RoleRead, RoleUpdate
from src.teamgate.services import AuthorizedContext

router = APIRouter(prefix="/roles", tags=["roles"])

RolesReader = Annotated[AuthorizedContext, Depends(require_permission(ROLES_READ))]
RolesManager = Annotated[AuthorizedContext, Depends(require_permission(ROLES_MANAGE))]


def _to_read(role: Role, keys: list[str]) -> RoleRead:
    return RoleRead(
        id=role.id,
        tenant_id=role.tenant_id,
        name=role.name,
        description=role.description,
        is_tenant_admin=role.is_tenant_admin,
        is_custom=role.is_custom,
        permissions=keys,
    )


@router.get("", response_model=list[RoleRead], summary="Roles of the current tenant")
async def list_roles(ctx: RolesReader, role_service: RoleServiceDep) -> list[RoleRead]:
    return [_to_read(role, keys) for role, keys in await role_service.list_roles(ctx)]


@router.post(
    "",
    response_model=RoleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a custom role",
    responses={
        400: {"description": "Unknown or admin-only permission keys"},
        409: {"description": "Role name already used in this tenant"},
    },
)
async def create_role(
    data: RoleCreate, ctx: RolesManager, role_service: RoleServiceDep
) -> RoleRead:
    role, keys = await role_service.create_role(
        ctx, data.name, data.description, data.permissions
    )
    return _to_read(role, keys)


@router.get(
    "/{role_id}",
    response_model=RoleRead,
    summary="One role of the current tenant",
    responses={404: {"description": "Role not found in this tenant"}},
)
async def get_role(role_id: UUID, ctx: RolesReader, role_service: RoleServiceDep) -> RoleRead:
    role, keys = await role_service.get_role(ctx, role_id)
    return _to_read(role, keys)


@router.patch(
    "/{role_id}",
    response_model=RoleRead,
    summary="Rename a role or change its description",
    responses={409: {"description": "Role name already used in this tenant"}},
)
async def update_role(
    role_id: UUID,
    data: RoleUpdate,
    ctx: RolesManager,
    role_service: RoleServiceDep,
) -> RoleRead:
    role, keys = await role_service.update_role(ctx, role_id, data.name, data.description)
    return _to_read(role, keys)


@router.put(
    "/{role_id}/permissions",
    response_model=RoleRead,
    summary="Replace a role's permissions",
    responses={403: {"description": "Tenant admin role cannot be modified"}},
)
async def update_role_permissions(
    role_id: UUID,
    data: RolePermissionsUpdate,
    ctx: RolesManager,
    role_service: RoleServiceDep,
) -> RoleRead:
    role, keys = await role_service.update_role_permissions(ctx, role_id, data.permissions)
    return _to_read(role, keys)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an unused custom role",
    responses={409: {"description": "Role is a template role or is still assigned"}},
)
async def delete_role(role_id: UUID, ctx: RolesManager, role_service: RoleServiceDep) -> None:
    await role_service.delete_role(ctx, role_id)
