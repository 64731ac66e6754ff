from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from src.teamgate.api.dependencies import RoleServiceDep, require_permission
from src.teamgate.core.catalog import MEMBERS_MANAGE, USERS_READ
from src.teamgate.schemas import MemberRead, MemberRoleUpdate
from src.teamgate.services import AuthorizedContext

router = APIRouter(prefix="/members", tags=["members"])


@router.get("", response_model=list[MemberRead], summary="Members of the current tenant")
async def list_members(
    ctx: Annotated[AuthorizedContext, Depends(require_permission(USERS_READ))],
    role_service: RoleServiceDep,
) -> list[MemberRead]:
    return [MemberRead.model_validate(u) for u in await role_service.list_members(ctx)]


@router.put(
    "/{user_id}/role",
    response_model=MemberRead,
    summary="Change a member's role",
    responses={
        403: {"description": "Tenant admins cannot manage other tenant admins"},
        409: {"description": "Would leave the tenant without a tenant admin"},
    },
)
async def update_member_role(
    user_id: UUID,
    data: MemberRoleUpdate,
    ctx: Annotated[AuthorizedContext, Depends(require_permission(MEMBERS_MANAGE))],
    role_service: RoleServiceDep,
) -> MemberRead:
    user = await role_service.assign_member_role(ctx, user_id, data.role_id)
    return MemberRead.model_validate(user)
