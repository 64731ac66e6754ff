from typing import Annotated

from fastapi import APIRouter, Query

from src.teamgate.api.dependencies import (
    Authorized,
    CurrentIdentity,
    PermissionEvaluatorDep,
    RoleServiceDep,
)
from src.teamgate.core.catalog import TENANT_ADMIN_KEYS
from src.teamgate.schemas import PermissionCatalogRead, PermissionCheckRead, PermissionRead

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("", response_model=PermissionCatalogRead, summary="Permission catalog by module")
async def list_permission_catalog(
    _identity: CurrentIdentity,
    role_service: RoleServiceDep,
) -> PermissionCatalogRead:
    catalog = await role_service.list_catalog()
    return PermissionCatalogRead(
        modules={
            module: [PermissionRead.model_validate(p) for p in perms]
            for module, perms in catalog.items()
        },
        tenant_admin_keys=sorted(TENANT_ADMIN_KEYS),
    )


@router.get(
    "/check",
    response_model=PermissionCheckRead,
    summary="Check one permission for the caller",
    description="Runs the full guard without a key, then evaluates `key`. "
    "A denial is reported as `allowed: false`, not as an error.",
)
async def check_permission(
    ctx: Authorized,
    evaluator: PermissionEvaluatorDep,
    key: Annotated[str, Query(min_length=1, max_length=100)],
) -> PermissionCheckRead:
    return PermissionCheckRead(key=key, allowed=await evaluator.check(ctx.identity, key))
