"""Caller introspection."""

from fastapi import APIRouter

from src.teamgate.api.dependencies import (
    CurrentIdentity,
    PermissionEvaluatorDep,
    RequestedTenantId,
    TeamContextResolverDep,
)
from src.teamgate.schemas import MeRead

router = APIRouter(tags=["me"])


@router.get(
    "/me",
    response_model=MeRead,
    summary="Resolved identity and team context",
    responses={
        401: {"description": "Missing or invalid credential"},
        403: {
            "description": "No user record (`incomplete_provisioning`) or no tenant "
            "(`no_tenant_assigned`); the `next` field names the onboarding step",
        },
    },
)
async def read_me(
    identity: CurrentIdentity,
    requested_tenant_id: RequestedTenantId,
    context_resolver: TeamContextResolverDep,
    evaluator: PermissionEvaluatorDep,
) -> MeRead:
    team = await context_resolver.resolve(identity, requested_tenant_id)
    permissions: frozenset[str] = frozenset()
    if team.is_master_admin or team.membership_approved:
        permissions = await evaluator.permissions_for(identity)

    return MeRead(
        user_id=identity.user_id,
        email=identity.email,
        tenant_id=team.tenant_id,
        role_id=identity.role_id,
        is_master_admin=team.is_master_admin,
        is_tenant_admin=team.is_tenant_admin,
        membership_approved=team.membership_approved,
        permissions=sorted(permissions),
    )
