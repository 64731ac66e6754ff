"""Onboarding: create a tenant or ask to join one.

These routes need only a verified credential. The user record is created
on first use.
"""

from fastapi import APIRouter, status

from src.teamgate.api.dependencies import CurrentAccount, MembershipServiceDep
from src.teamgate.schemas import (
    JoinRequest,
    MembershipRead,
    TenantCreate,
    TenantCreatedResponse,
    TenantRead,
)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.post(
    "/tenants",
    response_model=TenantCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tenant and become its admin",
    responses={
        401: {"description": "Missing or invalid credential"},
        409: {"description": "Caller already belongs to a tenant"},
    },
)
async def create_tenant(
    data: TenantCreate,
    account: CurrentAccount,
    membership_service: MembershipServiceDep,
) -> TenantCreatedResponse:
    tenant, membership = await membership_service.create_tenant(
        account, data.name, data.description, data.is_discoverable
    )
    return TenantCreatedResponse(
        tenant=TenantRead.model_validate(tenant),
        membership=MembershipRead.model_validate(membership),
    )


@router.post(
    "/join-requests",
    response_model=MembershipRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request to join a discoverable tenant",
    responses={
        404: {"description": "Tenant (or requested role) not found"},
        409: {"description": "Already in a tenant, or a request is already open"},
    },
)
async def request_to_join(
    data: JoinRequest,
    account: CurrentAccount,
    membership_service: MembershipServiceDep,
) -> MembershipRead:
    membership = await membership_service.request_to_join(
        account, data.tenant_id, data.requested_role_id, data.message
    )
    return MembershipRead.model_validate(membership)
