from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.teamgate.models.enums import MembershipStatus
from src.teamgate.schemas.tenant import TenantRead


class JoinRequest(BaseModel):
    tenant_id: UUID
    requested_role_id: UUID | None = Field(
        default=None,
        description="Preferred role. Advisory only; the approver picks the role.",
    )
    message: str | None = Field(default=None, max_length=1000)


class ApproveRequest(BaseModel):
    role_id: UUID


class RejectRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=1000)


class MembershipRead(BaseModel):
    id: UUID
    user_id: UUID
    tenant_id: UUID
    status: MembershipStatus
    requested_role_id: UUID | None = None
    message: str | None = None
    requested_at: datetime
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    rejected_by: UUID | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None

    model_config = {"from_attributes": True}


class GroupedMembershipsRead(BaseModel):
    pending: list[MembershipRead]
    approved: list[MembershipRead]
    rejected: list[MembershipRead]
    total: int


class TenantCreatedResponse(BaseModel):
    tenant: TenantRead
    membership: MembershipRead
