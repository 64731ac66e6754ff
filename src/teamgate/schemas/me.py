from uuid import UUID

from pydantic import BaseModel


class MeRead(BaseModel):
    """Resolved identity and team context of the caller."""

    user_id: UUID
    email: str
    tenant_id: UUID | None
    role_id: UUID | None
    is_master_admin: bool
    is_tenant_admin: bool
    membership_approved: bool
    permissions: list[str]
