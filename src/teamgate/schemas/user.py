from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class UserAdminRead(BaseModel):
    id: UUID
    email: str
    full_name: str | None = None
    tenant_id: UUID | None = None
    role_id: UUID | None = None
    is_master_admin: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class MasterAdminUpdate(BaseModel):
    is_master_admin: bool
