from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class TenantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_discoverable: bool = False


class TenantUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_discoverable: bool | None = None


class TenantRead(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    is_discoverable: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class DiscoverableTenantRead(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    member_count: int
