"""Tenant (team) model - the isolation boundary for business data."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.teamgate.models.base import utc_now


class Tenant(SQLModel, table=True):
    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    # Listed to users browsing for a team to join
    is_discoverable: bool = Field(default=False, index=True)
    is_active: bool = Field(default=True)
    created_by: UUID | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
