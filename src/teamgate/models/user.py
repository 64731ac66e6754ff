"""User record - the tenant system's view of an identity-provider account."""

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from src.teamgate.models.base import utc_now


class UserRecord(SQLModel, table=True):
    """One row per account that has signed in.

    Valid shapes:
      * master admin: tenant_id and role_id both NULL
      * tenant member: tenant_id and role_id both set
      * onboarding: not master admin, tenant_id and role_id both NULL
    """

    __tablename__ = "users"

    # Same value as the identity provider's account id
    id: UUID = Field(primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    full_name: str | None = Field(default=None, max_length=100)
    tenant_id: UUID | None = Field(default=None, foreign_key="tenants.id", index=True)
    role_id: UUID | None = Field(default=None, foreign_key="roles.id", index=True)
    is_master_admin: bool = Field(default=False)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
