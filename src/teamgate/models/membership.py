"""Team membership - a user's request to join, and standing in, a tenant."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from src.teamgate.models.base import utc_now
from src.teamgate.models.enums import MembershipStatus

ACTIVE_MEMBERSHIP_PREDICATE = text("status <> 'rejected'")


class TeamMembership(SQLModel, table=True):
    """Historical rows are kept; a rejected user files a new row.

    At most one pending-or-approved row may exist per (user, tenant).
    """

    __tablename__ = "team_memberships"
    __table_args__ = (
        Index(
            "uq_team_memberships_active",
            "user_id",
            "tenant_id",
            unique=True,
            postgresql_where=ACTIVE_MEMBERSHIP_PREDICATE,
            sqlite_where=ACTIVE_MEMBERSHIP_PREDICATE,
        ),
        Index("ix_team_memberships_tenant_status", "tenant_id", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    tenant_id: UUID = Field(foreign_key="tenants.id")
    status: str = Field(default=MembershipStatus.PENDING.value, max_length=20)
    # Advisory only; approval decides the actual role
    requested_role_id: UUID | None = Field(default=None, foreign_key="roles.id")
    message: str | None = Field(default=None, max_length=1000)
    requested_at: datetime = Field(default_factory=utc_now)

    approved_by: UUID | None = Field(default=None, foreign_key="users.id")
    approved_at: datetime | None = Field(default=None)
    rejected_by: UUID | None = Field(default=None, foreign_key="users.id")
    rejected_at: datetime | None = Field(default=None)
    rejection_reason: str | None = Field(default=None, max_length=1000)

    @property
    def membership_status(self) -> MembershipStatus:
        return MembershipStatus.parse(self.status)
