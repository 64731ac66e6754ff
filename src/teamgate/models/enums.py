"""Shared enums for models."""

from enum import Enum

from src.teamgate.core.exceptions import Inconsistent


class MembershipStatus(str, Enum):
    """Lifecycle of a team membership. Closed set: pending -> approved | rejected."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: str) -> "MembershipStatus":
        """Convert a stored value, rejecting anything outside the closed set."""
        try:
            return cls(value)
        except ValueError:
            raise Inconsistent(f"Unknown membership status: {value!r}") from None


class AuditAction(str, Enum):
    """Audit action types for type-safe logging."""

    TENANT_CREATE = "tenant.create"
    TENANT_UPDATE = "tenant.update"

    MEMBERSHIP_REQUEST = "membership.request"
    MEMBERSHIP_APPROVE = "membership.approve"
    MEMBERSHIP_REJECT = "membership.reject"

    ROLE_CREATE = "role.create"
    ROLE_UPDATE = "role.update"
    ROLE_DELETE = "role.delete"
    ROLE_PERMISSIONS_UPDATE = "role.permissions_update"
    MEMBER_ROLE_CHANGE = "member.role_change"

    USER_MASTER_ADMIN_CHANGE = "user.master_admin_change"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
