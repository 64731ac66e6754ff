"""Model exports.

Import from here: ``from src.teamgate.models import UserRecord, Tenant``
"""

from src.teamgate.models.audit import AuditLog
from src.teamgate.models.enums import AuditAction, AuditStatus, MembershipStatus
from src.teamgate.models.membership import TeamMembership
from src.teamgate.models.role import (
    Permission,
    Role,
    RolePermission,
    RoleTemplate,
    TemplatePermission,
)
from src.teamgate.models.tenant import Tenant
from src.teamgate.models.user import UserRecord

__all__ = [
    # Enums
    "AuditAction",
    "AuditStatus",
    "MembershipStatus",
    # Models
    "AuditLog",
    "Permission",
    "Role",
    "RolePermission",
    "RoleTemplate",
    "TeamMembership",
    "TemplatePermission",
    "Tenant",
    "UserRecord",
]
