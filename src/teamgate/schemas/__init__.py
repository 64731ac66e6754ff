"""Request and response schemas."""

from src.teamgate.schemas.audit import AuditLogRead
from src.teamgate.schemas.me import MeRead
from src.teamgate.schemas.membership import (
    ApproveRequest,
    GroupedMembershipsRead,
    JoinRequest,
    MembershipRead,
    RejectRequest,
    TenantCreatedResponse,
)
from src.teamgate.schemas.pagination import PaginatedResponse
from src.teamgate.schemas.role import (
    MemberRead,
    MemberRoleUpdate,
    PermissionCatalogRead,
    PermissionCheckRead,
    PermissionRead,
    RoleCreate,
    RolePermissionsUpdate,
    RoleRead,
    RoleUpdate,
)
from src.teamgate.schemas.tenant import (
    DiscoverableTenantRead,
    TenantCreate,
    TenantRead,
    TenantUpdate,
)
from src.teamgate.schemas.user import MasterAdminUpdate, UserAdminRead

__all__ = [
    "ApproveRequest",
    "AuditLogRead",
    "DiscoverableTenantRead",
    "GroupedMembershipsRead",
    "JoinRequest",
    "MasterAdminUpdate",
    "MeRead",
    "MemberRead",
    "MemberRoleUpdate",
    "MembershipRead",
    "PaginatedResponse",
    "PermissionCatalogRead",
    "PermissionCheckRead",
    "PermissionRead",
    "RejectRequest",
    "RoleCreate",
    "RolePermissionsUpdate",
    "RoleRead",
    "RoleUpdate",
    "TenantCreate",
    "TenantCreatedResponse",
    "TenantRead",
    "TenantUpdate",
    "UserAdminRead",
]
