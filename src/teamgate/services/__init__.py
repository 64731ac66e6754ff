"""Service layer exports."""

from src.teamgate.services.audit_service import AuditService
from src.teamgate.services.authorization_service import AuthorizationGuard, AuthorizedContext
from src.teamgate.services.identity_service import Identity, IdentityResolver
from src.teamgate.services.membership_service import MembershipService
from src.teamgate.services.permission_service import PermissionEvaluator
from src.teamgate.services.role_service import RoleService
from src.teamgate.services.team_context_service import TeamContext, TeamContextResolver
from src.teamgate.services.tenant_service import TenantService
from src.teamgate.services.user_admin_service import UserAdminService

__all__ = [
    "AuditService",
    "AuthorizationGuard",
    "AuthorizedContext",
    "Identity",
    "IdentityResolver",
    "MembershipService",
    "PermissionEvaluator",
    "RoleService",
    "TeamContext",
    "TeamContextResolver",
    "TenantService",
    "UserAdminService",
]
