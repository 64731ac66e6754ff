"""FastAPI dependency injection definitions."""

from src.teamgate.api.dependencies.auth import (
    Authorized,
    CurrentAccount,
    CurrentIdentity,
    MasterAdmin,
    RequestedTenantId,
    get_authorized_context,
    get_credential,
    get_current_account,
    get_current_identity,
    require_master_admin,
    require_permission,
)
from src.teamgate.api.dependencies.db import DBSession, get_db_session
from src.teamgate.api.dependencies.repositories import (
    AuditLogRepo,
    MembershipRepo,
    PermissionRepo,
    RoleRepo,
    RoleTemplateRepo,
    TenantRepo,
    TrustedStore,
    UserRepo,
)
from src.teamgate.api.dependencies.services import (
    AuditServiceDep,
    AuthorizationGuardDep,
    IdentityResolverDep,
    MembershipServiceDep,
    PermissionEvaluatorDep,
    RoleServiceDep,
    TeamContextResolverDep,
    TenantServiceDep,
    UserAdminServiceDep,
)

__all__ = [
    # Auth
    "Authorized",
    "CurrentAccount",
    "CurrentIdentity",
    "MasterAdmin",
    "RequestedTenantId",
    "get_authorized_context",
    "get_credential",
    "get_current_account",
    "get_current_identity",
    "require_master_admin",
    "require_permission",
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "AuditLogRepo",
    "MembershipRepo",
    "PermissionRepo",
    "RoleRepo",
    "RoleTemplateRepo",
    "TenantRepo",
    "TrustedStore",
    "UserRepo",
    # Services
    "AuditServiceDep",
    "AuthorizationGuardDep",
    "IdentityResolverDep",
    "MembershipServiceDep",
    "PermissionEvaluatorDep",
    "RoleServiceDep",
    "TeamContextResolverDep",
    "TenantServiceDep",
    "UserAdminServiceDep",
]
