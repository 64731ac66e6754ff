"""Repository dependencies."""

from typing import Annotated

from fastapi import Depends

from src.teamgate.api.dependencies.db import DBSession
from src.teamgate.repositories import (
    AuditLogRepository,
    AuthorizationStore,
    MembershipRepository,
    PermissionRepository,
    RoleRepository,
    RoleTemplateRepository,
    TenantRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_tenant_repository(session: DBSession) -> TenantRepository:
    return TenantRepository(session)


def get_role_repository(session: DBSession) -> RoleRepository:
    return RoleRepository(session)


def get_permission_repository(session: DBSession) -> PermissionRepository:
    return PermissionRepository(session)


def get_role_template_repository(session: DBSession) -> RoleTemplateRepository:
    return RoleTemplateRepository(session)


def get_membership_repository(session: DBSession) -> MembershipRepository:
    return MembershipRepository(session)


def get_audit_log_repository(session: DBSession) -> AuditLogRepository:
    return AuditLogRepository(session)


def get_authorization_store(session: DBSession) -> AuthorizationStore:
    return AuthorizationStore(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
TenantRepo = Annotated[TenantRepository, Depends(get_tenant_repository)]
RoleRepo = Annotated[RoleRepository, Depends(get_role_repository)]
PermissionRepo = Annotated[PermissionRepository, Depends(get_permission_repository)]
RoleTemplateRepo = Annotated[RoleTemplateRepository, Depends(get_role_template_repository)]
MembershipRepo = Annotated[MembershipRepository, Depends(get_membership_repository)]
AuditLogRepo = Annotated[AuditLogRepository, Depends(get_audit_log_repository)]
TrustedStore = Annotated[AuthorizationStore, Depends(get_authorization_store)]
