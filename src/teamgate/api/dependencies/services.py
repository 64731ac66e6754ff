"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.teamgate.api.dependencies.db import DBSession
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
from src.teamgate.services import (
    AuditService,
    AuthorizationGuard,
    IdentityResolver,
    MembershipService,
    PermissionEvaluator,
    RoleService,
    TeamContextResolver,
    TenantService,
    UserAdminService,
)


def get_identity_resolver(store: TrustedStore) -> IdentityResolver:
    return IdentityResolver(store)


def get_team_context_resolver(store: TrustedStore) -> TeamContextResolver:
    return TeamContextResolver(store)


def get_permission_evaluator(store: TrustedStore) -> PermissionEvaluator:
    return PermissionEvaluator(store)


IdentityResolverDep = Annotated[IdentityResolver, Depends(get_identity_resolver)]
TeamContextResolverDep = Annotated[TeamContextResolver, Depends(get_team_context_resolver)]
PermissionEvaluatorDep = Annotated[PermissionEvaluator, Depends(get_permission_evaluator)]


def get_authorization_guard(
    identity_resolver: IdentityResolverDep,
    context_resolver: TeamContextResolverDep,
    evaluator: PermissionEvaluatorDep,
) -> AuthorizationGuard:
    return AuthorizationGuard(identity_resolver, context_resolver, evaluator)


def get_audit_service(audit_repo: AuditLogRepo, session: DBSession) -> AuditService:
    return AuditService(audit_repo, session)


AuthorizationGuardDep = Annotated[AuthorizationGuard, Depends(get_authorization_guard)]
AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]


def get_role_service(
    role_repo: RoleRepo,
    permission_repo: PermissionRepo,
    template_repo: RoleTemplateRepo,
    user_repo: UserRepo,
    membership_repo: MembershipRepo,
    evaluator: PermissionEvaluatorDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> RoleService:
    return RoleService(
        role_repo,
        permission_repo,
        template_repo,
        user_repo,
        membership_repo,
        evaluator,
        audit_service,
        session,
    )


RoleServiceDep = Annotated[RoleService, Depends(get_role_service)]


def get_tenant_service(
    tenant_repo: TenantRepo,
    role_service: RoleServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> TenantService:
    return TenantService(tenant_repo, role_service, audit_service, session)


TenantServiceDep = Annotated[TenantService, Depends(get_tenant_service)]


def get_membership_service(
    membership_repo: MembershipRepo,
    user_repo: UserRepo,
    tenant_repo: TenantRepo,
    role_repo: RoleRepo,
    tenant_service: TenantServiceDep,
    store: TrustedStore,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> MembershipService:
    return MembershipService(
        membership_repo,
        user_repo,
        tenant_repo,
        role_repo,
        tenant_service,
        store,
        audit_service,
        session,
    )


MembershipServiceDep = Annotated[MembershipService, Depends(get_membership_service)]


def get_user_admin_service(
    user_repo: UserRepo,
    role_repo: RoleRepo,
    membership_repo: MembershipRepo,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> UserAdminService:
    return UserAdminService(user_repo, role_repo, membership_repo, audit_service, session)


UserAdminServiceDep = Annotated[UserAdminService, Depends(get_user_admin_service)]
