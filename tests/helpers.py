"""Test helper functions for common data creation patterns."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.teamgate.core.security import Account, issue_credential
from src.teamgate.models import Role, TeamMembership, Tenant, UserRecord
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
from src.teamgate.services import (
    AuditService,
    AuthorizationGuard,
    AuthorizedContext,
    IdentityResolver,
    MembershipService,
    PermissionEvaluator,
    RoleService,
    TeamContextResolver,
    TenantService,
    UserAdminService,
)
from tests.factories import UserFactory


@dataclass
class Services:
    """Everything the API wires per request, bound to one session."""

    session: AsyncSession
    store: AuthorizationStore
    identity: IdentityResolver
    context: TeamContextResolver
    evaluator: PermissionEvaluator
    guard: AuthorizationGuard
    audit: AuditService
    roles: RoleService
    tenants: TenantService
    memberships: MembershipService
    user_admin: UserAdminService

    async def authorize(
        self,
        account: Account,
        permission_key: str | None = None,
        tenant_id: UUID | None = None,
    ) -> AuthorizedContext:
        return await self.guard.authorize(credential_for(account), permission_key, tenant_id)


def build_services(session: AsyncSession) -> Services:
    store = AuthorizationStore(session)
    evaluator = PermissionEvaluator(store)
    identity = IdentityResolver(store)
    context = TeamContextResolver(store)
    audit = AuditService(AuditLogRepository(session), session)
    role_repo = RoleRepository(session)
    user_repo = UserRepository(session)
    membership_repo = MembershipRepository(session)
    tenant_repo = TenantRepository(session)
    roles = RoleService(
        role_repo,
        PermissionRepository(session),
        RoleTemplateRepository(session),
        user_repo,
        membership_repo,
        evaluator,
        audit,
        session,
    )
    tenants = TenantService(tenant_repo, roles, audit, session)
    memberships = MembershipService(
        membership_repo,
        user_repo,
        tenant_repo,
        role_repo,
        tenants,
        store,
        audit,
        session,
    )
    return Services(
        session=session,
        store=store,
        identity=identity,
        context=context,
        evaluator=evaluator,
        guard=AuthorizationGuard(identity, context, evaluator),
        audit=audit,
        roles=roles,
        tenants=tenants,
        memberships=memberships,
        user_admin=UserAdminService(user_repo, role_repo, membership_repo, audit, session),
    )


def credential_for(account: Account | UserRecord) -> str:
    return issue_credential(account.id, account.email)


def auth_headers(account: Account | UserRecord, tenant_id: UUID | None = None) -> dict[str, str]:
    """Authorization header, plus X-Tenant-ID when a tenant is selected."""
    headers = {"Authorization": f"Bearer {credential_for(account)}"}
    if tenant_id is not None:
        headers["X-Tenant-ID"] = str(tenant_id)
    return headers


def new_account(email: str | None = None) -> Account:
    """An identity-provider account that has no user record yet."""
    user = UserFactory.build() if email is None else UserFactory.build(email=email)
    return Account(id=user.id, email=user.email)


async def create_master_admin(session: AsyncSession, **user_kwargs) -> UserRecord:
    user = UserFactory.master_admin(**user_kwargs)
    session.add(user)
    await session.commit()
    return user


async def create_tenant_with_admin(
    services: Services, name: str = "Acme", is_discoverable: bool = True
) -> tuple[Account, Tenant, TeamMembership]:
    """Onboard a fresh account by creating a tenant. Returns (admin, tenant, membership)."""
    admin = new_account()
    tenant, membership = await services.memberships.create_tenant(
        admin, name, is_discoverable=is_discoverable
    )
    return admin, tenant, membership


async def role_named(services: Services, tenant_id: UUID, name: str) -> Role:
    role = await services.roles.role_repo.get_by_name(tenant_id, name)
    assert role is not None, f"role {name!r} missing in tenant {tenant_id}"
    return role


async def join_and_approve(
    services: Services,
    admin: Account,
    tenant: Tenant,
    role_name: str = "Recruiter",
) -> tuple[Account, TeamMembership]:
    """Request to join ``tenant`` as a new account and have ``admin`` approve it."""
    member = new_account()
    pending = await services.memberships.request_to_join(member, tenant.id)
    ctx = await services.authorize(admin, "memberships.approve")
    role = await role_named(services, tenant.id, role_name)
    approved = await services.memberships.approve(ctx, pending.id, role.id)
    return member, approved


async def count_rows(session: AsyncSession, model: type) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()
