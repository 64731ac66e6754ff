"""Read-only access to the authorization relations.

``AuthorizationStore`` is the only data path used by the identity resolver,
the team context resolver and the permission evaluator. It reads users,
tenants, roles, role-permission links and memberships directly and never
goes through an authorization check itself, which keeps those checks from
recursing into themselves. It exposes no write methods and no other tables.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.teamgate.models import (
    MembershipStatus,
    Permission,
    Role,
    RolePermission,
    TeamMembership,
    Tenant,
    UserRecord,
)


class AuthorizationStore:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_user(self, user_id: UUID) -> UserRecord | None:
        result = await self._session.execute(
            select(UserRecord)
            .where(UserRecord.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_tenant(self, tenant_id: UUID) -> Tenant | None:
        result = await self._session.execute(
            select(Tenant)
            .where(Tenant.id == tenant_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_role(self, role_id: UUID) -> Role | None:
        result = await self._session.execute(
            select(Role).where(Role.id == role_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def role_permission_keys(self, role_id: UUID) -> frozenset[str]:
        result = await self._session.execute(
            select(Permission.key)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
        )
        return frozenset(result.scalars().all())

    async def membership_statuses(self, user_id: UUID, tenant_id: UUID) -> list[str]:
        """Raw status values of every membership row for (user, tenant)."""
        result = await self._session.execute(
            select(TeamMembership.status).where(
                TeamMembership.user_id == user_id,
                TeamMembership.tenant_id == tenant_id,
            )
        )
        return list(result.scalars().all())

    async def approved_tenant_ids(self, user_id: UUID) -> list[UUID]:
        result = await self._session.execute(
            select(TeamMembership.tenant_id).where(
                TeamMembership.user_id == user_id,
                TeamMembership.status == MembershipStatus.APPROVED.value,
            )
        )
        return list(result.scalars().all())
