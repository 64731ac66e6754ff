"""Repository for Tenant entity."""

from sqlmodel import func, select

from src.teamgate.models import Tenant, UserRecord
from src.teamgate.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    model = Tenant

    async def list_discoverable(self) -> list[tuple[Tenant, int]]:
        """Active, discoverable tenants with the number of assigned users."""
        member_count = (
            select(UserRecord.tenant_id, func.count().label("member_count"))
            .group_by(UserRecord.tenant_id)
            .subquery()
        )
        result = await self.session.execute(
            select(Tenant, func.coalesce(member_count.c.member_count, 0))
            .outerjoin(member_count, member_count.c.tenant_id == Tenant.id)
            .where(
                Tenant.is_discoverable == True,  # noqa: E712
                Tenant.is_active == True,  # noqa: E712
            )
            .order_by(Tenant.name)
        )
        return [(tenant, int(count)) for tenant, count in result.all()]

    async def list_all(
        self, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[Tenant], str | None, bool]:
        query = select(Tenant)
        return await self.paginate(query, cursor, limit, Tenant.created_at)
