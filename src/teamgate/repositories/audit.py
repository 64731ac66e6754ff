"""Repository for AuditLog entity."""

from uuid import UUID

from sqlmodel import select

from src.teamgate.models import AuditLog
from src.teamgate.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def list_by_tenant(
        self,
        tenant_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
    ) -> tuple[list[AuditLog], str | None, bool]:
        query = select(AuditLog).where(AuditLog.tenant_id == tenant_id)
        if action:
            query = query.where(AuditLog.action == action)
        return await self.paginate(query, cursor, limit, AuditLog.created_at)

    async def list_by_entity(
        self, entity_type: str, entity_id: UUID, tenant_id: UUID | None = None
    ) -> list[AuditLog]:
        query = select(AuditLog).where(
            AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id
        )
        if tenant_id is not None:
            query = query.where(AuditLog.tenant_id == tenant_id)
        result = await self.session.execute(query.order_by(AuditLog.created_at))
        return list(result.scalars().all())
