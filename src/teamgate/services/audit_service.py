"""Audit trail for membership, role and tenant changes."""

import contextlib
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.teamgate.core.audit_context import get_audit_context
from src.teamgate.core.logging import get_logger
from src.teamgate.models import AuditAction, AuditLog, AuditStatus
from src.teamgate.repositories.audit import AuditLogRepository

logger = get_logger(__name__)


class AuditService:
    """Records audit entries after the business transaction has committed.

    Fire-and-forget: a failure to write an entry is logged and never raised.
    """

    def __init__(self, audit_repo: AuditLogRepository, session: AsyncSession):
        self.audit_repo = audit_repo
        self.session = session

    async def log_action(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: UUID | None = None,
        user_id: UUID | None = None,
        tenant_id: UUID | None = None,
        changes: dict[str, Any] | None = None,
        status: AuditStatus = AuditStatus.SUCCESS,
        error_message: str | None = None,
    ) -> AuditLog | None:
        try:
            ctx = get_audit_context()
            audit_log = AuditLog(
                tenant_id=tenant_id,
                user_id=user_id,
                action=action.value,
                entity_type=entity_type,
                entity_id=entity_id,
                changes=changes,
                ip_address=ctx.ip_address if ctx else None,
                user_agent=ctx.user_agent if ctx else None,
                request_id=ctx.request_id if ctx else None,
                status=status.value,
                error_message=error_message[:1000] if error_message else None,
            )
            self.audit_repo.add(audit_log)
            await self.session.commit()

            logger.debug(
                "Audit log recorded",
                action=audit_log.action,
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id else None,
            )
            return audit_log
        except Exception as e:
            logger.warning(
                "Failed to record audit log",
                action=action.value,
                entity_type=entity_type,
                error=str(e),
            )
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return None

    async def list_logs(
        self,
        tenant_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
    ) -> tuple[list[AuditLog], str | None, bool]:
        return await self.audit_repo.list_by_tenant(
            tenant_id=tenant_id, cursor=cursor, limit=limit, action=action
        )

    async def list_entity_history(
        self, tenant_id: UUID, entity_type: str, entity_id: UUID
    ) -> list[AuditLog]:
        """Entries for one entity within the tenant, oldest first."""
        return await self.audit_repo.list_by_entity(entity_type, entity_id, tenant_id=tenant_id)
