"""Repository for UserRecord entity."""

from typing import Any, cast
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.engine import CursorResult
from sqlmodel import func, select

from src.teamgate.models import UserRecord
from src.teamgate.models.base import utc_now
from src.teamgate.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserRecord]):
    model = UserRecord

    async def get_by_email(self, email: str) -> UserRecord | None:
        result = await self.session.execute(
            select(UserRecord).where(UserRecord.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def list_by_tenant(self, tenant_id: UUID) -> list[UserRecord]:
        result = await self.session.execute(
            select(UserRecord)
            .where(UserRecord.tenant_id == tenant_id)
            .order_by(UserRecord.email)
        )
        return list(result.scalars().all())

    async def count_by_role(self, role_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(UserRecord).where(UserRecord.role_id == role_id)
        )
        return result.scalar_one()

    async def assign(
        self,
        user_id: UUID,
        tenant_id: UUID,
        role_id: UUID,
        expected_tenant_id: UUID | None = None,
    ) -> bool:
        """Set tenant and role in one statement.

        Only applies while the user's tenant is NULL or ``expected_tenant_id``.
        Returns False when the row was not updated.
        """
        condition = UserRecord.tenant_id.is_(None)  # type: ignore[union-attr]
        if expected_tenant_id is not None:
            condition = condition | (UserRecord.tenant_id == expected_tenant_id)
        stmt = (
            update(UserRecord)
            .where(UserRecord.id == user_id, condition)  # type: ignore[arg-type]
            .values(tenant_id=tenant_id, role_id=role_id, updated_at=utc_now())
        )
        result = await self.session.execute(stmt)
        return cast(CursorResult[Any], result).rowcount == 1

    async def set_role(self, user_id: UUID, tenant_id: UUID, role_id: UUID) -> bool:
        """Change the role of a user who already belongs to ``tenant_id``."""
        stmt = (
            update(UserRecord)
            .where(UserRecord.id == user_id, UserRecord.tenant_id == tenant_id)  # type: ignore[arg-type]
            .values(role_id=role_id, updated_at=utc_now())
        )
        result = await self.session.execute(stmt)
        return cast(CursorResult[Any], result).rowcount == 1

    async def list_all(
        self, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[UserRecord], str | None, bool]:
        return await self.paginate(select(UserRecord), cursor, limit, UserRecord.created_at)

    async def set_master_admin(
        self, user_id: UUID, is_master_admin: bool, expected_tenant_id: UUID | None
    ) -> bool:
        """Flip the master-admin flag and detach the user from any tenant.

        Only applies while the flag still has the opposite value and the user
        is still in ``expected_tenant_id``. Returns False otherwise.
        """
        if expected_tenant_id is None:
            tenant_condition = UserRecord.tenant_id.is_(None)  # type: ignore[union-attr]
        else:
            tenant_condition = UserRecord.tenant_id == expected_tenant_id
        stmt = (
            update(UserRecord)
            .where(
                UserRecord.id == user_id,  # type: ignore[arg-type]
                UserRecord.is_master_admin == (not is_master_admin),  # type: ignore[arg-type]
                tenant_condition,  # type: ignore[arg-type]
            )
            .values(
                is_master_admin=is_master_admin,
                tenant_id=None,
                role_id=None,
                updated_at=utc_now(),
            )
        )
        result = await self.session.execute(stmt)
        return cast(CursorResult[Any], result).rowcount == 1
