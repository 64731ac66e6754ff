"""Repository for TeamMembership entity."""

from typing import Any, cast
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.engine import CursorResult
from sqlmodel import select

from src.teamgate.models import MembershipStatus, TeamMembership
from src.teamgate.repositories.base import BaseRepository


class MembershipRepository(BaseRepository[TeamMembership]):
    model = TeamMembership

    async def get_fresh(self, membership_id: UUID) -> TeamMembership | None:
        """Read bypassing the session's identity map."""
        result = await self.session.execute(
            select(TeamMembership)
            .where(TeamMembership.id == membership_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: UUID) -> list[TeamMembership]:
        result = await self.session.execute(
            select(TeamMembership)
            .where(TeamMembership.user_id == user_id)
            .order_by(TeamMembership.requested_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def get_active(self, user_id: UUID, tenant_id: UUID) -> TeamMembership | None:
        """The pending or approved row for (user, tenant), if any."""
        result = await self.session.execute(
            select(TeamMembership).where(
                TeamMembership.user_id == user_id,
                TeamMembership.tenant_id == tenant_id,
                TeamMembership.status != MembershipStatus.REJECTED.value,
            )
        )
        return result.scalars().first()

    async def list_pending(
        self,
        tenant_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[TeamMembership], str | None, bool]:
        query = select(TeamMembership).where(
            TeamMembership.tenant_id == tenant_id,
            TeamMembership.status == MembershipStatus.PENDING.value,
        )
        return await self.paginate(query, cursor, limit, TeamMembership.requested_at)

    def create_membership(
        self,
        user_id: UUID,
        tenant_id: UUID,
        status: MembershipStatus = MembershipStatus.PENDING,
        **fields: Any,
    ) -> TeamMembership:
        """Create a new membership (add to session, no commit)."""
        membership = TeamMembership(
            user_id=user_id,
            tenant_id=tenant_id,
            status=status.value,
            **fields,
        )
        self.session.add(membership)
        return membership

    async def transition_from_pending(
        self,
        membership_id: UUID,
        to_status: MembershipStatus,
        **values: Any,
    ) -> bool:
        """Compare-and-set ``pending -> to_status``.

        Returns False if the row no longer is pending, i.e. another writer won.
        """
        stmt = (
            update(TeamMembership)
            .where(
                TeamMembership.id == membership_id,  # type: ignore[arg-type]
                TeamMembership.status == MembershipStatus.PENDING.value,  # type: ignore[arg-type]
            )
            .values(status=to_status.value, **values)
        )
        result = await self.session.execute(stmt)
        return cast(CursorResult[Any], result).rowcount == 1

    async def clear_requested_role(self, role_id: UUID) -> None:
        await self.session.execute(
            update(TeamMembership)
            .where(TeamMembership.requested_role_id == role_id)  # type: ignore[arg-type]
            .values(requested_role_id=None)
        )

    async def delete_for_user(self, user_id: UUID) -> int:
        result = await self.session.execute(
            delete(TeamMembership).where(TeamMembership.user_id == user_id)  # type: ignore[arg-type]
        )
        return cast(CursorResult[Any], result).rowcount
