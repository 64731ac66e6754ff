"""Master admin management of user records."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.teamgate.core.exceptions import Conflict, Forbidden, NotFound
from src.teamgate.core.logging import get_logger
from src.teamgate.models import AuditAction, UserRecord
from src.teamgate.repositories.membership import MembershipRepository
from src.teamgate.repositories.role import RoleRepository
from src.teamgate.repositories.user import UserRepository
from src.teamgate.services.audit_service import AuditService
from src.teamgate.services.authorization_service import AuthorizedContext

logger = get_logger(__name__)


class UserAdminService:
    def __init__(
        self,
        user_repo: UserRepository,
        role_repo: RoleRepository,
        membership_repo: MembershipRepository,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.membership_repo = membership_repo
        self.audit_service = audit_service
        self.session = session

    async def list_users(
        self, ctx: AuthorizedContext, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[UserRecord], str | None, bool]:
        if not ctx.is_master_admin:
            raise Forbidden("Only master admins can list users")
        return await self.user_repo.list_all(cursor=cursor, limit=limit)

    async def set_master_admin(
        self, ctx: AuthorizedContext, user_id: UUID, is_master_admin: bool
    ) -> UserRecord:
        """Grant or revoke the master-admin flag of another user.

        Both directions leave the user without tenant and role: a promoted
        user becomes a master admin, a demoted one starts onboarding again.
        Promotion also drops the user's memberships, which master admins
        cannot hold.
        The last tenant admin of a tenant cannot be promoted away.
        Setting the flag to its current value changes nothing.
        """
        if not ctx.is_master_admin:
            raise Forbidden("Only master admins can change master admin status")
        if user_id == ctx.user_id:
            raise Conflict("Master admins cannot change their own status")

        target = await self.user_repo.get_by_id(user_id)
        if target is None:
            raise NotFound("User not found")
        if target.is_master_admin == is_master_admin:
            return target

        previous_tenant_id = target.tenant_id
        previous_role_id = target.role_id
        try:
            if previous_role_id is not None:
                role = await self.role_repo.get_by_id(previous_role_id)
                if role is not None and role.is_tenant_admin:
                    if await self.user_repo.count_by_role(role.id) <= 1:
                        raise Conflict("A tenant must keep at least one tenant admin")
            if not await self.user_repo.set_master_admin(
                target.id, is_master_admin, expected_tenant_id=previous_tenant_id
            ):
                raise Conflict("User was changed concurrently")
            if is_master_admin:
                await self.membership_repo.delete_for_user(target.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(target)
        logger.info(
            "Master admin status changed",
            user_id=str(target.id),
            is_master_admin=is_master_admin,
            previous_tenant_id=str(previous_tenant_id) if previous_tenant_id else None,
            changed_by=str(ctx.user_id),
        )
        await self.audit_service.log_action(
            AuditAction.USER_MASTER_ADMIN_CHANGE,
            entity_type="user",
            entity_id=target.id,
            user_id=ctx.user_id,
            tenant_id=previous_tenant_id,
            changes={
                "is_master_admin": is_master_admin,
                "previous_tenant_id": str(previous_tenant_id) if previous_tenant_id else None,
                "previous_role_id": str(previous_role_id) if previous_role_id else None,
            },
        )
        return target
