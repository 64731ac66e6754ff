"""Team membership lifecycle.

pending -> approved | rejected. Nothing returns to pending; a rejected user
files a new request, which creates a new row. Approval moves the user into
the tenant with the chosen role in the same transaction as the status
change, and the result is re-read and verified after commit.
"""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamgate.core.exceptions import (
    AccessError,
    Conflict,
    Forbidden,
    Inconsistent,
    InvalidRequest,
    NoTenantAssigned,
    NotFound,
)
from src.teamgate.core.logging import get_logger
from src.teamgate.core.security import Account
from src.teamgate.models import (
    AuditAction,
    MembershipStatus,
    TeamMembership,
    Tenant,
    UserRecord,
)
from src.teamgate.models.base import utc_now
from src.teamgate.repositories.membership import MembershipRepository
from src.teamgate.repositories.role import RoleRepository
from src.teamgate.repositories.tenant import TenantRepository
from src.teamgate.repositories.trusted import AuthorizationStore
from src.teamgate.repositories.user import UserRepository
from src.teamgate.services.audit_service import AuditService
from src.teamgate.services.authorization_service import AuthorizedContext
from src.teamgate.services.identity_service import Identity, validate_user_shape
from src.teamgate.services.tenant_service import TenantService

logger = get_logger(__name__)


@dataclass
class GroupedMemberships:
    pending: list[TeamMembership] = field(default_factory=list)
    approved: list[TeamMembership] = field(default_factory=list)
    rejected: list[TeamMembership] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.pending) + len(self.approved) + len(self.rejected)


def validate_membership_state(membership: TeamMembership) -> MembershipStatus:
    """Check that the decision fields agree with the status.

    Raises:
        Inconsistent: unknown status, or decision fields missing or
            present for the wrong status.
    """
    status = membership.membership_status
    if status is MembershipStatus.APPROVED:
        if membership.approved_at is None or membership.approved_by is None:
            raise Inconsistent(f"Approved membership {membership.id} lacks approval details")
    elif status is MembershipStatus.REJECTED:
        if membership.rejected_at is None:
            raise Inconsistent(f"Rejected membership {membership.id} lacks rejected_at")
    elif membership.approved_at is not None or membership.rejected_at is not None:
        raise Inconsistent(f"Pending membership {membership.id} carries a decision")
    return status


class MembershipService:
    def __init__(
        self,
        membership_repo: MembershipRepository,
        user_repo: UserRepository,
        tenant_repo: TenantRepository,
        role_repo: RoleRepository,
        tenant_service: TenantService,
        store: AuthorizationStore,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.membership_repo = membership_repo
        self.user_repo = user_repo
        self.tenant_repo = tenant_repo
        self.role_repo = role_repo
        self.tenant_service = tenant_service
        self.store = store
        self.audit_service = audit_service
        self.session = session

    async def ensure_user_record(self, account: Account) -> UserRecord:
        """Return the account's user record, creating it in onboarding shape (no commit)."""
        user = await self.user_repo.get_by_id(account.id)
        if user is not None:
            return user

        if await self.user_repo.get_by_email(account.email) is not None:
            raise Conflict("Email already belongs to another user")

        user = UserRecord(id=account.id, email=account.email)
        self.user_repo.add(user)
        await self.session.flush()
        logger.info("User record created", user_id=str(user.id))
        return user

    async def _onboarding_user(self, account: Account) -> UserRecord:
        user = await self.ensure_user_record(account)
        if user.is_master_admin:
            raise Conflict("Master admins are not members of a tenant")
        validate_user_shape(user)
        if user.tenant_id is not None:
            raise Conflict("User already belongs to a tenant")
        return user

    async def request_to_join(
        self,
        account: Account,
        tenant_id: UUID,
        requested_role_id: UUID | None = None,
        message: str | None = None,
    ) -> TeamMembership:
        """File a pending request to join a discoverable tenant.

        The requested role is recorded for the approver and grants nothing.
        Hidden, inactive and unknown tenants all report NotFound.
        """
        try:
            user = await self._onboarding_user(account)

            tenant = await self.tenant_repo.get_by_id(tenant_id)
            if tenant is None or not tenant.is_active or not tenant.is_discoverable:
                raise NotFound("Tenant not found")

            if requested_role_id is not None:
                if await self.role_repo.get_in_tenant(requested_role_id, tenant_id) is None:
                    raise NotFound("Role not found")

            existing = await self.membership_repo.get_active(user.id, tenant_id)
            if existing is not None:
                raise Conflict(f"A {existing.status} membership for this tenant already exists")

            membership = self.membership_repo.create_membership(
                user_id=user.id,
                tenant_id=tenant_id,
                requested_role_id=requested_role_id,
                message=message,
            )
            await self.session.commit()
        except AccessError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            # Lost a race against a concurrent request for the same pair
            await self.session.rollback()
            raise Conflict("A membership for this tenant already exists") from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create membership request", error=str(e))
            raise

        logger.info(
            "Membership requested",
            membership_id=str(membership.id),
            user_id=str(user.id),
            tenant_id=str(tenant_id),
        )
        await self.audit_service.log_action(
            AuditAction.MEMBERSHIP_REQUEST,
            entity_type="membership",
            entity_id=membership.id,
            user_id=user.id,
            tenant_id=tenant_id,
            changes={"requested_role_id": str(requested_role_id) if requested_role_id else None},
        )
        return membership

    async def create_tenant(
        self,
        account: Account,
        name: str,
        description: str | None = None,
        is_discoverable: bool = False,
    ) -> tuple[Tenant, TeamMembership]:
        """Create a tenant and make the creator its approved tenant admin.

        One transaction: tenant, cloned roles, approved membership and the
        creator's tenant/role assignment persist together or not at all.
        """
        try:
            user = await self._onboarding_user(account)
            tenant, admin_role = await self.tenant_service.provision(
                name, description, is_discoverable, created_by=user.id
            )

            now = utc_now()
            membership = self.membership_repo.create_membership(
                user_id=user.id,
                tenant_id=tenant.id,
                status=MembershipStatus.APPROVED,
                requested_role_id=admin_role.id,
                requested_at=now,
                approved_by=user.id,
                approved_at=now,
            )
            if not await self.user_repo.assign(user.id, tenant.id, admin_role.id):
                raise Conflict("User already belongs to a tenant")
            await self.session.commit()
        except AccessError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            raise Conflict("Tenant could not be created") from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create tenant", error=str(e))
            raise

        logger.info(
            "Tenant created",
            tenant_id=str(tenant.id),
            creator_id=str(user.id),
            admin_role_id=str(admin_role.id),
        )
        await self.audit_service.log_action(
            AuditAction.TENANT_CREATE,
            entity_type="tenant",
            entity_id=tenant.id,
            user_id=user.id,
            tenant_id=tenant.id,
            changes={"name": tenant.name, "membership_id": str(membership.id)},
        )
        return tenant, membership

    async def _get_for_decision(
        self, ctx: AuthorizedContext, membership_id: UUID
    ) -> TeamMembership:
        membership = await self.membership_repo.get_by_id(membership_id)
        # Other tenants' memberships are reported as missing
        if membership is None or (
            not ctx.is_master_admin and membership.tenant_id != ctx.tenant_id
        ):
            raise NotFound("Membership not found")
        if not ctx.team.administers(membership.tenant_id):
            raise Forbidden("Tenant admin required")

        status = validate_membership_state(membership)
        if status is not MembershipStatus.PENDING:
            raise Conflict(f"Membership is already {status.value}")
        return membership

    async def approve(
        self, ctx: AuthorizedContext, membership_id: UUID, role_id: UUID
    ) -> TeamMembership:
        """Approve a pending membership and assign ``role_id`` to the user.

        Raises:
            Conflict: not pending anymore (including a concurrent approver),
                or the user joined another tenant meanwhile.
            Inconsistent: the committed state is half-applied.
        """
        membership = await self._get_for_decision(ctx, membership_id)
        tenant_id = membership.tenant_id

        role = await self.role_repo.get_in_tenant(role_id, tenant_id)
        if role is None:
            raise NotFound("Role not found")

        target = await self.user_repo.get_by_id(membership.user_id)
        if target is None:
            raise Inconsistent(f"Membership {membership.id} references a missing user")
        if target.is_master_admin:
            raise Conflict("Master admins cannot be approved into a tenant")
        if target.tenant_id is not None and target.tenant_id != tenant_id:
            raise Conflict("User already belongs to another tenant")

        try:
            if not await self.membership_repo.transition_from_pending(
                membership.id,
                MembershipStatus.APPROVED,
                approved_by=ctx.user_id,
                approved_at=utc_now(),
            ):
                raise Conflict("Membership is no longer pending")
            if not await self.user_repo.assign(
                target.id, tenant_id, role.id, expected_tenant_id=tenant_id
            ):
                raise Conflict("User already belongs to another tenant")
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        approved = await self._verify_approval(membership.id)
        logger.info(
            "Membership approved",
            membership_id=str(approved.id),
            tenant_id=str(tenant_id),
            user_id=str(target.id),
            role_id=str(role.id),
            approved_by=str(ctx.user_id),
        )
        await self.audit_service.log_action(
            AuditAction.MEMBERSHIP_APPROVE,
            entity_type="membership",
            entity_id=approved.id,
            user_id=ctx.user_id,
            tenant_id=tenant_id,
            changes={"user_id": str(target.id), "role_id": str(role.id)},
        )
        return approved

    async def _verify_approval(self, membership_id: UUID) -> TeamMembership:
        membership = await self.membership_repo.get_fresh(membership_id)
        if membership is None:
            raise Inconsistent(f"Approved membership {membership_id} disappeared")
        validate_membership_state(membership)

        user = await self.store.get_user(membership.user_id)
        if (
            user is None
            or user.tenant_id != membership.tenant_id
            or user.role_id is None
            or membership.membership_status is not MembershipStatus.APPROVED
        ):
            raise Inconsistent(f"Approval of membership {membership_id} was not fully applied")
        return membership

    async def reject(
        self, ctx: AuthorizedContext, membership_id: UUID, reason: str
    ) -> TeamMembership:
        """Reject a pending membership. The user's tenant and role stay untouched."""
        reason = (reason or "").strip()
        if not reason:
            raise InvalidRequest("A rejection reason is required")

        membership = await self._get_for_decision(ctx, membership_id)
        try:
            if not await self.membership_repo.transition_from_pending(
                membership.id,
                MembershipStatus.REJECTED,
                rejected_by=ctx.user_id,
                rejected_at=utc_now(),
                rejection_reason=reason,
            ):
                raise Conflict("Membership is no longer pending")
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        rejected = await self.membership_repo.get_fresh(membership.id)
        if rejected is None:
            raise Inconsistent(f"Rejected membership {membership_id} disappeared")
        validate_membership_state(rejected)
        logger.info(
            "Membership rejected",
            membership_id=str(rejected.id),
            tenant_id=str(rejected.tenant_id),
            user_id=str(rejected.user_id),
            rejected_by=str(ctx.user_id),
        )
        await self.audit_service.log_action(
            AuditAction.MEMBERSHIP_REJECT,
            entity_type="membership",
            entity_id=rejected.id,
            user_id=ctx.user_id,
            tenant_id=rejected.tenant_id,
            changes={"reason": reason},
        )
        return rejected

    async def list_my_memberships(self, user_id: UUID) -> GroupedMemberships:
        grouped = GroupedMemberships()
        for membership in await self.membership_repo.list_for_user(user_id):
            status = validate_membership_state(membership)
            getattr(grouped, status.value).append(membership)
        return grouped

    async def list_pending(
        self, ctx: AuthorizedContext, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[TeamMembership], str | None, bool]:
        """Pending queue of the effective tenant.

        Master admins must select a tenant; there is no cross-tenant queue.
        """
        if ctx.tenant_id is None:
            raise NoTenantAssigned("Select a tenant to list its pending memberships")
        if not ctx.team.administers(ctx.tenant_id):
            raise Forbidden("Tenant admin required")
        return await self.membership_repo.list_pending(ctx.tenant_id, cursor, limit)

    async def get_membership(self, identity: Identity, membership_id: UUID) -> TeamMembership:
        """Visible to its owner, a master admin, or an admin of its tenant."""
        membership = await self.membership_repo.get_by_id(membership_id)
        if membership is None:
            raise NotFound("Membership not found")

        visible = (
            membership.user_id == identity.user_id
            or identity.is_master_admin
            or (identity.is_tenant_admin and identity.tenant_id == membership.tenant_id)
        )
        if not visible:
            raise NotFound("Membership not found")
        validate_membership_state(membership)
        return membership
