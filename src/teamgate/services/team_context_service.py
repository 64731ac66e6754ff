"""Effective tenant scope for a resolved identity."""

from dataclasses import dataclass
from uuid import UUID

from src.teamgate.core.exceptions import Forbidden, Inconsistent, NoTenantAssigned, NotFound
from src.teamgate.core.logging import get_logger
from src.teamgate.models import MembershipStatus
from src.teamgate.repositories.trusted import AuthorizationStore
from src.teamgate.services.identity_service import Identity

logger = get_logger(__name__)


@dataclass(frozen=True)
class TeamContext:
    identity: Identity
    # None only for a master admin who has not selected a tenant
    tenant_id: UUID | None
    is_master_admin: bool
    is_tenant_admin: bool
    membership_approved: bool

    def administers(self, tenant_id: UUID) -> bool:
        """True if this context may manage memberships and roles of ``tenant_id``."""
        if self.is_master_admin:
            return True
        return self.is_tenant_admin and self.tenant_id == tenant_id


class TeamContextResolver:
    def __init__(self, store: AuthorizationStore):
        self.store = store

    async def resolve(
        self, identity: Identity, requested_tenant_id: UUID | None = None
    ) -> TeamContext:
        """Derive the tenant the caller may operate on.

        Raises:
            NotFound: master admin selected a tenant that does not exist.
            Forbidden: non-master requested another tenant, or their tenant
                is inactive or missing.
            NoTenantAssigned: non-master without a tenant.
            Inconsistent: membership rows contradict the user record.
        """
        if identity.is_master_admin:
            if requested_tenant_id is not None:
                tenant = await self.store.get_tenant(requested_tenant_id)
                if tenant is None:
                    raise NotFound("Tenant not found")
            return TeamContext(
                identity=identity,
                tenant_id=requested_tenant_id,
                is_master_admin=True,
                is_tenant_admin=False,
                membership_approved=True,
            )

        if requested_tenant_id is not None and requested_tenant_id != identity.tenant_id:
            logger.warning(
                "Cross-tenant request denied",
                user_id=str(identity.user_id),
                requested_tenant_id=str(requested_tenant_id),
            )
            raise Forbidden("Requested tenant differs from the user's tenant")

        tenant_id = identity.tenant_id
        if tenant_id is None:
            # An approved membership must have moved the user into its tenant
            if await self.store.approved_tenant_ids(identity.user_id):
                raise Inconsistent(
                    f"User {identity.user_id} has an approved membership but no tenant"
                )
            raise NoTenantAssigned(f"User {identity.user_id} has no tenant")

        tenant = await self.store.get_tenant(tenant_id)
        if tenant is None:
            raise Forbidden(f"Tenant {tenant_id} does not exist")
        if not tenant.is_active:
            raise Forbidden(f"Tenant {tenant_id} is inactive")

        approved = await self._membership_approved(identity, tenant_id)
        return TeamContext(
            identity=identity,
            tenant_id=tenant_id,
            is_master_admin=False,
            is_tenant_admin=identity.is_tenant_admin,
            membership_approved=approved,
        )

    async def _membership_approved(self, identity: Identity, tenant_id: UUID) -> bool:
        statuses = [
            MembershipStatus.parse(raw)
            for raw in await self.store.membership_statuses(identity.user_id, tenant_id)
        ]
        # Users assigned before memberships were tracked have no rows
        if not statuses:
            return True

        return MembershipStatus.APPROVED in statuses
