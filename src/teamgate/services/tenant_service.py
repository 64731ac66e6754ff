"""Tenant provisioning, discovery and settings."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.teamgate.core.exceptions import Forbidden, Inconsistent, InvalidRequest, NotFound
from src.teamgate.core.logging import get_logger
from src.teamgate.models import AuditAction, Role, Tenant
from src.teamgate.models.base import utc_now
from src.teamgate.repositories.tenant import TenantRepository
from src.teamgate.services.audit_service import AuditService
from src.teamgate.services.authorization_service import AuthorizedContext
from src.teamgate.services.role_service import RoleService

logger = get_logger(__name__)


class TenantService:
    def __init__(
        self,
        tenant_repo: TenantRepository,
        role_service: RoleService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.tenant_repo = tenant_repo
        self.role_service = role_service
        self.audit_service = audit_service
        self.session = session

    async def provision(
        self,
        name: str,
        description: str | None,
        is_discoverable: bool,
        created_by: UUID,
    ) -> tuple[Tenant, Role]:
        """Create a tenant and clone its roles (no commit).

        Returns the tenant and its tenant-admin role. Any failure leaves the
        caller to roll back, so no tenant persists without roles.
        """
        name = name.strip()
        if not name:
            raise InvalidRequest("Tenant name is required")

        tenant = Tenant(
            name=name,
            description=description,
            is_discoverable=is_discoverable,
            created_by=created_by,
        )
        self.tenant_repo.add(tenant)
        await self.session.flush()

        roles = await self.role_service.clone_templates(tenant.id)
        admin_role = next((r for r in roles if r.is_tenant_admin), None)
        if admin_role is None:
            raise Inconsistent(f"Tenant {tenant.id} was cloned without a tenant-admin role")
        return tenant, admin_role

    async def create_as_master(
        self,
        ctx: AuthorizedContext,
        name: str,
        description: str | None = None,
        is_discoverable: bool = False,
    ) -> Tenant:
        """Master admin creates a tenant. No membership is created for the master."""
        if not ctx.is_master_admin:
            raise Forbidden("Only master admins can create tenants directly")

        try:
            tenant, _ = await self.provision(name, description, is_discoverable, ctx.user_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Tenant created by master admin", tenant_id=str(tenant.id), name=tenant.name)
        await self.audit_service.log_action(
            AuditAction.TENANT_CREATE,
            entity_type="tenant",
            entity_id=tenant.id,
            user_id=ctx.user_id,
            tenant_id=tenant.id,
            changes={"name": tenant.name},
        )
        return tenant

    async def list_discoverable(self) -> list[tuple[Tenant, int]]:
        return await self.tenant_repo.list_discoverable()

    async def list_all(
        self, ctx: AuthorizedContext, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[Tenant], str | None, bool]:
        if not ctx.is_master_admin:
            raise Forbidden("Only master admins can list all tenants")
        return await self.tenant_repo.list_all(cursor=cursor, limit=limit)

    async def update_current(
        self,
        ctx: AuthorizedContext,
        name: str | None = None,
        description: str | None = None,
        is_discoverable: bool | None = None,
    ) -> Tenant:
        tenant_id = ctx.require_tenant()
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise NotFound("Tenant not found")

        changes: dict[str, object] = {}
        if name is not None:
            if not name.strip():
                raise InvalidRequest("Tenant name cannot be empty")
            changes["name"] = name.strip()
        if description is not None:
            changes["description"] = description
        if is_discoverable is not None:
            changes["is_discoverable"] = is_discoverable

        try:
            for field, value in changes.items():
                setattr(tenant, field, value)
            tenant.updated_at = utc_now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Tenant updated", tenant_id=str(tenant_id), fields=sorted(changes))
        await self.audit_service.log_action(
            AuditAction.TENANT_UPDATE,
            entity_type="tenant",
            entity_id=tenant_id,
            user_id=ctx.user_id,
            tenant_id=tenant_id,
            changes=changes,
        )
        return tenant
