"""Roles and the permission catalog."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamgate.core.catalog import (
    PERMISSIONS_BY_MODULE,
    ROLE_TEMPLATES,
    TENANT_ADMIN_KEYS,
)
from src.teamgate.core.exceptions import (
    AccessError,
    Conflict,
    Forbidden,
    Inconsistent,
    InvalidRequest,
    NotFound,
)
from src.teamgate.core.logging import get_logger
from src.teamgate.models import (
    AuditAction,
    Permission,
    Role,
    RoleTemplate,
    UserRecord,
)
from src.teamgate.repositories.membership import MembershipRepository
from src.teamgate.repositories.role import (
    PermissionRepository,
    RoleRepository,
    RoleTemplateRepository,
)
from src.teamgate.repositories.user import UserRepository
from src.teamgate.services.audit_service import AuditService
from src.teamgate.services.authorization_service import AuthorizedContext
from src.teamgate.services.permission_service import PermissionEvaluator

logger = get_logger(__name__)


class RoleService:
    def __init__(
        self,
        role_repo: RoleRepository,
        permission_repo: PermissionRepository,
        template_repo: RoleTemplateRepository,
        user_repo: UserRepository,
        membership_repo: MembershipRepository,
        evaluator: PermissionEvaluator,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.role_repo = role_repo
        self.permission_repo = permission_repo
        self.template_repo = template_repo
        self.user_repo = user_repo
        self.membership_repo = membership_repo
        self.evaluator = evaluator
        self.audit_service = audit_service
        self.session = session

    async def seed_catalog(self) -> None:
        """Insert missing permissions, system templates and their links. Idempotent.

        Tenant-admin roles are locked against editing, so roles cloned from a
        tenant-admin template are brought in line with the template here.
        """
        synced: list[UUID] = []
        try:
            by_key = {p.key: p for p in await self.permission_repo.list_all()}
            for module, perms in PERMISSIONS_BY_MODULE.items():
                for key, description in perms:
                    if key not in by_key:
                        permission = Permission(key=key, description=description, module=module)
                        self.permission_repo.add(permission)
                        by_key[key] = permission
            await self.session.flush()

            for name, description, is_tenant_admin, keys in ROLE_TEMPLATES:
                template = await self.template_repo.get_by_name(name)
                if template is None:
                    template = RoleTemplate(
                        name=name,
                        description=description,
                        is_tenant_admin=is_tenant_admin,
                    )
                    self.template_repo.add(template)
                    await self.session.flush()
                permission_ids = [by_key[key].id for key in keys]
                await self.template_repo.link_permissions(template.id, permission_ids)
                if template.is_tenant_admin:
                    synced.extend(await self._sync_admin_roles(template.id, permission_ids))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        for role_id in synced:
            await self.evaluator.invalidate_role(role_id)
        logger.info(
            "Permission catalog seeded",
            permissions=len(by_key),
            templates=len(ROLE_TEMPLATES),
            admin_roles_synced=len(synced),
        )

    async def _sync_admin_roles(
        self, template_id: UUID, permission_ids: list[UUID]
    ) -> list[UUID]:
        """Replace links of cloned admin roles that drifted from the template (no commit)."""
        wanted = set(permission_ids)
        changed: list[UUID] = []
        for role in await self.role_repo.list_admin_roles_from_template(template_id):
            if await self.role_repo.permission_ids(role.id) != wanted:
                await self.role_repo.replace_permissions(role.id, permission_ids, granted_by=None)
                changed.append(role.id)
        return changed

    async def clone_templates(self, tenant_id: UUID) -> list[Role]:
        """Create the tenant's roles from the system templates (no commit).

        Raises:
            Inconsistent: there are no templates, or none of them is a
                tenant-admin template. The caller must roll back.
        """
        templates = await self.template_repo.list_system_templates()
        if not templates:
            raise Inconsistent("No role templates available to clone")
        if not any(t.is_tenant_admin for t in templates):
            raise Inconsistent("Role templates define no tenant-admin role")

        pairs: list[tuple[RoleTemplate, Role]] = []
        for template in templates:
            role = Role(
                tenant_id=tenant_id,
                name=template.name,
                description=template.description,
                is_tenant_admin=template.is_tenant_admin,
                is_custom=False,
                template_id=template.id,
            )
            self.role_repo.add(role)
            pairs.append((template, role))
        await self.session.flush()

        for template, role in pairs:
            permission_ids = await self.template_repo.permission_ids(template.id)
            await self.role_repo.replace_permissions(role.id, permission_ids, granted_by=None)
        await self.session.flush()
        return [role for _, role in pairs]

    async def list_roles(self, ctx: AuthorizedContext) -> list[tuple[Role, list[str]]]:
        tenant_id = ctx.require_tenant()
        roles = await self.role_repo.list_by_tenant(tenant_id)
        keys = await self.role_repo.permission_keys_by_role([r.id for r in roles])
        return [(role, keys[role.id]) for role in roles]

    async def list_catalog(self) -> dict[str, list[Permission]]:
        grouped: dict[str, list[Permission]] = {}
        for permission in await self.permission_repo.list_all():
            grouped.setdefault(permission.module, []).append(permission)
        return grouped

    async def _resolve_keys(self, keys: list[str]) -> list[Permission]:
        admin_only = sorted(set(keys) & TENANT_ADMIN_KEYS)
        if admin_only:
            raise InvalidRequest(
                f"Keys reserved for the tenant-admin role: {', '.join(admin_only)}"
            )
        permissions = await self.permission_repo.get_by_keys(sorted(set(keys)))
        unknown = sorted(set(keys) - {p.key for p in permissions})
        if unknown:
            raise InvalidRequest(f"Unknown permission keys: {', '.join(unknown)}")
        return permissions

    async def _get_role(self, ctx: AuthorizedContext, role_id: UUID) -> Role:
        role = await self.role_repo.get_in_tenant(role_id, ctx.require_tenant())
        if role is None:
            raise NotFound("Role not found")
        return role

    async def create_role(
        self,
        ctx: AuthorizedContext,
        name: str,
        description: str | None,
        permission_keys: list[str],
    ) -> tuple[Role, list[str]]:
        """Create a custom, non-admin role in the caller's tenant."""
        tenant_id = ctx.require_tenant()
        name = name.strip()
        if not name:
            raise InvalidRequest("Role name is required")

        try:
            if await self.role_repo.get_by_name(tenant_id, name) is not None:
                raise Conflict("A role with this name already exists")
            permissions = await self._resolve_keys(permission_keys)

            role = Role(
                tenant_id=tenant_id,
                name=name,
                description=description,
                is_tenant_admin=False,
                is_custom=True,
            )
            self.role_repo.add(role)
            await self.session.flush()
            await self.role_repo.replace_permissions(
                role.id, [p.id for p in permissions], granted_by=ctx.user_id
            )
            await self.session.commit()
        except AccessError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            raise Conflict("A role with this name already exists") from e
        except Exception:
            await self.session.rollback()
            raise

        keys = sorted(p.key for p in permissions)
        logger.info("Role created", tenant_id=str(tenant_id), role_id=str(role.id), name=name)
        await self.audit_service.log_action(
            AuditAction.ROLE_CREATE,
            entity_type="role",
            entity_id=role.id,
            user_id=ctx.user_id,
            tenant_id=tenant_id,
            changes={"name": name, "permissions": keys},
        )
        return role, keys

    async def get_role(self, ctx: AuthorizedContext, role_id: UUID) -> tuple[Role, list[str]]:
        role = await self._get_role(ctx, role_id)
        return role, await self.role_repo.permission_keys(role.id)

    async def update_role(
        self,
        ctx: AuthorizedContext,
        role_id: UUID,
        name: str | None = None,
        description: str | None = None,
    ) -> tuple[Role, list[str]]:
        """Rename a role or change its description. Permissions are untouched."""
        role = await self._get_role(ctx, role_id)

        changes: dict[str, object] = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise InvalidRequest("Role name cannot be empty")
            if name != role.name:
                changes["name"] = name
        if description is not None and description != role.description:
            changes["description"] = description

        try:
            if "name" in changes:
                if await self.role_repo.get_by_name(role.tenant_id, name) is not None:
                    raise Conflict("A role with this name already exists")
            for field, value in changes.items():
                setattr(role, field, value)
            await self.session.commit()
        except AccessError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            raise Conflict("A role with this name already exists") from e
        except Exception:
            await self.session.rollback()
            raise

        keys = await self.role_repo.permission_keys(role.id)
        if changes:
            logger.info(
                "Role updated",
                tenant_id=str(role.tenant_id),
                role_id=str(role.id),
                fields=sorted(changes),
            )
            await self.audit_service.log_action(
                AuditAction.ROLE_UPDATE,
                entity_type="role",
                entity_id=role.id,
                user_id=ctx.user_id,
                tenant_id=role.tenant_id,
                changes=changes,
            )
        return role, keys

    async def update_role_permissions(
        self, ctx: AuthorizedContext, role_id: UUID, permission_keys: list[str]
    ) -> tuple[Role, list[str]]:
        """Replace a role's permission links and drop its cached set."""
        role = await self._get_role(ctx, role_id)
        if role.is_tenant_admin:
            raise Forbidden("Tenant admin role permissions cannot be modified")

        try:
            previous = await self.role_repo.permission_keys(role.id)
            permissions = await self._resolve_keys(permission_keys)
            await self.role_repo.replace_permissions(
                role.id, [p.id for p in permissions], granted_by=ctx.user_id
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.evaluator.invalidate_role(role.id)
        keys = sorted(p.key for p in permissions)
        logger.info(
            "Role permissions updated",
            tenant_id=str(role.tenant_id),
            role_id=str(role.id),
            added=sorted(set(keys) - set(previous)),
            removed=sorted(set(previous) - set(keys)),
        )
        await self.audit_service.log_action(
            AuditAction.ROLE_PERMISSIONS_UPDATE,
            entity_type="role",
            entity_id=role.id,
            user_id=ctx.user_id,
            tenant_id=role.tenant_id,
            changes={"before": previous, "after": keys},
        )
        return role, keys

    async def delete_role(self, ctx: AuthorizedContext, role_id: UUID) -> None:
        """Delete a custom role that no user holds."""
        role = await self._get_role(ctx, role_id)
        if role.is_tenant_admin:
            raise Forbidden("Tenant admin role cannot be deleted")
        if not role.is_custom:
            raise Conflict("Roles created from templates cannot be deleted")

        try:
            if await self.user_repo.count_by_role(role.id) > 0:
                raise Conflict("Role is assigned to users")
            await self.membership_repo.clear_requested_role(role.id)
            await self.role_repo.delete(role)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.evaluator.invalidate_role(role.id)
        logger.info("Role deleted", tenant_id=str(role.tenant_id), role_id=str(role.id))
        await self.audit_service.log_action(
            AuditAction.ROLE_DELETE,
            entity_type="role",
            entity_id=role.id,
            user_id=ctx.user_id,
            tenant_id=role.tenant_id,
            changes={"name": role.name},
        )

    async def list_members(self, ctx: AuthorizedContext) -> list[UserRecord]:
        return await self.user_repo.list_by_tenant(ctx.require_tenant())

    async def assign_member_role(
        self, ctx: AuthorizedContext, user_id: UUID, role_id: UUID
    ) -> UserRecord:
        """Change the role of a member of the caller's tenant.

        Tenant admins may not change other tenant admins. The last tenant
        admin cannot give up the admin role.
        """
        tenant_id = ctx.require_tenant()
        target = await self.user_repo.get_by_id(user_id)
        if target is None or target.tenant_id != tenant_id:
            raise NotFound("Member not found")
        if target.is_master_admin:
            raise Forbidden("Master admins are not tenant members")

        role = await self._get_role(ctx, role_id)
        current = await self.role_repo.get_by_id(target.role_id) if target.role_id else None
        target_is_admin = current is not None and current.is_tenant_admin

        if not ctx.is_master_admin and target_is_admin and target.id != ctx.user_id:
            raise Forbidden("Tenant admins cannot manage other tenant admins")

        try:
            if target_is_admin and not role.is_tenant_admin and current is not None:
                if await self.user_repo.count_by_role(current.id) <= 1:
                    raise Conflict("A tenant must keep at least one tenant admin")
            if not await self.user_repo.set_role(target.id, tenant_id, role.id):
                raise Conflict("Member left the tenant")
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(target)
        logger.info(
            "Member role changed",
            tenant_id=str(tenant_id),
            user_id=str(target.id),
            role_id=str(role.id),
            changed_by=str(ctx.user_id),
        )
        await self.audit_service.log_action(
            AuditAction.MEMBER_ROLE_CHANGE,
            entity_type="user",
            entity_id=target.id,
            user_id=ctx.user_id,
            tenant_id=tenant_id,
            changes={
                "before": str(current.id) if current else None,
                "after": str(role.id),
            },
        )
        return target
