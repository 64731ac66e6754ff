"""Repositories for roles, role templates and the permission catalog."""

from uuid import UUID

from sqlalchemy import delete, insert
from sqlmodel import select

from src.teamgate.models import (
    Permission,
    Role,
    RolePermission,
    RoleTemplate,
    TemplatePermission,
)
from src.teamgate.models.base import utc_now
from src.teamgate.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    model = Permission

    async def list_all(self) -> list[Permission]:
        result = await self.session.execute(
            select(Permission).order_by(Permission.module, Permission.key)
        )
        return list(result.scalars().all())

    async def get_by_keys(self, keys: list[str]) -> list[Permission]:
        if not keys:
            return []
        result = await self.session.execute(
            select(Permission).where(Permission.key.in_(keys))  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())


class RoleTemplateRepository(BaseRepository[RoleTemplate]):
    model = RoleTemplate

    async def get_by_name(self, name: str) -> RoleTemplate | None:
        result = await self.session.execute(
            select(RoleTemplate).where(RoleTemplate.name == name)
        )
        return result.scalar_one_or_none()

    async def list_system_templates(self) -> list[RoleTemplate]:
        result = await self.session.execute(
            select(RoleTemplate)
            .where(RoleTemplate.is_system == True)  # noqa: E712
            .order_by(RoleTemplate.name)
        )
        return list(result.scalars().all())

    async def permission_ids(self, template_id: UUID) -> list[UUID]:
        result = await self.session.execute(
            select(TemplatePermission.permission_id).where(
                TemplatePermission.template_id == template_id
            )
        )
        return list(result.scalars().all())

    async def link_permissions(self, template_id: UUID, permission_ids: list[UUID]) -> None:
        existing = set(await self.permission_ids(template_id))
        for permission_id in permission_ids:
            if permission_id not in existing:
                self.session.add(
                    TemplatePermission(template_id=template_id, permission_id=permission_id)
                )


class RoleRepository(BaseRepository[Role]):
    model = Role

    async def list_by_tenant(self, tenant_id: UUID) -> list[Role]:
        result = await self.session.execute(
            select(Role).where(Role.tenant_id == tenant_id).order_by(Role.name)
        )
        return list(result.scalars().all())

    async def get_in_tenant(self, role_id: UUID, tenant_id: UUID) -> Role | None:
        result = await self.session.execute(
            select(Role).where(Role.id == role_id, Role.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, tenant_id: UUID, name: str) -> Role | None:
        result = await self.session.execute(
            select(Role).where(Role.tenant_id == tenant_id, Role.name == name)
        )
        return result.scalar_one_or_none()

    async def list_admin_roles_from_template(self, template_id: UUID) -> list[Role]:
        """Tenant-admin roles cloned from ``template_id``, across all tenants."""
        result = await self.session.execute(
            select(Role).where(
                Role.template_id == template_id,
                Role.is_tenant_admin == True,  # noqa: E712
            )
        )
        return list(result.scalars().all())

    async def permission_ids(self, role_id: UUID) -> set[UUID]:
        result = await self.session.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        return set(result.scalars().all())

    async def permission_keys(self, role_id: UUID) -> list[str]:
        result = await self.session.execute(
            select(Permission.key)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.key)
        )
        return list(result.scalars().all())

    async def permission_keys_by_role(self, role_ids: list[UUID]) -> dict[UUID, list[str]]:
        keys: dict[UUID, list[str]] = {role_id: [] for role_id in role_ids}
        if not role_ids:
            return keys
        result = await self.session.execute(
            select(RolePermission.role_id, Permission.key)
            .join(Permission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id.in_(role_ids))  # type: ignore[attr-defined]
            .order_by(Permission.key)
        )
        for role_id, key in result.all():
            keys[role_id].append(key)
        return keys

    async def replace_permissions(
        self, role_id: UUID, permission_ids: list[UUID], granted_by: UUID | None
    ) -> None:
        await self.session.execute(
            delete(RolePermission).where(RolePermission.role_id == role_id)  # type: ignore[arg-type]
        )
        if not permission_ids:
            return
        # Bulk insert bypasses the identity map
        now = utc_now()
        await self.session.execute(
            insert(RolePermission),
            [
                {
                    "role_id": role_id,
                    "permission_id": pid,
                    "granted_by": granted_by,
                    "created_at": now,
                }
                for pid in permission_ids
            ],
        )

    async def delete(self, role: Role) -> None:
        await self.session.execute(
            delete(RolePermission).where(RolePermission.role_id == role.id)  # type: ignore[arg-type]
        )
        await self.session.delete(role)
