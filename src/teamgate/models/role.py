"""Roles, role templates and the permission catalog."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.teamgate.models.base import utc_now


class Permission(SQLModel, table=True):
    """An atomic named capability, e.g. ``candidates.create``."""

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    key: str = Field(max_length=100, unique=True, index=True)
    description: str | None = Field(default=None, max_length=255)
    module: str = Field(max_length=50)


class RoleTemplate(SQLModel, table=True):
    """Tenant-independent role shape cloned into every new tenant."""

    __tablename__ = "role_templates"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    description: str | None = Field(default=None, max_length=255)
    is_tenant_admin: bool = Field(default=False)
    # Only system templates are cloned on tenant creation
    is_system: bool = Field(default=True)


class TemplatePermission(SQLModel, table=True):
    __tablename__ = "template_permissions"

    template_id: UUID = Field(foreign_key="role_templates.id", primary_key=True)
    permission_id: UUID = Field(foreign_key="permissions.id", primary_key=True)


class Role(SQLModel, table=True):
    """A permission bundle owned by exactly one tenant."""

    __tablename__ = "roles"
    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_roles_tenant_name"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=255)
    is_tenant_admin: bool = Field(default=False)
    is_custom: bool = Field(default=False)
    template_id: UUID | None = Field(default=None, foreign_key="role_templates.id")
    created_at: datetime = Field(default_factory=utc_now)


class RolePermission(SQLModel, table=True):
    __tablename__ = "role_permissions"

    role_id: UUID = Field(foreign_key="roles.id", primary_key=True)
    permission_id: UUID = Field(foreign_key="permissions.id", primary_key=True)
    granted_by: UUID | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
