from uuid import UUID

from pydantic import BaseModel, Field


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)
    permissions: list[str] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class RolePermissionsUpdate(BaseModel):
    permissions: list[str]


class RoleRead(BaseModel):
    id: UUID
    tenant_id: UUID
    name: str
    description: str | None = None
    is_tenant_admin: bool
    is_custom: bool
    permissions: list[str] = []


class PermissionRead(BaseModel):
    key: str
    description: str | None = None
    module: str

    model_config = {"from_attributes": True}


class PermissionCatalogRead(BaseModel):
    modules: dict[str, list[PermissionRead]]
    tenant_admin_keys: list[str] = Field(
        description="Keys decided by the tenant-admin flag, not by role permissions."
    )


class PermissionCheckRead(BaseModel):
    key: str
    allowed: bool


class MemberRoleUpdate(BaseModel):
    role_id: UUID


class MemberRead(BaseModel):
    id: UUID
    email: str
    full_name: str | None = None
    role_id: UUID | None = None

    model_config = {"from_attributes": True}
