"""Repository exports."""

from src.teamgate.repositories.audit import AuditLogRepository
from src.teamgate.repositories.base import BaseRepository
from src.teamgate.repositories.membership import MembershipRepository
from src.teamgate.repositories.role import (
    PermissionRepository,
    RoleRepository,
    RoleTemplateRepository,
)
from src.teamgate.repositories.tenant import TenantRepository
from src.teamgate.repositories.trusted import AuthorizationStore
from src.teamgate.repositories.user import UserRepository

__all__ = [
    "AuditLogRepository",
    "AuthorizationStore",
    "BaseRepository",
    "MembershipRepository",
    "PermissionRepository",
    "RoleRepository",
    "RoleTemplateRepository",
    "TenantRepository",
    "UserRepository",
]
