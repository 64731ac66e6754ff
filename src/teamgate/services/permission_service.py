"""Permission evaluation.

Allow-list semantics: a key is granted only by master-admin status, by the
tenant-admin flag for the membership-management keys, or by a link between
the caller's role and the key. A NULL role has no permissions.
"""

from uuid import UUID

from src.teamgate.core import cache
from src.teamgate.core.catalog import TENANT_ADMIN_KEYS
from src.teamgate.core.logging import get_logger
from src.teamgate.repositories.trusted import AuthorizationStore
from src.teamgate.services.identity_service import Identity

logger = get_logger(__name__)


class PermissionEvaluator:
    def __init__(self, store: AuthorizationStore):
        self.store = store

    async def check(self, identity: Identity, key: str) -> bool:
        if identity.is_master_admin:
            return True
        # Decided by the admin flag only; links are never consulted for these
        if key in TENANT_ADMIN_KEYS:
            return identity.is_tenant_admin
        return key in await self.role_permissions(identity.role_id)

    async def check_any(self, identity: Identity, keys: list[str]) -> bool:
        for key in keys:
            if await self.check(identity, key):
                return True
        return False

    async def check_all(self, identity: Identity, keys: list[str]) -> bool:
        for key in keys:
            if not await self.check(identity, key):
                return False
        return True

    async def role_permissions(self, role_id: UUID | None) -> frozenset[str]:
        """Permission keys linked to a role, served from the per-role cache."""
        if role_id is None:
            return frozenset()

        cached = await cache.get_role_permissions(role_id)
        if cached is not None:
            return cached

        keys = await self.store.role_permission_keys(role_id)
        await cache.set_role_permissions(role_id, keys)
        return keys

    async def permissions_for(self, identity: Identity) -> frozenset[str]:
        """Effective keys for display. Master admins report the wildcard ``*``."""
        if identity.is_master_admin:
            return frozenset({"*"})
        keys = await self.role_permissions(identity.role_id)
        if identity.is_tenant_admin:
            keys = keys | TENANT_ADMIN_KEYS
        return keys

    async def invalidate_role(self, role_id: UUID) -> None:
        await cache.invalidate_role_permissions(role_id)
