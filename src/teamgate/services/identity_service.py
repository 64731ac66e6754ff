"""Identity resolution: credential -> Account -> Identity.

Fails closed. There is no branch that continues with a substitute or
elevated identity when a lookup fails.
"""

from dataclasses import dataclass
from uuid import UUID

from src.teamgate.core.exceptions import (
    Inconsistent,
    IncompleteProvisioning,
    Unauthenticated,
)
from src.teamgate.core.logging import get_logger
from src.teamgate.core.security import Account, account_from_credential
from src.teamgate.models import UserRecord
from src.teamgate.repositories.trusted import AuthorizationStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """The canonical, validated view of the caller's user record."""

    user_id: UUID
    email: str
    tenant_id: UUID | None
    role_id: UUID | None
    is_master_admin: bool
    is_tenant_admin: bool


def validate_user_shape(user: UserRecord) -> None:
    """Reject user records whose tenant/role/master-admin combination is invalid.

    Raises:
        Inconsistent: master admin bound to a tenant or role, or only one
            of tenant_id / role_id set.
    """
    if user.is_master_admin:
        if user.tenant_id is not None or user.role_id is not None:
            raise Inconsistent(f"Master admin {user.id} has a tenant or role assigned")
        return
    if (user.tenant_id is None) != (user.role_id is None):
        raise Inconsistent(f"User {user.id} has only one of tenant_id/role_id set")


class IdentityResolver:
    def __init__(self, store: AuthorizationStore):
        self.store = store

    def resolve_account(self, credential: str | None) -> Account:
        """Verify the credential only. Raises Unauthenticated."""
        account = account_from_credential(credential)
        if account is None:
            raise Unauthenticated("Missing or invalid credential")
        return account

    async def resolve(self, credential: str | None) -> Identity:
        account = self.resolve_account(credential)
        return await self.identity_for(account)

    async def identity_for(self, account: Account) -> Identity:
        user = await self.store.get_user(account.id)
        if user is None:
            raise IncompleteProvisioning(f"No user record for account {account.id}")
        if not user.is_active:
            raise Unauthenticated(f"User {user.id} is deactivated")

        validate_user_shape(user)

        is_tenant_admin = False
        if user.role_id is not None:
            role = await self.store.get_role(user.role_id)
            if role is None:
                raise Inconsistent(f"User {user.id} references missing role {user.role_id}")
            if role.tenant_id != user.tenant_id:
                raise Inconsistent(f"User {user.id} holds a role of another tenant")
            is_tenant_admin = role.is_tenant_admin

        return Identity(
            user_id=user.id,
            email=user.email,
            tenant_id=user.tenant_id,
            role_id=user.role_id,
            is_master_admin=user.is_master_admin,
            is_tenant_admin=is_tenant_admin,
        )
