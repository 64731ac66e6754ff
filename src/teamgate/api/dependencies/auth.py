"""Authorization dependencies.

Every route obtains its caller through one of these. Tenant-scoped routes
use ``require_permission``, which runs the full guard before the handler.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header

from src.teamgate.api.dependencies.services import (
    AuthorizationGuardDep,
    IdentityResolverDep,
)
from src.teamgate.core.exceptions import Forbidden, InvalidRequest
from src.teamgate.core.logging import bind_user_context
from src.teamgate.core.security import Account
from src.teamgate.services import AuthorizedContext, Identity


def get_credential(
    authorization: Annotated[str | None, Header()] = None,
) -> str | None:
    """Bearer token from the Authorization header, or None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[7:].strip() or None


def get_requested_tenant_id(
    x_tenant_id: Annotated[str | None, Header()] = None,
) -> UUID | None:
    if not x_tenant_id:
        return None
    try:
        return UUID(x_tenant_id)
    except ValueError as e:
        raise InvalidRequest("X-Tenant-ID must be a UUID") from e


Credential = Annotated[str | None, Depends(get_credential)]
RequestedTenantId = Annotated[UUID | None, Depends(get_requested_tenant_id)]


def get_current_account(
    credential: Credential, identity_resolver: IdentityResolverDep
) -> Account:
    """Verified account, for onboarding routes that run before a user record exists."""
    return identity_resolver.resolve_account(credential)


async def get_current_identity(
    credential: Credential, identity_resolver: IdentityResolverDep
) -> Identity:
    """Resolved identity without tenant checks (self-service routes)."""
    identity = await identity_resolver.resolve(credential)
    bind_user_context(identity.user_id, identity.tenant_id, identity.email)
    return identity


async def get_authorized_context(
    credential: Credential,
    requested_tenant_id: RequestedTenantId,
    guard: AuthorizationGuardDep,
) -> AuthorizedContext:
    """Identity, team context and approved membership; no permission key."""
    return await guard.authorize(credential, None, requested_tenant_id)


def require_permission(
    permission_key: str,
) -> Callable[..., Awaitable[AuthorizedContext]]:
    """Build a dependency that authorizes the caller for ``permission_key``."""

    async def dependency(
        credential: Credential,
        requested_tenant_id: RequestedTenantId,
        guard: AuthorizationGuardDep,
    ) -> AuthorizedContext:
        return await guard.authorize(credential, permission_key, requested_tenant_id)

    return dependency


async def require_master_admin(
    ctx: Annotated[AuthorizedContext, Depends(get_authorized_context)],
) -> AuthorizedContext:
    if not ctx.is_master_admin:
        raise Forbidden("Master admin required")
    return ctx


CurrentAccount = Annotated[Account, Depends(get_current_account)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
Authorized = Annotated[AuthorizedContext, Depends(get_authorized_context)]
MasterAdmin = Annotated[AuthorizedContext, Depends(require_master_admin)]
