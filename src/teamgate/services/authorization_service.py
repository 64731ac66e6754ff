"""Authorization guard: the single entry point business operations call.

Order is fixed: identity, then team context, then membership approval, then
the permission key. Business code only ever sees an ``AuthorizedContext``.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from src.teamgate.core.exceptions import Forbidden
from src.teamgate.core.logging import bind_user_context, get_logger
from src.teamgate.services.identity_service import Identity, IdentityResolver
from src.teamgate.services.permission_service import PermissionEvaluator
from src.teamgate.services.team_context_service import TeamContext, TeamContextResolver

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthorizedContext:
    """Proof that every check passed for ``permission_key``."""

    team: TeamContext
    permission_key: str | None

    @property
    def identity(self) -> Identity:
        return self.team.identity

    @property
    def user_id(self) -> UUID:
        return self.team.identity.user_id

    @property
    def tenant_id(self) -> UUID | None:
        return self.team.tenant_id

    @property
    def is_master_admin(self) -> bool:
        return self.team.is_master_admin

    def scope(self, query: Any, tenant_column: Any) -> Any:
        """Filter ``query`` to the effective tenant.

        Only a master admin without a selected tenant gets an unfiltered query.
        """
        if self.team.tenant_id is None:
            if not self.team.is_master_admin:
                raise Forbidden("Unscoped query outside master admin context")
            return query
        return query.where(tenant_column == self.team.tenant_id)

    def require_tenant(self) -> UUID:
        """The effective tenant. Raises Forbidden when none is selected."""
        if self.team.tenant_id is None:
            raise Forbidden("Operation requires a selected tenant")
        return self.team.tenant_id


class AuthorizationGuard:
    def __init__(
        self,
        identity_resolver: IdentityResolver,
        context_resolver: TeamContextResolver,
        evaluator: PermissionEvaluator,
    ):
        self.identity_resolver = identity_resolver
        self.context_resolver = context_resolver
        self.evaluator = evaluator

    async def authorize(
        self,
        credential: str | None,
        permission_key: str | None = None,
        requested_tenant_id: UUID | None = None,
    ) -> AuthorizedContext:
        """Run every check and return the context, or raise a typed AccessError.

        With ``permission_key=None`` only identity, context and membership
        approval are checked.
        """
        identity = await self.identity_resolver.resolve(credential)
        team = await self.context_resolver.resolve(identity, requested_tenant_id)
        bind_user_context(identity.user_id, team.tenant_id, identity.email)
        return await self.authorize_context(team, permission_key)

    async def authorize_context(
        self, team: TeamContext, permission_key: str | None = None
    ) -> AuthorizedContext:
        identity = team.identity
        if not team.is_master_admin and not team.membership_approved:
            logger.info(
                "Denied: membership not approved",
                user_id=str(identity.user_id),
                tenant_id=str(team.tenant_id),
            )
            raise Forbidden("Membership not approved")

        if permission_key is not None and not await self.evaluator.check(
            identity, permission_key
        ):
            logger.info(
                "Denied: missing permission",
                user_id=str(identity.user_id),
                tenant_id=str(team.tenant_id),
                permission=permission_key,
            )
            raise Forbidden(f"Missing permission {permission_key}")

        return AuthorizedContext(team=team, permission_key=permission_key)
