"""Tests for the authorization guard and the context it hands to business code."""

from uuid import uuid4

import pytest
from sqlmodel import select

from src.teamgate.core.catalog import MEMBERSHIPS_APPROVE
from src.teamgate.core.exceptions import (
    Forbidden,
    IncompleteProvisioning,
    NoTenantAssigned,
    Unauthenticated,
)
from src.teamgate.core.security import issue_credential
from src.teamgate.models import Role
from src.teamgate.services import (
    AuthorizationGuard,
    IdentityResolver,
    PermissionEvaluator,
    TeamContextResolver,
)
from tests.factories import RoleFactory, TenantFactory, UserFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def guard(store, mock_redis_unavailable) -> AuthorizationGuard:
    return AuthorizationGuard(
        IdentityResolver(store), TeamContextResolver(store), PermissionEvaluator(store)
    )


@pytest.fixture
def member(store):
    """A recruiter in an active tenant with an approved membership."""
    tenant = TenantFactory.build()
    role = RoleFactory.build(tenant_id=tenant.id)
    user = UserFactory.member(tenant.id, role.id)
    store.get_user.return_value = user
    store.get_tenant.return_value = tenant
    store.get_role.return_value = role
    store.membership_statuses.return_value = ["approved"]
    store.role_permission_keys.return_value = frozenset({"candidate.read"})
    return user


def credential(user) -> str:
    return issue_credential(user.id, user.email)


class TestOrdering:
    async def test_unauthenticated_before_anything(self, guard, store):
        with pytest.raises(Unauthenticated):
            await guard.authorize(None, "candidate.read")
        store.get_user.assert_not_awaited()

    async def test_missing_user_record(self, guard, store):
        with pytest.raises(IncompleteProvisioning):
            await guard.authorize(issue_credential(uuid4(), "x@example.com"), "candidate.read")
        store.get_tenant.assert_not_awaited()

    async def test_no_tenant_before_permission(self, guard, store):
        user = UserFactory.build()
        store.get_user.return_value = user

        with pytest.raises(NoTenantAssigned):
            await guard.authorize(credential(user), "candidate.read")
        store.role_permission_keys.assert_not_awaited()

    async def test_pending_membership_denied_before_permission(self, guard, store, member):
        store.membership_statuses.return_value = ["pending"]

        with pytest.raises(Forbidden):
            await guard.authorize(credential(member), "candidate.read")
        store.role_permission_keys.assert_not_awaited()

    async def test_pending_membership_denied_without_key(self, guard, store, member):
        store.membership_statuses.return_value = ["pending"]

        with pytest.raises(Forbidden):
            await guard.authorize(credential(member))


class TestDecision:
    async def test_granted(self, guard, member):
        ctx = await guard.authorize(credential(member), "candidate.read")

        assert ctx.user_id == member.id
        assert ctx.tenant_id == member.tenant_id
        assert ctx.permission_key == "candidate.read"
        assert not ctx.is_master_admin

    async def test_missing_key(self, guard, member):
        with pytest.raises(Forbidden):
            await guard.authorize(credential(member), "candidate.delete")

    async def test_admin_key_needs_admin_role(self, guard, member):
        with pytest.raises(Forbidden):
            await guard.authorize(credential(member), MEMBERSHIPS_APPROVE)

    async def test_cross_tenant_request(self, guard, member):
        with pytest.raises(Forbidden):
            await guard.authorize(credential(member), "candidate.read", uuid4())

    async def test_master_admin_any_key_without_tenant(self, guard, store):
        master = UserFactory.master_admin()
        store.get_user.return_value = master

        ctx = await guard.authorize(credential(master), "anything.at.all")

        assert ctx.is_master_admin
        assert ctx.tenant_id is None


class TestAuthorizedContext:
    async def test_scope_filters_to_tenant(self, guard, member):
        ctx = await guard.authorize(credential(member), "candidate.read")

        query = ctx.scope(select(Role), Role.tenant_id)

        assert "WHERE roles.tenant_id" in str(query)

    async def test_unscoped_only_for_master_admin(self, guard, store):
        master = UserFactory.master_admin()
        store.get_user.return_value = master
        ctx = await guard.authorize(credential(master))

        query = select(Role)

        assert ctx.scope(query, Role.tenant_id) is query
        with pytest.raises(Forbidden):
            ctx.require_tenant()

    async def test_require_tenant(self, guard, member):
        ctx = await guard.authorize(credential(member))

        assert ctx.require_tenant() == member.tenant_id
