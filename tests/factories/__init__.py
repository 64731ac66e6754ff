"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, TenantFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.role import RoleFactory
from tests.factories.tenant import TenantFactory
from tests.factories.user import TeamMembershipFactory, UserFactory

__all__ = [
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    "RoleFactory",
    "TenantFactory",
    "TeamMembershipFactory",
    "UserFactory",
]
