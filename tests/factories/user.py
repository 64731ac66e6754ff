"""User record and membership factories for test data generation."""

from polyfactory import Use

from src.teamgate.models import MembershipStatus, TeamMembership, UserRecord
from tests.factories.base import BaseFactory, generate_uuid, short_suffix, utc_now


class UserFactory(BaseFactory):
    """Users default to the onboarding shape: no tenant, no role."""

    __model__ = UserRecord

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{short_suffix()}@example.com")
    full_name = "Test User"
    tenant_id = None
    role_id = None
    is_master_admin = False
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def master_admin(cls, **kwargs):
        return cls.build(
            is_master_admin=True,
            full_name=kwargs.pop("full_name", "Master Admin"),
            **kwargs,
        )

    @classmethod
    def member(cls, tenant_id, role_id, **kwargs):
        return cls.build(tenant_id=tenant_id, role_id=role_id, **kwargs)

    @classmethod
    def inactive(cls, **kwargs):
        return cls.build(is_active=False, **kwargs)


class TeamMembershipFactory(BaseFactory):
    __model__ = TeamMembership

    # FK fields - must be set explicitly
    id = Use(generate_uuid)
    user_id = None
    tenant_id = None
    status = MembershipStatus.PENDING.value
    requested_role_id = None
    message = None
    requested_at = Use(utc_now)
    approved_by = None
    approved_at = None
    rejected_by = None
    rejected_at = None
    rejection_reason = None

    @classmethod
    def approved(cls, approved_by, **kwargs):
        return cls.build(
            status=MembershipStatus.APPROVED.value,
            approved_by=approved_by,
            approved_at=utc_now(),
            **kwargs,
        )

    @classmethod
    def rejected(cls, rejected_by, **kwargs):
        return cls.build(
            status=MembershipStatus.REJECTED.value,
            rejected_by=rejected_by,
            rejected_at=utc_now(),
            rejection_reason=kwargs.pop("rejection_reason", "Not a fit"),
            **kwargs,
        )
