"""Unit test fixtures: an in-memory stand-in for the authorization store."""

from collections.abc import Callable
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.teamgate.repositories.trusted import AuthorizationStore
from src.teamgate.services import Identity


@pytest.fixture
def store() -> AsyncMock:
    """AuthorizationStore mock; every lookup misses unless a test sets it."""
    mock = AsyncMock(spec=AuthorizationStore)
    mock.get_user.return_value = None
    mock.get_tenant.return_value = None
    mock.get_role.return_value = None
    mock.role_permission_keys.return_value = frozenset()
    mock.membership_statuses.return_value = []
    mock.approved_tenant_ids.return_value = []
    return mock


@pytest.fixture
def make_identity() -> Callable[..., Identity]:
    def _make(**overrides) -> Identity:
        values = {
            "user_id": uuid4(),
            "email": "member@example.com",
            "tenant_id": uuid4(),
            "role_id": uuid4(),
            "is_master_admin": False,
            "is_tenant_admin": False,
        }
        values.update(overrides)
        return Identity(**values)

    return _make
