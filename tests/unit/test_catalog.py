"""Consistency of the permission catalog and system role templates."""

import pytest

from src.teamgate.core.catalog import (
    ALL_PERMISSION_KEYS,
    LOCAL_ADMIN_TEMPLATE,
    ROLE_TEMPLATES,
    ROLES_READ,
    TENANT_ADMIN_KEYS,
    USERS_READ,
)

pytestmark = pytest.mark.unit


def test_keys_are_unique():
    assert len(ALL_PERMISSION_KEYS) == len(set(ALL_PERMISSION_KEYS))


def test_admin_keys_not_grantable_through_catalog():
    assert TENANT_ADMIN_KEYS.isdisjoint(ALL_PERMISSION_KEYS)


def test_templates_reference_catalog_keys_only():
    catalog = set(ALL_PERMISSION_KEYS)
    for name, _, _, keys in ROLE_TEMPLATES:
        assert set(keys) <= catalog, name


def test_exactly_one_admin_template():
    admins = [name for name, _, is_admin, _ in ROLE_TEMPLATES if is_admin]

    assert admins == [LOCAL_ADMIN_TEMPLATE]


def test_local_admin_holds_whole_catalog():
    keys = next(keys for name, _, _, keys in ROLE_TEMPLATES if name == LOCAL_ADMIN_TEMPLATE)

    assert set(keys) == set(ALL_PERMISSION_KEYS)


def test_route_keys_are_in_catalog():
    assert ROLES_READ in ALL_PERMISSION_KEYS
    assert USERS_READ in ALL_PERMISSION_KEYS
