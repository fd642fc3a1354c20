"""Tests for role parsing and capability checks."""

import pytest

from storefront_engine.auth.roles import Capability, Role, has_capability, parse_role


class TestParseRole:
    @pytest.mark.parametrize("value,expected", [
        ("merchant", Role.MERCHANT),
        ("admin", Role.ADMIN),
        ("super_admin", Role.SUPER_ADMIN),
    ])
    def test_known(self, value, expected):
        assert parse_role(value) is expected

    @pytest.mark.parametrize("value", [None, "", "Super_Admin", "root", "superadmin"])
    def test_unknown(self, value):
        assert parse_role(value) is None


class TestCapabilities:
    def test_only_super_admin_manages_platform(self):
        assert has_capability(Role.SUPER_ADMIN, Capability.MANAGE_PLATFORM)
        assert not has_capability(Role.ADMIN, Capability.MANAGE_PLATFORM)
        assert not has_capability(Role.MERCHANT, Capability.MANAGE_PLATFORM)

    def test_regular_roles_hold_no_capability(self):
        for role in (Role.MERCHANT, Role.ADMIN):
            assert not any(has_capability(role, cap) for cap in Capability)

    def test_no_role_no_capability(self):
        assert not has_capability(None, Capability.MANAGE_PLATFORM)
