"""Closed role enumeration and the capability check every guard goes through."""

import enum


class Role(str, enum.Enum):
    MERCHANT = "merchant"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class Capability(str, enum.Enum):
    MANAGE_PLATFORM = "manage_platform"


_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.MERCHANT: frozenset(),
    Role.ADMIN: frozenset(),
    Role.SUPER_ADMIN: frozenset({Capability.MANAGE_PLATFORM}),
}


def parse_role(value: str | None) -> Role | None:
    """Map a stored role string onto the enum; unknown strings map to None."""
    if value is None:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def has_capability(role: Role | None, capability: Capability) -> bool:
    if role is None:
        return False
    return capability in _CAPABILITIES.get(role, frozenset())
