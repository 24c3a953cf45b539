"""
RBAC helpers and canonical role/permission definitions for the relief API.

Permission checks are pure predicates: they never raise and treat a missing
identity as "no access".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    SYSTEM_ADMINISTRATOR = "SYSTEM_ADMINISTRATOR"
    VOLUNTEER_CLUB = "VOLUNTEER_CLUB"
    USER = "USER"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DISABLED = "DISABLED"


class Permission(str, Enum):
    MANAGE_USERS = "MANAGE_USERS"
    VIEW_USERS = "VIEW_USERS"
    MANAGE_ADMINS = "MANAGE_ADMINS"
    ASSIGN_PERMISSIONS = "ASSIGN_PERMISSIONS"
    MANAGE_SYSTEM_SETTINGS = "MANAGE_SYSTEM_SETTINGS"
    VIEW_AUDIT_LOGS = "VIEW_AUDIT_LOGS"
    EXPORT_AUDIT_LOGS = "EXPORT_AUDIT_LOGS"
    MANAGE_VOLUNTEER_CLUBS = "MANAGE_VOLUNTEER_CLUBS"
    MODERATE_CONTENT = "MODERATE_CONTENT"


ALL_PERMISSIONS: tuple[str, ...] = tuple(p.value for p in Permission)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, resolved once per request"""

    id: int
    role: UserRole
    status: UserStatus
    permissions: frozenset[Permission] = field(default_factory=frozenset)
    username: Optional[str] = None


def is_supreme_role(role: Optional[UserRole]) -> bool:
    return role == UserRole.ADMIN


def _explicit_permissions(identity: Identity) -> frozenset[Permission]:
    # Only system administrators carry an explicit permission set
    if identity.role != UserRole.SYSTEM_ADMINISTRATOR:
        return frozenset()
    return identity.permissions or frozenset()


def has_permission(identity: Optional[Identity], permission: Permission) -> bool:
    if identity is None:
        return False
    if is_supreme_role(identity.role):
        return True
    return permission in _explicit_permissions(identity)


def has_any_permission(identity: Optional[Identity], permissions: Iterable[Permission]) -> bool:
    if identity is None:
        return False
    if is_supreme_role(identity.role):
        return True
    granted = _explicit_permissions(identity)
    return any(p in granted for p in permissions)


def has_all_permissions(identity: Optional[Identity], permissions: Iterable[Permission]) -> bool:
    if identity is None:
        return False
    if is_supreme_role(identity.role):
        return True
    required = list(permissions)
    if not required:
        return False
    granted = _explicit_permissions(identity)
    return all(p in granted for p in required)


def get_user_permissions(identity: Optional[Identity]) -> list[Permission]:
    """
    Explicit permissions held by the identity.

    ADMIN returns an empty list: its access is implicit, not enumerated.
    """
    if identity is None or is_supreme_role(identity.role):
        return []
    return sorted(_explicit_permissions(identity), key=lambda p: ALL_PERMISSIONS.index(p.value))


def normalize_permissions(requested: Iterable[str]) -> list[Permission]:
    """
    Validate and de-duplicate a requested permission list.

    Order of first appearance is preserved. Raises ValueError naming every
    unknown token.
    """
    requested = [str(getattr(p, "value", p)).strip() for p in requested]

    invalid = [p for p in requested if p not in ALL_PERMISSIONS]
    if invalid:
        raise ValueError(f"Invalid permissions: {', '.join(invalid)}")

    normalized: list[Permission] = []
    for value in requested:
        permission = Permission(value)
        if permission not in normalized:
            normalized.append(permission)
    return normalized
