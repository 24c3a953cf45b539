"""
Permission resolver seam.

Identities are built from database rows. A claim-backed resolver for external
issuers can replace it without touching the gates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import structlog

from relief_api.core.rbac import ALL_PERMISSIONS, Identity, Permission, UserRole, UserStatus

logger = structlog.get_logger()


class PermissionResolver(ABC):
    @abstractmethod
    def resolve_identity(self, user: Any, token_claims: dict[str, Any] | None = None) -> Identity:
        raise NotImplementedError


class DBPermissionResolver(PermissionResolver):
    def resolve_identity(self, user: Any, token_claims: dict[str, Any] | None = None) -> Identity:
        stored = list(user.permissions or [])
        unknown = [p for p in stored if p not in ALL_PERMISSIONS]
        if unknown:
            logger.warning("Ignoring unknown stored permissions", user_id=user.id, unknown=unknown)

        return Identity(
            id=user.id,
            role=UserRole(user.role),
            status=UserStatus(user.status),
            permissions=frozenset(Permission(p) for p in stored if p in ALL_PERMISSIONS),
            username=user.username,
        )


permission_resolver = DBPermissionResolver()
