"""
Caller identity schemas.
"""

from typing import Optional

from pydantic import Field

from relief_api.core.rbac import Identity, UserRole, UserStatus, get_user_permissions, is_supreme_role
from relief_api.schemas.base import BaseSchema


class IdentityResponse(BaseSchema):
    id: int
    username: Optional[str] = None
    role: UserRole
    status: UserStatus
    permissions: list[str] = Field(default_factory=list)
    has_full_access: bool = False

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentityResponse":
        return cls(
            id=identity.id,
            username=identity.username,
            role=identity.role,
            status=identity.status,
            permissions=[p.value for p in get_user_permissions(identity)],
            has_full_access=is_supreme_role(identity.role),
        )


class SessionResponse(BaseSchema):
    authenticated: bool
    user: Optional[IdentityResponse] = None
