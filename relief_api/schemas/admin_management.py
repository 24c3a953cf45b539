"""
System administrator management schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from relief_api.core.rbac import Permission, UserRole, UserStatus, normalize_permissions
from relief_api.schemas.base import BaseResponseSchema, BaseSchema

CONTACT_NUMBER_PATTERN = r"^[+]?[\d\s\-()]+$"


class SystemAdminResponse(BaseResponseSchema):
    username: str
    contact_number: Optional[str] = None
    role: UserRole
    status: UserStatus
    permissions: list[str] = Field(default_factory=list)


class SystemAdminCreate(BaseSchema):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    contact_number: Optional[str] = Field(default=None, max_length=50, pattern=CONTACT_NUMBER_PATTERN)


class SystemAdminUpdate(BaseSchema):
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    contact_number: Optional[str] = Field(default=None, max_length=50, pattern=CONTACT_NUMBER_PATTERN)
    status: Optional[UserStatus] = None


class StatusUpdate(BaseSchema):
    status: UserStatus


class PermissionsUpdate(BaseSchema):
    permissions: list[str] = Field(..., min_length=1)

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, values: list[str]) -> list[str]:
        return [p.value for p in normalize_permissions(values)]

    def as_permissions(self) -> list[Permission]:
        return [Permission(p) for p in self.permissions]
