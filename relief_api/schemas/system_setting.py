"""
System settings schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from relief_api.models.system_setting import SystemSettingType
from relief_api.schemas.base import BaseResponseSchema, BaseSchema


class SystemSettingResponse(BaseResponseSchema):
    key: str
    value: str
    type: SystemSettingType
    description: Optional[str] = None
    category: Optional[str] = None
    updated_by: Optional[int] = None


class SystemSettingCreate(BaseSchema):
    key: str = Field(..., min_length=1, max_length=100)
    value: str
    type: SystemSettingType = SystemSettingType.STRING
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=50)


class SystemSettingUpdate(BaseSchema):
    value: Optional[str] = None
    type: Optional[SystemSettingType] = None
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=50)


class BulkSettingItem(BaseSchema):
    key: str = Field(..., min_length=1)
    value: str


class BulkSettingsUpdate(BaseSchema):
    settings: list[BulkSettingItem] = Field(..., min_length=1)
