"""
System Setting Model
Key/value platform configuration editable by administrators
"""

from enum import Enum

from sqlalchemy import Column, Integer, String, Text

from relief_api.models.base import BaseModel


class SystemSettingType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


class SystemSetting(BaseModel):
    __tablename__ = "system_settings"

    key = Column(String(100), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=False)
    type = Column(String(16), nullable=False, default=SystemSettingType.STRING.value)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True, index=True)
    updated_by = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<SystemSetting(key='{self.key}', type='{self.type}')>"
