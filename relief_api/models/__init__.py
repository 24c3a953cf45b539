"""
SQLAlchemy Models Package
"""

from relief_api.models.audit_log import AuditAction, AuditLog, ResourceType
from relief_api.models.system_setting import SystemSetting, SystemSettingType
from relief_api.models.user import User

__all__ = [
    "AuditAction",
    "AuditLog",
    "ResourceType",
    "SystemSetting",
    "SystemSettingType",
    "User",
]
