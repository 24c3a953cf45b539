"""
Audit Log Model
Append-only record of privileged actions
"""

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, Text, Index

from relief_api.core.database import Base
from relief_api.models.base import JSONType, utcnow


class AuditAction(str, Enum):
    SYSTEM_ADMIN_CREATED = "SYSTEM_ADMIN_CREATED"
    SYSTEM_ADMIN_UPDATED = "SYSTEM_ADMIN_UPDATED"
    SYSTEM_ADMIN_DELETED = "SYSTEM_ADMIN_DELETED"
    PERMISSIONS_ASSIGNED = "PERMISSIONS_ASSIGNED"
    PERMISSIONS_REVOKED = "PERMISSIONS_REVOKED"
    SYSTEM_SETTING_UPDATED = "SYSTEM_SETTING_UPDATED"
    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    VOLUNTEER_CLUB_CREATED = "VOLUNTEER_CLUB_CREATED"
    VOLUNTEER_CLUB_UPDATED = "VOLUNTEER_CLUB_UPDATED"
    VOLUNTEER_CLUB_DELETED = "VOLUNTEER_CLUB_DELETED"
    CONTENT_MODERATED = "CONTENT_MODERATED"


class ResourceType:
    """Resource type labels stored on audit entries"""
    SYSTEM_ADMINISTRATOR = "system_administrator"
    SYSTEM_SETTING = "system_setting"
    USER = "user"
    VOLUNTEER_CLUB = "volunteer_club"
    HELP_REQUEST = "help_request"
    DONATION = "donation"
    CAMP = "camp"
    MEMBERSHIP = "membership"
    ITEM = "item"


class AuditLog(Base):
    """Audit log entry. Rows are inserted once and never updated."""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True, index=True)
    action = Column(String(64), nullable=False, index=True)
    resource_type = Column(String(64), nullable=True, index=True)
    resource_id = Column(String(255), nullable=True)
    details = Column(JSONType, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    __table_args__ = (
        Index('ix_audit_log_resource', 'resource_type', 'resource_id'),
    )

    def __repr__(self):
        return f"<AuditLog(action='{self.action}', user_id={self.user_id})>"
