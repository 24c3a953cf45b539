"""
User Model
Accounts for administrators, volunteer clubs and regular users
"""

from sqlalchemy import Column, String, Index

from relief_api.core.rbac import UserRole, UserStatus
from relief_api.models.base import BaseModel, JSONType


class User(BaseModel):
    """User model for authentication and authorization"""
    __tablename__ = "users"

    username = Column(String(50), nullable=False, unique=True, index=True)
    hashed_password = Column(String(128), nullable=False)
    contact_number = Column(String(50), nullable=True)

    # Authorization
    role = Column(String(32), nullable=False, default=UserRole.USER.value, index=True)
    status = Column(String(16), nullable=False, default=UserStatus.ACTIVE.value, index=True)
    # Explicit permissions, only consulted for SYSTEM_ADMINISTRATOR
    permissions = Column(JSONType, default=list, nullable=False)

    __table_args__ = (
        Index('ix_user_role_status', 'role', 'status'),
    )

    def __repr__(self):
        return f"<User(username='{self.username}', role='{self.role}')>"
