"""
User Repository
Database operations for user accounts.
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.core.rbac import UserRole
from relief_api.models.user import User
from relief_api.repositories.base import CRUDBase
from relief_api.schemas.admin_management import SystemAdminCreate, SystemAdminUpdate

logger = structlog.get_logger()


class UserRepository(CRUDBase[User, SystemAdminCreate, SystemAdminUpdate]):
    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username.strip()))
        return result.scalar_one_or_none()

    async def find_by_role(
        self,
        db: AsyncSession,
        role: UserRole,
        *,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[User], int]:
        total = (
            await db.execute(select(func.count(User.id)).where(User.role == role.value))
        ).scalar() or 0

        query = (
            select(User)
            .where(User.role == role.value)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total


user_repository = UserRepository(User)
