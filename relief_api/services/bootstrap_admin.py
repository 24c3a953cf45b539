"""
Bootstrap admin creation service.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.core.config import settings
from relief_api.core.rbac import UserRole, UserStatus
from relief_api.core.security import get_password_hash
from relief_api.models.user import User
from relief_api.repositories.user import user_repository

logger = structlog.get_logger()


async def ensure_bootstrap_admin_exists(db: AsyncSession) -> User:
    username = settings.BOOTSTRAP_ADMIN_USERNAME.strip()

    existing = await user_repository.get_by_username(db, username)
    if existing:
        logger.info("Bootstrap admin already exists", username=username, user_id=existing.id)
        return existing

    bootstrap_user = User(
        username=username,
        hashed_password=get_password_hash(settings.BOOTSTRAP_ADMIN_PASSWORD),
        role=UserRole.ADMIN.value,
        status=UserStatus.ACTIVE.value,
        # ADMIN access is implicit, nothing to enumerate
        permissions=[],
    )

    db.add(bootstrap_user)
    await db.commit()

    logger.info("Bootstrap admin created", username=username, user_id=bootstrap_user.id)
    return bootstrap_user
