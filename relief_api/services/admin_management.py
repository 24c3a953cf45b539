"""
Admin Management Service
Business logic for managing system administrator accounts.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from relief_api.core.rbac import Permission, UserRole, UserStatus
from relief_api.core.security import get_password_hash
from relief_api.models.user import User
from relief_api.repositories.user import user_repository
from relief_api.schemas.admin_management import (
    SystemAdminCreate,
    SystemAdminResponse,
    SystemAdminUpdate,
)

logger = structlog.get_logger()

NOT_FOUND_MESSAGE = "System administrator not found"


class AdminManagementService:
    def __init__(self, repository=user_repository):
        self.repository = repository

    def _to_response(self, user: User) -> SystemAdminResponse:
        return SystemAdminResponse.model_validate(user)

    async def _get_system_admin(self, db: AsyncSession, admin_id: int) -> User:
        user = await self.repository.get(db, id=admin_id)
        if not user:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        if user.role != UserRole.SYSTEM_ADMINISTRATOR.value:
            raise ValidationFailedError("User is not a system administrator")
        return user

    async def _ensure_username_free(self, db: AsyncSession, username: str, exclude_id: int | None = None) -> None:
        existing = await self.repository.get_by_username(db, username)
        if existing and existing.id != exclude_id:
            raise ConflictError("Username already exists")

    async def list_system_admins(
        self,
        db: AsyncSession,
        *,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[SystemAdminResponse], int]:
        users, total = await self.repository.find_by_role(
            db,
            UserRole.SYSTEM_ADMINISTRATOR,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return [self._to_response(user) for user in users], total

    async def get_system_admin(self, db: AsyncSession, admin_id: int) -> SystemAdminResponse:
        return self._to_response(await self._get_system_admin(db, admin_id))

    async def create_system_admin(self, db: AsyncSession, data: SystemAdminCreate) -> SystemAdminResponse:
        username = data.username.strip()
        await self._ensure_username_free(db, username)

        try:
            user = await self.repository.create(
                db,
                obj_in={
                    "username": username,
                    "hashed_password": get_password_hash(data.password),
                    "contact_number": data.contact_number,
                    "role": UserRole.SYSTEM_ADMINISTRATOR.value,
                    "status": UserStatus.ACTIVE.value,
                    "permissions": [],
                },
            )
        except IntegrityError:
            # Lost a race with a concurrent create of the same username
            raise ConflictError("Username already exists")

        logger.info("System administrator created", user_id=user.id, username=username)
        return self._to_response(user)

    async def update_system_admin(
        self,
        db: AsyncSession,
        admin_id: int,
        data: SystemAdminUpdate,
        acting_user_id: int,
    ) -> tuple[SystemAdminResponse, dict[str, Any]]:
        """
        Update username, contact number or status.

        Returns the updated admin and the applied changes.
        """
        user = await self._get_system_admin(db, admin_id)

        if admin_id == acting_user_id and data.status == UserStatus.DISABLED.value:
            raise ValidationFailedError("Cannot disable your own account")

        changes: dict[str, Any] = {}
        if data.username:
            username = data.username.strip()
            await self._ensure_username_free(db, username, exclude_id=admin_id)
            changes["username"] = username
        if "contact_number" in data.model_fields_set:
            changes["contact_number"] = data.contact_number
        if data.status is not None:
            changes["status"] = data.status

        try:
            user = await self.repository.update(db, db_obj=user, obj_in=changes)
        except IntegrityError:
            raise ConflictError("Username already exists")

        logger.info("System administrator updated", user_id=admin_id, fields=sorted(changes))
        return self._to_response(user), changes

    async def update_permissions(
        self,
        db: AsyncSession,
        admin_id: int,
        permissions: list[Permission],
        acting_user_id: int,
    ) -> SystemAdminResponse:
        user = await self._get_system_admin(db, admin_id)

        if admin_id == acting_user_id and not permissions:
            raise ValidationFailedError("Cannot remove all permissions from your own account")

        unique = list(dict.fromkeys(p.value for p in permissions))
        user = await self.repository.update(db, db_obj=user, obj_in={"permissions": unique})

        logger.info("System administrator permissions updated", user_id=admin_id, permissions=unique)
        return self._to_response(user)

    async def update_status(
        self,
        db: AsyncSession,
        admin_id: int,
        status: UserStatus,
        acting_user_id: int,
    ) -> SystemAdminResponse:
        user = await self._get_system_admin(db, admin_id)
        status = UserStatus(status)

        if admin_id == acting_user_id and status == UserStatus.DISABLED:
            raise ValidationFailedError("Cannot disable your own account")

        user = await self.repository.update(db, db_obj=user, obj_in={"status": status.value})

        logger.info("System administrator status updated", user_id=admin_id, status=status.value)
        return self._to_response(user)

    async def delete_system_admin(self, db: AsyncSession, admin_id: int, acting_user_id: int) -> None:
        """Soft delete: the account is disabled, not removed"""
        user = await self._get_system_admin(db, admin_id)

        if admin_id == acting_user_id:
            raise ValidationFailedError("Cannot delete your own account")

        await self.repository.update(db, db_obj=user, obj_in={"status": UserStatus.DISABLED.value})
        logger.info("System administrator deleted", user_id=admin_id)


admin_management_service = AdminManagementService()
