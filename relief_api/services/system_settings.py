"""
System Settings Service
"""

from __future__ import annotations

import json

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.core.exceptions import NotFoundError, ValidationFailedError
from relief_api.models.system_setting import SystemSetting, SystemSettingType
from relief_api.repositories.system_setting import system_setting_repository
from relief_api.schemas.system_setting import (
    BulkSettingsUpdate,
    SystemSettingResponse,
    SystemSettingUpdate,
)

logger = structlog.get_logger()

NOT_FOUND_MESSAGE = "System setting not found"


def validate_setting_value(setting_type: SystemSettingType, value: str) -> None:
    """Raise ValidationFailedError when value does not parse as setting_type"""
    setting_type = SystemSettingType(setting_type)

    if setting_type == SystemSettingType.NUMBER:
        try:
            float(value)
        except ValueError:
            raise ValidationFailedError(f"Value for a number setting must be numeric: {value}")
    elif setting_type == SystemSettingType.BOOLEAN:
        if value.lower() not in ("true", "false"):
            raise ValidationFailedError("Value for a boolean setting must be 'true' or 'false'")
    elif setting_type == SystemSettingType.JSON:
        try:
            json.loads(value)
        except ValueError:
            raise ValidationFailedError("Value for a json setting must be valid JSON")


class SystemSettingsService:
    def __init__(self, repository=system_setting_repository):
        self.repository = repository

    def _to_response(self, setting: SystemSetting) -> SystemSettingResponse:
        return SystemSettingResponse.model_validate(setting)

    async def _get_by_key(self, db: AsyncSession, key: str) -> SystemSetting:
        setting = await self.repository.get_by_key(db, key)
        if not setting:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return setting

    async def get_all_settings(self, db: AsyncSession) -> list[SystemSettingResponse]:
        return [self._to_response(s) for s in await self.repository.list_all(db)]

    async def get_settings_by_category(self, db: AsyncSession, category: str) -> list[SystemSettingResponse]:
        return [self._to_response(s) for s in await self.repository.list_by_category(db, category)]

    async def get_setting_by_key(self, db: AsyncSession, key: str) -> SystemSettingResponse:
        return self._to_response(await self._get_by_key(db, key))

    async def update_setting(
        self,
        db: AsyncSession,
        key: str,
        data: SystemSettingUpdate,
        updated_by: int,
    ) -> SystemSettingResponse:
        setting = await self._get_by_key(db, key)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        new_type = changes.get("type", setting.type)
        new_value = changes.get("value", setting.value)
        if "type" in changes or "value" in changes:
            validate_setting_value(new_type, new_value)

        changes["updated_by"] = updated_by
        setting = await self.repository.update(db, db_obj=setting, obj_in=changes)

        logger.info("System setting updated", key=key, updated_by=updated_by)
        return self._to_response(setting)

    async def bulk_update_settings(
        self,
        db: AsyncSession,
        data: BulkSettingsUpdate,
        updated_by: int,
    ) -> list[SystemSettingResponse]:
        """All keys must exist and all values must be valid, or nothing is written"""
        keys = [item.key for item in data.settings]
        existing = await self.repository.get_by_keys(db, keys)

        missing = [key for key in keys if key not in existing]
        if missing:
            raise NotFoundError(f"System settings not found: {', '.join(missing)}")

        for item in data.settings:
            validate_setting_value(existing[item.key].type, item.value)

        for item in data.settings:
            await self.repository.update(
                db,
                db_obj=existing[item.key],
                obj_in={"value": item.value, "updated_by": updated_by},
                commit=False,
            )
        await db.commit()

        logger.info("System settings bulk updated", count=len(data.settings), updated_by=updated_by)
        # Repeated keys collapse to a single entry
        return [self._to_response(existing[key]) for key in dict.fromkeys(keys)]


system_settings_service = SystemSettingsService()
