"""
System Setting Repository
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.models.system_setting import SystemSetting
from relief_api.repositories.base import CRUDBase
from relief_api.schemas.system_setting import SystemSettingCreate, SystemSettingUpdate


class SystemSettingRepository(CRUDBase[SystemSetting, SystemSettingCreate, SystemSettingUpdate]):
    async def list_all(self, db: AsyncSession) -> list[SystemSetting]:
        query = select(SystemSetting).order_by(SystemSetting.category.asc(), SystemSetting.key.asc())
        return list((await db.execute(query)).scalars().all())

    async def list_by_category(self, db: AsyncSession, category: str) -> list[SystemSetting]:
        query = (
            select(SystemSetting)
            .where(SystemSetting.category == category)
            .order_by(SystemSetting.key.asc())
        )
        return list((await db.execute(query)).scalars().all())

    async def get_by_key(self, db: AsyncSession, key: str) -> Optional[SystemSetting]:
        result = await db.execute(select(SystemSetting).where(SystemSetting.key == key))
        return result.scalar_one_or_none()

    async def get_by_keys(self, db: AsyncSession, keys: list[str]) -> dict[str, SystemSetting]:
        if not keys:
            return {}
        result = await db.execute(select(SystemSetting).where(SystemSetting.key.in_(keys)))
        return {setting.key: setting for setting in result.scalars().all()}


system_setting_repository = SystemSettingRepository(SystemSetting)
