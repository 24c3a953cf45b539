"""System settings endpoints (admin-only)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.core.database import get_db
from relief_api.core.deps import authenticate, require_admin, require_permission
from relief_api.core.rbac import Identity, Permission
from relief_api.core.responses import success_response
from relief_api.models.audit_log import AuditAction, ResourceType
from relief_api.schemas.system_setting import BulkSettingsUpdate, SystemSettingUpdate
from relief_api.services.audit_log import audit_log_service
from relief_api.services.system_settings import system_settings_service

router = APIRouter(
    dependencies=[
        Depends(authenticate),
        Depends(require_admin()),
        Depends(require_permission(Permission.MANAGE_SYSTEM_SETTINGS)),
    ]
)


@router.get("")
async def list_settings(db: AsyncSession = Depends(get_db)) -> Any:
    settings = await system_settings_service.get_all_settings(db)
    return success_response(settings)


@router.get("/key/{key}")
async def get_setting(key: str, db: AsyncSession = Depends(get_db)) -> Any:
    setting = await system_settings_service.get_setting_by_key(db, key)
    return success_response(setting)


@router.get("/{category}")
async def list_settings_by_category(category: str, db: AsyncSession = Depends(get_db)) -> Any:
    settings = await system_settings_service.get_settings_by_category(db, category)
    return success_response(settings)


@router.post("/bulk")
async def bulk_update_settings(
    bulk_data: BulkSettingsUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    current: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Update several values at once. Unknown keys reject the whole batch."""
    settings = await system_settings_service.bulk_update_settings(db, bulk_data, current.id)

    background_tasks.add_task(
        audit_log_service.log_action,
        AuditAction.SYSTEM_SETTING_UPDATED,
        current.id,
        request,
        ResourceType.SYSTEM_SETTING,
        "bulk",
        {"count": len(bulk_data.settings)},
    )

    return success_response(settings, message="System settings updated successfully")


@router.put("/{key}")
async def update_setting(
    key: str,
    setting_data: SystemSettingUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    current: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    setting = await system_settings_service.update_setting(db, key, setting_data, current.id)

    background_tasks.add_task(
        audit_log_service.log_action,
        AuditAction.SYSTEM_SETTING_UPDATED,
        current.id,
        request,
        ResourceType.SYSTEM_SETTING,
        key,
        {"value": setting_data.value},
    )

    return success_response(setting, message="System setting updated successfully")
