"""System administrator management endpoints (admin-only)."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.core.database import get_db
from relief_api.core.deps import authenticate, require_admin, require_permission
from relief_api.core.rbac import Identity, Permission
from relief_api.core.responses import success_response
from relief_api.models.audit_log import AuditAction, ResourceType
from relief_api.schemas.admin_management import (
    PermissionsUpdate,
    StatusUpdate,
    SystemAdminCreate,
    SystemAdminUpdate,
)
from relief_api.services.admin_management import admin_management_service
from relief_api.services.audit_log import audit_log_service

logger = structlog.get_logger()
router = APIRouter(dependencies=[Depends(authenticate), Depends(require_admin())])


@router.get("")
async def list_system_admins(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """List system administrators, newest first."""
    admins, total = await admin_management_service.list_system_admins(db, page=page, limit=limit)
    return success_response(admins, count=total)


@router.get("/{admin_id}")
async def get_system_admin(
    admin_id: int,
    db: AsyncSession = Depends(get_db),
) -> Any:
    admin = await admin_management_service.get_system_admin(db, admin_id)
    return success_response(admin)


@router.post("", dependencies=[Depends(require_permission(Permission.MANAGE_ADMINS))])
async def create_system_admin(
    admin_data: SystemAdminCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    current: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Create a system administrator with no permissions."""
    admin = await admin_management_service.create_system_admin(db, admin_data)

    background_tasks.add_task(
        audit_log_service.log_action,
        AuditAction.SYSTEM_ADMIN_CREATED,
        current.id,
        request,
        ResourceType.SYSTEM_ADMINISTRATOR,
        admin.id,
        {
            "username": admin.username,
            "createdBy": current.id,
            "createdByRole": current.role.value,
            "createdByUsername": current.username,
        },
    )

    return success_response(
        admin,
        message="System administrator created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.put("/{admin_id}", dependencies=[Depends(require_permission(Permission.MANAGE_ADMINS))])
async def update_system_admin(
    admin_id: int,
    admin_data: SystemAdminUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    current: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    admin, changes = await admin_management_service.update_system_admin(db, admin_id, admin_data, current.id)

    background_tasks.add_task(
        audit_log_service.log_action,
        AuditAction.SYSTEM_ADMIN_UPDATED,
        current.id,
        request,
        ResourceType.SYSTEM_ADMINISTRATOR,
        admin_id,
        {"changes": changes},
    )

    return success_response(admin, message="System administrator updated successfully")


@router.put("/{admin_id}/permissions", dependencies=[Depends(require_permission(Permission.ASSIGN_PERMISSIONS))])
async def update_permissions(
    admin_id: int,
    permissions_data: PermissionsUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    current: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Replace the administrator's explicit permission set."""
    admin = await admin_management_service.update_permissions(
        db, admin_id, permissions_data.as_permissions(), current.id
    )

    background_tasks.add_task(
        audit_log_service.log_action,
        AuditAction.PERMISSIONS_ASSIGNED,
        current.id,
        request,
        ResourceType.SYSTEM_ADMINISTRATOR,
        admin_id,
        {"permissions": admin.permissions},
    )

    return success_response(admin, message="Permissions updated successfully")


@router.put("/{admin_id}/status", dependencies=[Depends(require_permission(Permission.MANAGE_ADMINS))])
async def update_status(
    admin_id: int,
    status_data: StatusUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    current: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    admin = await admin_management_service.update_status(db, admin_id, status_data.status, current.id)

    background_tasks.add_task(
        audit_log_service.log_action,
        AuditAction.SYSTEM_ADMIN_UPDATED,
        current.id,
        request,
        ResourceType.SYSTEM_ADMINISTRATOR,
        admin_id,
        {"status": admin.status},
    )

    return success_response(admin, message="Status updated successfully")


@router.delete("/{admin_id}", dependencies=[Depends(require_permission(Permission.MANAGE_ADMINS))])
async def delete_system_admin(
    admin_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    current: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Disable a system administrator. Accounts are never removed."""
    await admin_management_service.delete_system_admin(db, admin_id, current.id)

    background_tasks.add_task(
        audit_log_service.log_action,
        AuditAction.SYSTEM_ADMIN_DELETED,
        current.id,
        request,
        ResourceType.SYSTEM_ADMINISTRATOR,
        admin_id,
    )

    return success_response(None, message="System administrator deleted successfully")
