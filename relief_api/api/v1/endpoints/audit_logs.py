"""Audit log endpoints (admin-only)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.core.config import settings
from relief_api.core.database import get_db
from relief_api.core.deps import authenticate, require_admin, require_permission
from relief_api.core.exceptions import NotFoundError
from relief_api.core.rbac import Permission
from relief_api.core.responses import success_response
from relief_api.models.audit_log import AuditAction
from relief_api.schemas.audit_log import (
    AuditLogExportRequest,
    AuditLogFilters,
    AuditLogResponse,
    ExportFormat,
)
from relief_api.services.audit_log import audit_log_service

logger = structlog.get_logger()
router = APIRouter()

VIEW_PIPELINE = [
    Depends(authenticate),
    Depends(require_admin()),
    Depends(require_permission(Permission.VIEW_AUDIT_LOGS)),
]
EXPORT_PIPELINE = [
    Depends(authenticate),
    Depends(require_admin()),
    Depends(require_permission(Permission.EXPORT_AUDIT_LOGS)),
]


@router.get("", dependencies=VIEW_PIPELINE)
async def list_audit_logs(
    user_id: Optional[int] = Query(default=None, alias="userId"),
    action: Optional[AuditAction] = Query(default=None),
    resource_type: Optional[str] = Query(default=None, alias="resourceType"),
    resource_id: Optional[str] = Query(default=None, alias="resourceId"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    limit: int = Query(default=100, ge=1, le=settings.AUDIT_QUERY_MAX_LIMIT),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """List audit entries, newest first. count is the total matching rows."""
    filters = AuditLogFilters(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )

    logs = await audit_log_service.get_audit_logs(db, filters)
    total = await audit_log_service.count_audit_logs(db, filters)

    return success_response(
        [AuditLogResponse.model_validate(log) for log in logs],
        message="Audit logs retrieved successfully",
        count=total,
    )


@router.get("/export", dependencies=EXPORT_PIPELINE)
async def export_audit_logs(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    export_format: ExportFormat = Query(default=ExportFormat.JSON, alias="format"),
    user_id: Optional[int] = Query(default=None, alias="userId"),
    action: Optional[AuditAction] = Query(default=None),
    resource_type: Optional[str] = Query(default=None, alias="resourceType"),
    resource_id: Optional[str] = Query(default=None, alias="resourceId"),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Download audit entries for a bounded period as JSON or CSV."""
    export = AuditLogExportRequest(
        start_date=start_date,
        end_date=end_date,
        format=export_format,
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
    )

    body, media_type, filename = await audit_log_service.export_audit_logs(db, export)

    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/{audit_log_id}", dependencies=VIEW_PIPELINE)
async def get_audit_log(
    audit_log_id: int,
    db: AsyncSession = Depends(get_db),
) -> Any:
    log = await audit_log_service.get_audit_log_by_id(db, audit_log_id)
    if not log:
        raise NotFoundError("Audit log not found")

    return success_response(
        AuditLogResponse.model_validate(log),
        message="Audit log retrieved successfully",
    )
