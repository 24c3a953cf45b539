"""
Audit Log Service
Records privileged actions and serves filtered reads and exports.

Writes are best-effort: they run in their own session, after the business
transaction has committed, and never raise.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import timedelta
from typing import Any, Optional, Union

import structlog
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.core.audit import get_client_ip, get_user_agent
from relief_api.core.config import settings
from relief_api.core.database import AsyncSessionLocal
from relief_api.core.exceptions import ValidationFailedError
from relief_api.models.audit_log import AuditAction, AuditLog
from relief_api.repositories.audit_log import audit_log_repository
from relief_api.schemas.audit_log import (
    AuditLogExportRequest,
    AuditLogFilters,
    AuditLogResponse,
    ExportFormat,
)
from relief_api.schemas.base import ensure_utc

logger = structlog.get_logger()

CSV_HEADERS = [
    "ID",
    "User ID",
    "Action",
    "Resource Type",
    "Resource ID",
    "IP Address",
    "User Agent",
    "Created At",
]


def render_csv(logs: list[AuditLog]) -> str:
    """Every cell quoted, missing values left blank, one line per entry"""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for log in logs:
        created_at = ensure_utc(log.created_at).isoformat() if log.created_at else None
        row = [
            log.id,
            log.user_id,
            log.action,
            log.resource_type,
            log.resource_id,
            log.ip_address,
            log.user_agent,
            created_at,
        ]
        writer.writerow("" if cell is None else cell for cell in row)
    return output.getvalue()


def render_json(logs: list[AuditLog]) -> str:
    entries = [
        AuditLogResponse.model_validate(log).model_dump(mode="json", by_alias=True)
        for log in logs
    ]
    return json.dumps(entries)


class AuditLogService:
    def __init__(self, session_factory=AsyncSessionLocal, repository=audit_log_repository):
        self.session_factory = session_factory
        self.repository = repository

    async def log_action(
        self,
        action: Union[AuditAction, str],
        user_id: Optional[int],
        request: Request,
        resource_type: Optional[str] = None,
        resource_id: Optional[Union[int, str]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """Record an action, taking IP and user agent from the request"""
        try:
            ip_address = get_client_ip(request)
            user_agent = get_user_agent(request)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to read audit request context", action=str(action), error=str(exc))
            ip_address, user_agent = "unknown", "unknown"

        return await self.log_action_with_metadata(
            action,
            user_id,
            ip_address,
            user_agent,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details,
        )

    async def log_action_with_metadata(
        self,
        action: Union[AuditAction, str],
        user_id: Optional[int],
        ip_address: Optional[str],
        user_agent: Optional[str],
        resource_type: Optional[str] = None,
        resource_id: Optional[Union[int, str]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """Record an action with explicit request metadata"""
        action_value = getattr(action, "value", action)
        try:
            async with self.session_factory() as session:
                entry = await self.repository.create(
                    session,
                    obj_in={
                        "user_id": user_id,
                        "action": action_value,
                        "resource_type": resource_type,
                        "resource_id": str(resource_id) if resource_id is not None else None,
                        "details": jsonable_encoder(details) if details is not None else None,
                        "ip_address": (ip_address or "unknown")[:45],
                        "user_agent": user_agent or "unknown",
                    },
                )
            logger.info(
                "Audit action recorded",
                action=action_value,
                user_id=user_id,
                resource_type=resource_type,
                resource_id=resource_id,
            )
            return entry
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Failed to record audit action",
                action=action_value,
                user_id=user_id,
                error=str(exc),
            )
            return None

    async def get_audit_logs(self, db: AsyncSession, filters: AuditLogFilters) -> list[AuditLog]:
        return await self.repository.find_with_filters(
            db,
            limit=filters.limit,
            offset=filters.offset,
            **filters.query_filters(),
        )

    async def get_audit_log_by_id(self, db: AsyncSession, audit_log_id: int) -> Optional[AuditLog]:
        return await self.repository.get(db, id=audit_log_id)

    async def count_audit_logs(self, db: AsyncSession, filters: AuditLogFilters) -> int:
        return await self.repository.count_with_filters(db, **filters.query_filters())

    def validate_export_range(self, export: AuditLogExportRequest) -> None:
        start = ensure_utc(export.start_date)
        end = ensure_utc(export.end_date)

        if end < start:
            raise ValidationFailedError("End date must be after start date")
        if end - start > timedelta(days=settings.AUDIT_EXPORT_MAX_DAYS):
            raise ValidationFailedError(
                f"Time period cannot exceed {settings.AUDIT_EXPORT_MAX_DAYS} days"
            )

    async def export_audit_logs(
        self,
        db: AsyncSession,
        export: AuditLogExportRequest,
    ) -> tuple[str, str, str]:
        """
        Render the filtered period as a downloadable document

        Returns:
            (body, media_type, filename)

        Raises:
            ValidationFailedError: Invalid period, before any query runs
        """
        self.validate_export_range(export)

        logs = await self.repository.find_with_filters(
            db,
            limit=settings.AUDIT_EXPORT_ROW_LIMIT,
            user_id=export.user_id,
            action=export.action,
            resource_type=export.resource_type,
            resource_id=export.resource_id,
            start_date=export.start_date,
            end_date=export.end_date,
        )

        export_format = ExportFormat(export.format)
        logger.info("Audit logs exported", format=export_format.value, rows=len(logs))

        if export_format == ExportFormat.CSV:
            return render_csv(logs), "text/csv", "audit-logs.csv"
        return render_json(logs), "application/json", "audit-logs.json"


audit_log_service = AuditLogService()
