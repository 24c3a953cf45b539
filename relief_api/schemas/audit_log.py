"""
Audit log schemas: query filters, export requests and entry responses.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import Field

from relief_api.core.config import settings
from relief_api.models.audit_log import AuditAction
from relief_api.schemas.base import BaseSchema, UTCDateTime


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"


class AuditLogResponse(BaseSchema):
    id: int
    user_id: Optional[int] = None
    action: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: UTCDateTime


class AuditLogFilters(BaseSchema):
    user_id: Optional[int] = None
    action: Optional[AuditAction] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None

    # Ignored when counting
    limit: Optional[int] = Field(default=None, ge=1, le=settings.AUDIT_QUERY_MAX_LIMIT)
    offset: int = Field(default=0, ge=0)

    def query_filters(self) -> dict[str, Any]:
        return self.model_dump(exclude={"limit", "offset"}, by_alias=False)


class AuditLogExportRequest(BaseSchema):
    """Export requires an explicit time period"""
    start_date: UTCDateTime
    end_date: UTCDateTime
    format: ExportFormat = ExportFormat.JSON

    user_id: Optional[int] = None
    action: Optional[AuditAction] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
