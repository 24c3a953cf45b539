"""
Audit Log Repository
Insert and filtered reads over the audit ledger. There is no update or
delete path.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from relief_api.models.audit_log import AuditLog

logger = structlog.get_logger()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AuditLogRepository:
    def __init__(self, model=AuditLog):
        self.model = model

    async def create(self, db: AsyncSession, *, obj_in: dict[str, Any]) -> AuditLog:
        # created_at is always assigned here, never taken from the caller
        data = {k: v for k, v in obj_in.items() if k not in ("id", "created_at")}
        db_obj = self.model(**data)
        db.add(db_obj)
        await db.commit()
        logger.debug("Audit entry stored", id=db_obj.id, action=db_obj.action)
        return db_obj

    async def get(self, db: AsyncSession, id: int) -> Optional[AuditLog]:
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    def _filtered(self, query, *, user_id=None, action=None, resource_type=None,
                  resource_id=None, start_date=None, end_date=None):
        if user_id is not None:
            query = query.where(self.model.user_id == user_id)
        if action is not None:
            query = query.where(self.model.action == getattr(action, "value", action))
        if resource_type is not None:
            query = query.where(self.model.resource_type == resource_type)
        if resource_id is not None:
            query = query.where(self.model.resource_id == str(resource_id))
        if start_date is not None:
            query = query.where(self.model.created_at >= _as_utc(start_date))
        if end_date is not None:
            query = query.where(self.model.created_at <= _as_utc(end_date))
        return query

    async def find_with_filters(
        self,
        db: AsyncSession,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
        **filters: Any,
    ) -> list[AuditLog]:
        query = self._filtered(select(self.model), **filters)
        query = query.order_by(self.model.created_at.desc(), self.model.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_with_filters(self, db: AsyncSession, **filters: Any) -> int:
        query = self._filtered(select(func.count(self.model.id)), **filters)
        return (await db.execute(query)).scalar() or 0


audit_log_repository = AuditLogRepository()
