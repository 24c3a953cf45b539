"""
Base Model Classes
Common fields and functionality for all models
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer
from sqlalchemy.dialects.postgresql import JSONB

from relief_api.core.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps"""
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )


class IntegerIDMixin:
    """Mixin for autoincrement integer primary key"""
    id = Column(Integer, primary_key=True, autoincrement=True)


class BaseModel(Base, IntegerIDMixin, TimestampMixin):
    """Base model with common fields"""
    __abstract__ = True
