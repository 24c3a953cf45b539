"""
Base Repository
Primary-key lookup and write helpers shared by the account and settings repositories
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from relief_api.core.database import Base

logger = structlog.get_logger()

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Rows are written with commit=True by default. Batch writers pass
    commit=False and commit once themselves.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: int) -> Optional[ModelType]:
        result = await db.execute(select(self.model).where(self.model.id == id))
        record = result.scalar_one_or_none()

        if record is None:
            logger.debug("Record not found", model=self.model.__name__, id=id)
        return record

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]],
        commit: bool = True
    ) -> ModelType:
        """
        Insert a row

        Args:
            db: Database session
            obj_in: Column values, as a dict or a creation schema
            commit: Commit now, or only flush so the id is assigned

        Returns:
            The new row, still attached to the session
        """
        values = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**values)
        db.add(db_obj)

        try:
            await self._persist(db, commit)
        except Exception as e:
            logger.error("Error creating record", model=self.model.__name__, error=str(e))
            raise

        logger.info("Record created", model=self.model.__name__, id=db_obj.id)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        commit: bool = True
    ) -> ModelType:
        """
        Apply changed columns to a loaded row

        Schemas contribute only the fields the caller actually set. Keys that
        are not columns of the model are ignored.
        """
        if isinstance(obj_in, dict):
            changes = obj_in
        else:
            changes = obj_in.model_dump(exclude_unset=True)

        # Rollback expires db_obj, read the key first
        record_id = db_obj.id
        for field, value in changes.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        try:
            await self._persist(db, commit)
        except Exception as e:
            logger.error("Error updating record", model=self.model.__name__, id=record_id, error=str(e))
            raise

        logger.info("Record updated", model=self.model.__name__, id=record_id, fields=sorted(changes))
        return db_obj

    async def _persist(self, db: AsyncSession, commit: bool) -> None:
        if not commit:
            await db.flush()
            return
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise
