"""Base repository: generic CRUD plus an id-keyed column update."""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction

from propertyops.domain.exceptions import ResourceNotFoundException
from propertyops.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update, delete and update_fields.

    resource_type names the entity in ResourceNotFoundException messages.
    """

    resource_type: str = "resource"

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and refresh server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and refresh it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record."""
        await self.db.delete(obj)
        await self.db.flush()

    def savepoint(self) -> AsyncSessionTransaction:
        """Nested transaction: a failed statement inside it leaves the outer one usable."""
        return self.db.begin_nested()

    async def update_fields(self, entity_id: str, **values: Any) -> None:
        """Issue a single UPDATE by id (no read-modify-write) inside a savepoint.

        Raises ResourceNotFoundException when no row has the id.
        """
        model: Any = self.model
        if hasattr(model, "updated_at"):
            values["updated_at"] = func.now()
        async with self.savepoint():
            result = await self.db.execute(
                update(self.model).where(model.id == entity_id).values(**values)
            )
        if result.rowcount == 0:
            raise ResourceNotFoundException(self.resource_type, entity_id)
