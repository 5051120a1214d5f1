"""Base repository: generic lookups and deletes over one ORM model."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base]:
    """Base repository with get_entity, add_all and delete_where_id.

    Subclasses map ORM rows to application DTOs; ORM objects never leave
    the repository.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_entity(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def add_all(self, objs: list[ModelType]) -> list[ModelType]:
        """Persist new records in one flush; primary keys are set afterwards."""
        self.db.add_all(objs)
        await self.db.flush()
        return objs

    async def delete_where_id(self, entity_id: str) -> bool:
        """Delete by primary key. Return False when no row matched."""
        model: Any = self.model
        result = await self.db.execute(delete(self.model).where(model.id == entity_id))
        return (result.rowcount or 0) > 0
