"""Catalog item repository (authoritative store). Returns application DTOs."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.catalog_item import CatalogItemCreate, CatalogItemResult
from app.infrastructure.persistence.models.catalog_item import CatalogItem
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import utc_now


def _item_to_result(row: CatalogItem) -> CatalogItemResult:
    """Map ORM CatalogItem to application CatalogItemResult."""
    return CatalogItemResult(
        id=row.id,
        name=row.name,
        description=row.description,
        price=row.price,
        rating=row.rating,
        category=row.category,
    )


def _create_to_row(data: CatalogItemCreate, created_at: datetime) -> CatalogItem:
    return CatalogItem(
        created_at=created_at,
        name=data.name,
        description=data.description,
        price=data.price,
        rating=data.rating,
        category=data.category,
    )


class CatalogItemRepository(BaseRepository[CatalogItem]):
    """Catalog items in the relational store. Runs inside the caller's transaction."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CatalogItem)

    async def insert(self, data: CatalogItemCreate) -> CatalogItemResult:
        rows = await self.add_all([_create_to_row(data, utc_now())])
        return _item_to_result(rows[0])

    async def bulk_insert(self, items: list[CatalogItemCreate]) -> list[CatalogItemResult]:
        """Insert all items in one flush; results keep input order.

        created_at steps by a microsecond per item so listings, ordered by
        (created_at, id), return the batch in input order too.
        """
        if not items:
            return []
        base = utc_now()
        rows = await self.add_all(
            [_create_to_row(d, base + timedelta(microseconds=i)) for i, d in enumerate(items)]
        )
        return [_item_to_result(r) for r in rows]

    async def delete_by_id(self, item_id: str) -> bool:
        return await self.delete_where_id(item_id)

    async def get_by_id(self, item_id: str) -> CatalogItemResult | None:
        row = await self.get_entity(item_id)
        return _item_to_result(row) if row else None

    async def find_page(self, offset: int, limit: int) -> list[CatalogItemResult]:
        result = await self.db.execute(
            select(CatalogItem)
            .order_by(CatalogItem.created_at, CatalogItem.id)
            .offset(offset)
            .limit(limit)
        )
        return [_item_to_result(r) for r in result.scalars().all()]

    async def iter_all(self, batch_size: int = 500) -> AsyncIterator[CatalogItemResult]:
        """Stream all items with keyset paging on id."""
        last_id: str | None = None
        while True:
            stmt = select(CatalogItem).order_by(CatalogItem.id).limit(batch_size)
            if last_id is not None:
                stmt = stmt.where(CatalogItem.id > last_id)
            rows = (await self.db.execute(stmt)).scalars().all()
            if not rows:
                return
            for row in rows:
                yield _item_to_result(row)
            last_id = rows[-1].id
