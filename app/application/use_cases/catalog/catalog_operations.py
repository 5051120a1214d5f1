"""Catalog operations: create, batch create, delete, list.

Every mutation runs in one unit of work. Domain events are handed to the
event channel from a post-commit callback, so nothing is published for a
transaction that rolled back. When the outbox is enabled the same events
are also written as outbox rows inside the transaction and marked
dispatched once the channel accepted them.
"""

from __future__ import annotations

import logging

from app.application.dtos.catalog_item import CatalogItemCreate, CatalogItemResult
from app.application.events import DomainEvent, ItemCreated, ItemDeleted
from app.application.interfaces.repositories import IUnitOfWork, UnitOfWorkFactory
from app.application.interfaces.services import IEventChannel
from app.application.services.outbox_relay import failure_reason
from app.application.services.pagination import LISTING_POLICY, resolve_page
from app.domain.entities.catalog_item import CatalogItemEntity

logger = logging.getLogger(__name__)


def _validated(data: CatalogItemCreate) -> CatalogItemCreate:
    """Run domain validation; raises ValidationException before any store is touched."""
    CatalogItemEntity(
        name=data.name,
        description=data.description,
        price=data.price,
        rating=data.rating,
        category=data.category,
    )
    return data


class CatalogService:
    """Create, delete and list catalog items; owns the commit boundary for index sync."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        event_channel: IEventChannel,
        *,
        outbox_enabled: bool = True,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_channel = event_channel
        self.outbox_enabled = outbox_enabled

    async def create(self, data: CatalogItemCreate) -> CatalogItemResult:
        """Persist one item and emit ItemCreated after commit."""
        candidate = _validated(data)
        async with self.uow_factory() as uow:
            item = await uow.items.insert(candidate)
            await self._stage(uow, [ItemCreated(item=item)])
        return item

    async def create_batch(
        self, requests: list[CatalogItemCreate]
    ) -> list[CatalogItemResult]:
        """Persist items in one transaction; one ItemCreated per item, in input order."""
        candidates = [_validated(r) for r in requests]
        if not candidates:
            return []
        async with self.uow_factory() as uow:
            items = await uow.items.bulk_insert(candidates)
            await self._stage(uow, [ItemCreated(item=item) for item in items])
        return items

    async def delete(self, item_id: str) -> None:
        """Delete an item and emit ItemDeleted after commit.

        Idempotent: an id with no row still emits ItemDeleted, so a retried
        delete removes a document left behind by an earlier failed index write.
        """
        async with self.uow_factory() as uow:
            if not await uow.items.delete_by_id(item_id):
                logger.info("Catalog item %s not in store; removing from index only", item_id)
            await self._stage(uow, [ItemDeleted(item_id=item_id)])

    async def list_items(
        self, page: int | None = None, size: int | None = None
    ) -> list[CatalogItemResult]:
        """Return a page of items straight from the authoritative store (page is 1-based)."""
        window = resolve_page(page, size, LISTING_POLICY)
        async with self.uow_factory() as uow:
            return await uow.items.find_page(window.offset, window.limit)

    async def _stage(self, uow: IUnitOfWork, events: list[DomainEvent]) -> None:
        """Record events in the outbox (same transaction) and schedule their post-commit dispatch."""
        if self.outbox_enabled:
            for event in events:
                await uow.outbox.add(event)

        async def dispatch() -> None:
            await self._dispatch(events)

        uow.after_commit(dispatch)

    async def _dispatch(self, events: list[DomainEvent]) -> None:
        """Publish committed events in order. The first failure stops dispatch and propagates."""
        published: list[str] = []
        for event in events:
            try:
                await self.event_channel.publish(event)
            except Exception as e:
                logger.error(
                    "Publishing %s for catalog item %s failed after commit: %s",
                    type(event).__name__,
                    event.item_id,
                    e,
                )
                await self._settle_outbox(published, failed=(event.event_id, failure_reason(e)))
                raise
            published.append(event.event_id)
        await self._settle_outbox(published)

    async def _settle_outbox(
        self, published: list[str], failed: tuple[str, str] | None = None
    ) -> None:
        if not self.outbox_enabled or (not published and failed is None):
            return
        async with self.uow_factory() as uow:
            if published:
                await uow.outbox.mark_dispatched(published)
            if failed is not None:
                await uow.outbox.record_failure(*failed)
