"""Index synchronizer: applies committed catalog events to the search index.

Each event maps to exactly one index operation. Failures are not retried
here; they surface as IndexSynchronizationException so callers can tell a
persisted-but-not-searchable item from one that was never saved.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from app.application.dtos.catalog_item import CatalogItemResult
from app.application.dtos.search import SearchDocument
from app.application.events import DomainEvent, ItemCreated, ItemDeleted
from app.application.interfaces.services import IIndexStore
from app.domain.exceptions import IndexStoreException, IndexSynchronizationException
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

OPERATION_UPSERT = "upsert"
OPERATION_DELETE = "delete"


def to_search_document(item: CatalogItemResult) -> SearchDocument:
    """Project a catalog item into its index document (fields copied 1:1)."""
    return SearchDocument(
        id=item.id,
        name=item.name,
        description=item.description,
        price=item.price,
        rating=item.rating,
        category=item.category,
    )


class IndexSynchronizer:
    """Consumes DomainEvents and mirrors them into the index store.

    Operations for the same item id are serialized in the order received
    (asyncio.Lock wakes waiters FIFO). Deleted ids are remembered in a
    bounded tombstone set so a late ItemCreated cannot resurrect a deleted
    document; item ids are never reused, so a tombstone never goes stale.
    """

    def __init__(self, index_store: IIndexStore, tombstone_capacity: int = 10_000) -> None:
        self.index_store = index_store
        self._tombstone_capacity = tombstone_capacity
        self._tombstones: OrderedDict[str, None] = OrderedDict()
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_holders: dict[str, int] = {}

    async def handle(self, event: DomainEvent) -> None:
        """Apply one event. Subscribed to the event channel at startup."""
        async with self._sequenced(event.item_id):
            match event:
                case ItemCreated(item=item):
                    await self._apply_created(item)
                case ItemDeleted(item_id=item_id):
                    await self._apply_deleted(item_id)
                case _:
                    raise TypeError(f"Unsupported domain event: {type(event).__name__}")

    async def rebuild(self, items: AsyncIterator[CatalogItemResult]) -> int:
        """Re-upsert documents for every given item. Return the number written."""
        written = 0
        async for item in items:
            async with self._sequenced(item.id):
                if await self._apply_created(item):
                    written += 1
        return written

    def is_tombstoned(self, item_id: str) -> bool:
        return item_id in self._tombstones

    @traced("index_sync.upsert")
    async def _apply_created(self, item: CatalogItemResult) -> bool:
        add_span_attributes(item_id=item.id)
        if item.id in self._tombstones:
            logger.warning("Skipping index upsert for deleted catalog item %s", item.id)
            return False
        try:
            await self.index_store.upsert(item.id, to_search_document(item))
        except IndexStoreException as e:
            logger.error(
                "Index %s failed for catalog item %s: %s",
                OPERATION_UPSERT,
                item.id,
                e.details.get("reason", e.message),
            )
            raise IndexSynchronizationException(
                item.id, OPERATION_UPSERT, str(e.details.get("reason", e.message))
            ) from e
        logger.debug("Indexed catalog item %s", item.id)
        return True

    @traced("index_sync.delete")
    async def _apply_deleted(self, item_id: str) -> None:
        add_span_attributes(item_id=item_id)
        self._remember_deleted(item_id)
        try:
            await self.index_store.delete_by_id(item_id)
        except IndexStoreException as e:
            logger.error(
                "Index %s failed for catalog item %s: %s",
                OPERATION_DELETE,
                item_id,
                e.details.get("reason", e.message),
            )
            raise IndexSynchronizationException(
                item_id, OPERATION_DELETE, str(e.details.get("reason", e.message))
            ) from e
        logger.debug("Removed catalog item %s from index", item_id)

    def _remember_deleted(self, item_id: str) -> None:
        self._tombstones[item_id] = None
        self._tombstones.move_to_end(item_id)
        while len(self._tombstones) > self._tombstone_capacity:
            self._tombstones.popitem(last=False)

    @asynccontextmanager
    async def _sequenced(self, item_id: str):
        """Hold the per-id lock; drop it once no task is waiting on it."""
        lock = self._locks.get(item_id)
        if lock is None:
            lock = self._locks[item_id] = asyncio.Lock()
        self._lock_holders[item_id] = self._lock_holders.get(item_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[item_id] -= 1
            if self._lock_holders[item_id] == 0:
                del self._lock_holders[item_id]
                del self._locks[item_id]
