"""Outbox relay: re-publishes domain events whose synchronization never completed.

Rows stay pending when the process died between commit and dispatch, or
when the index write failed. The relay is the retry policy wrapped around
the core; it is run on demand (scripts/replay_outbox.py) or periodically
from the application lifespan.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from app.application.dtos.catalog_item import CatalogItemResult
from app.application.dtos.outbox import OutboxEntry
from app.application.events import (
    ITEM_CREATED,
    ITEM_DELETED,
    DomainEvent,
    ItemCreated,
    ItemDeleted,
)
from app.application.interfaces.repositories import UnitOfWorkFactory
from app.application.interfaces.services import IEventChannel
from app.domain.exceptions import CatalogException

logger = logging.getLogger(__name__)


def failure_reason(error: Exception) -> str:
    """Underlying cause of a dispatch failure, as stored in outbox.last_error."""
    if isinstance(error, CatalogException):
        return str(error.details.get("reason", error.message))
    return str(error) or type(error).__name__


def event_from_entry(entry: OutboxEntry) -> DomainEvent:
    """Rebuild the domain event stored in an outbox row."""
    if entry.event_type == ITEM_CREATED:
        return ItemCreated(item=CatalogItemResult(**entry.payload), event_id=entry.event_id)
    if entry.event_type == ITEM_DELETED:
        return ItemDeleted(item_id=entry.item_id, event_id=entry.event_id)
    raise ValueError(f"Unknown outbox event type: {entry.event_type!r}")


@dataclass(frozen=True)
class ReplayResult:
    """Outcome of one replay pass."""

    dispatched: int
    failed: int
    skipped: int = 0


class OutboxRelay:
    """Replays pending outbox rows through the event channel in sequence order."""

    def __init__(self, uow_factory: UnitOfWorkFactory, event_channel: IEventChannel) -> None:
        self.uow_factory = uow_factory
        self.event_channel = event_channel

    async def replay_pending(self, limit: int = 100) -> ReplayResult:
        """Publish up to limit pending events in sequence order.

        Each row is marked dispatched or has its failure recorded. Once a row
        fails, later rows for the same item are held back until the next pass
        so per-item order is kept. A pending ItemCreated whose item no longer
        exists (before or right after its upsert) is settled by deleting the
        document instead, so replay cannot resurrect a deleted item.
        """
        async with self.uow_factory() as uow:
            entries = await uow.outbox.list_pending(limit)
        dispatched = failed = skipped = 0
        blocked: set[str] = set()
        for entry in entries:
            if entry.item_id in blocked:
                continue
            created = entry.event_type == ITEM_CREATED
            gone = created and not await self._item_exists(entry.item_id)
            try:
                if not gone:
                    await self.event_channel.publish(event_from_entry(entry))
                if created and (gone or not await self._item_exists(entry.item_id)):
                    await self._retract(entry.item_id)
            except Exception as e:
                failed += 1
                blocked.add(entry.item_id)
                logger.warning(
                    "Outbox replay of %s (%s) failed on attempt %d: %s",
                    entry.event_id,
                    entry.item_id,
                    entry.attempts + 1,
                    failure_reason(e),
                )
                async with self.uow_factory() as uow:
                    await uow.outbox.record_failure(entry.event_id, failure_reason(e))
                continue
            async with self.uow_factory() as uow:
                await uow.outbox.mark_dispatched([entry.event_id])
            if gone:
                skipped += 1
            else:
                dispatched += 1
        if entries:
            logger.info(
                "Outbox replay: %d dispatched, %d failed, %d skipped (item gone)",
                dispatched,
                failed,
                skipped,
            )
        return ReplayResult(dispatched=dispatched, failed=failed, skipped=skipped)

    async def _item_exists(self, item_id: str) -> bool:
        async with self.uow_factory() as uow:
            return await uow.items.get_by_id(item_id) is not None

    async def _retract(self, item_id: str) -> None:
        """Publish ItemDeleted for a created item that no longer exists.

        Covers a delete committed by another process (whose synchronizer
        keeps its own tombstones) before or during the replay. A delete
        committed after the last existence check publishes its own
        ItemDeleted, which reaches the index after the replayed upsert.
        """
        logger.info("Catalog item %s no longer exists; removing its document", item_id)
        await self.event_channel.publish(ItemDeleted(item_id=item_id))

    async def run_forever(self, interval_seconds: float, batch_size: int) -> None:
        """Replay on a fixed interval until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.replay_pending(batch_size)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Outbox replay pass failed")
