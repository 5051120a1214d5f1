"""Index outbox repository. Rows are written in the catalog mutation's transaction."""

from __future__ import annotations

from dataclasses import asdict

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.outbox import OutboxEntry
from app.application.events import DomainEvent, ItemCreated, event_type_of
from app.infrastructure.persistence.models.outbox import IndexOutbox
from app.shared.utils.datetime import utc_now


def _outbox_to_entry(row: IndexOutbox) -> OutboxEntry:
    return OutboxEntry(
        sequence=row.sequence,
        event_id=row.event_id,
        event_type=row.event_type,
        item_id=row.item_id,
        payload=dict(row.payload or {}),
        attempts=row.attempts,
        last_error=row.last_error,
    )


class OutboxRepository:
    """Pending and dispatched domain events (table index_outbox)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def add(self, event: DomainEvent) -> None:
        payload = asdict(event.item) if isinstance(event, ItemCreated) else {}
        self.db.add(
            IndexOutbox(
                event_id=event.event_id,
                event_type=event_type_of(event),
                item_id=event.item_id,
                payload=payload,
                attempts=0,
            )
        )
        await self.db.flush()

    async def mark_dispatched(self, event_ids: list[str]) -> int:
        if not event_ids:
            return 0
        result = await self.db.execute(
            update(IndexOutbox)
            .where(
                IndexOutbox.event_id.in_(event_ids),
                IndexOutbox.dispatched_at.is_(None),
            )
            .values(dispatched_at=utc_now())
        )
        return result.rowcount or 0

    async def record_failure(self, event_id: str, error: str) -> None:
        await self.db.execute(
            update(IndexOutbox)
            .where(IndexOutbox.event_id == event_id)
            .values(attempts=IndexOutbox.attempts + 1, last_error=error[:2000])
        )

    async def list_pending(self, limit: int) -> list[OutboxEntry]:
        result = await self.db.execute(
            select(IndexOutbox)
            .where(IndexOutbox.dispatched_at.is_(None))
            .order_by(IndexOutbox.sequence)
            .limit(limit)
        )
        return [_outbox_to_entry(r) for r in result.scalars().all()]
