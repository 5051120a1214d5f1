"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.catalog_item import CatalogItemCreate, CatalogItemResult
    from app.application.dtos.outbox import OutboxEntry
    from app.application.events import DomainEvent


# Catalog item repository interface (authoritative store)
class ICatalogItemRepository(Protocol):
    """Protocol for the authoritative catalog item store (DIP)."""

    async def insert(self, data: CatalogItemCreate) -> CatalogItemResult:
        """Insert one item; the store assigns its id."""

    async def bulk_insert(self, items: list[CatalogItemCreate]) -> list[CatalogItemResult]:
        """Insert items; results keep input order."""

    async def delete_by_id(self, item_id: str) -> bool:
        """Delete by id. Return False when no row existed."""

    async def get_by_id(self, item_id: str) -> CatalogItemResult | None:
        """Return one item or None."""

    async def find_page(self, offset: int, limit: int) -> list[CatalogItemResult]:
        """Return a page of items in stable (created_at, id) order."""

    def iter_all(self, batch_size: int = 500) -> AsyncIterator[CatalogItemResult]:
        """Stream every item in stable order."""


# Outbox repository interface
class IOutboxRepository(Protocol):
    """Protocol for the durable index outbox."""

    async def add(self, event: DomainEvent) -> None:
        """Store an event as pending, in the caller's transaction."""

    async def mark_dispatched(self, event_ids: list[str]) -> int:
        """Mark events as synchronized. Return rows updated."""

    async def record_failure(self, event_id: str, error: str) -> None:
        """Increment attempts and store the last error for a pending event."""

    async def list_pending(self, limit: int) -> list[OutboxEntry]:
        """Return pending events in sequence order."""


# Unit of work interface
class IUnitOfWork(Protocol):
    """Protocol for a transactional unit of work with post-commit callbacks.

    Used as `async with uow_factory() as uow:`. Repositories are bound to
    the transaction. Callbacks registered with after_commit run in order
    only after a successful commit; their exceptions propagate.
    """

    items: ICatalogItemRepository
    outbox: IOutboxRepository

    async def __aenter__(self) -> IUnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> bool | None: ...

    def after_commit(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register an async callback to run once the transaction has committed."""


UnitOfWorkFactory = Callable[[], IUnitOfWork]
