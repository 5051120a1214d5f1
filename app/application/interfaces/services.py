"""Service interfaces (ports) for the application layer.

Protocols define contracts for the index store and event channel (DIP).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.search import SearchDocument, SearchHit
    from app.application.events import DomainEvent
    from app.application.services.query_builder import HighlightSpec, Query


# Index store interface
class IIndexStore(Protocol):
    """Protocol for the search index store (document engine)."""

    async def upsert(self, document_id: str, document: SearchDocument) -> None:
        """Create or replace the document keyed by document_id."""

    async def delete_by_id(self, document_id: str) -> None:
        """Delete the document; a missing document is not an error."""

    async def search(
        self,
        query: Query,
        highlight: HighlightSpec | None,
        offset: int,
        limit: int,
    ) -> list[SearchHit]:
        """Return ranked hits for the query window, with highlight fragments when requested."""

    async def ping(self) -> bool:
        """Return True when the store is reachable and its index exists."""


EventHandler = Callable[["DomainEvent"], Awaitable[None]]


# Event channel interface
class IEventChannel(Protocol):
    """Protocol for the in-process, commit-gated event channel."""

    def subscribe(self, handler: EventHandler) -> None:
        """Register a handler; handlers run in subscription order."""

    async def publish(self, event: DomainEvent) -> None:
        """Deliver the event to every handler. Handler errors propagate."""
