"""In-process event channel for committed catalog events.

Handlers are awaited one after another in subscription order, inside the
publisher's task, so a publish returns only after every handler finished.
A handler error stops delivery and propagates to the publisher.
"""

from __future__ import annotations

import logging

from app.application.events import DomainEvent, event_type_of
from app.application.interfaces.services import EventHandler

logger = logging.getLogger(__name__)


class InProcessEventChannel:
    """Synchronous fan-out of DomainEvents to subscribed handlers."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        """Register handler; duplicates are ignored."""
        if handler in self._handlers:
            return
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    async def publish(self, event: DomainEvent) -> None:
        """Deliver event to every handler in order; the first handler error propagates."""
        if not self._handlers:
            logger.debug("No handlers subscribed for %s", event_type_of(event))
            return
        for handler in list(self._handlers):
            await handler(event)
