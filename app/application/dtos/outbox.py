"""DTOs for the index outbox (pending domain events awaiting synchronization)."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OutboxEntry:
    """A stored domain event. payload holds the item fields for item_created."""

    sequence: int
    event_id: str
    event_type: str
    item_id: str
    payload: dict[str, Any]
    attempts: int
    last_error: str | None
