"""Domain events for committed catalog mutations.

DomainEvent is a closed union of ItemCreated and ItemDeleted. Handlers
match on the concrete type; adding a variant means updating every handler.
Events are immutable and exist only between commit and index
synchronization (plus their outbox row, when the outbox is enabled).
"""

from dataclasses import dataclass, field

from app.application.dtos.catalog_item import CatalogItemResult
from app.shared.utils.generators import generate_cuid

ITEM_CREATED = "item_created"
ITEM_DELETED = "item_deleted"


@dataclass(frozen=True)
class ItemCreated:
    """A catalog item was committed to the authoritative store."""

    item: CatalogItemResult
    event_id: str = field(default_factory=generate_cuid)

    @property
    def item_id(self) -> str:
        return self.item.id


@dataclass(frozen=True)
class ItemDeleted:
    """A catalog item was deleted from the authoritative store."""

    item_id: str
    event_id: str = field(default_factory=generate_cuid)


DomainEvent = ItemCreated | ItemDeleted


def event_type_of(event: DomainEvent) -> str:
    """Return the stable type name used when persisting an event."""
    match event:
        case ItemCreated():
            return ITEM_CREATED
        case ItemDeleted():
            return ITEM_DELETED
    raise TypeError(f"Unsupported domain event: {type(event).__name__}")
