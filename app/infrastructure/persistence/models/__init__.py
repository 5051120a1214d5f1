"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.catalog_item import CatalogItem
from app.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.outbox import IndexOutbox

__all__ = [
    "CatalogItem",
    "CreatedAtMixin",
    "CuidMixin",
    "IndexOutbox",
    "TimestampMixin",
]
