"""Application DTOs (no ORM dependency)."""

from app.application.dtos.catalog_item import CatalogItemCreate, CatalogItemResult
from app.application.dtos.outbox import OutboxEntry
from app.application.dtos.search import SearchDocument, SearchHit, SearchResultItem

__all__ = [
    "CatalogItemCreate",
    "CatalogItemResult",
    "OutboxEntry",
    "SearchDocument",
    "SearchHit",
    "SearchResultItem",
]
