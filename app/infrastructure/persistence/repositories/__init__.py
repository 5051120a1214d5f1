"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.catalog_item_repo import (
    CatalogItemRepository,
)
from app.infrastructure.persistence.repositories.outbox_repo import OutboxRepository

__all__ = [
    "BaseRepository",
    "CatalogItemRepository",
    "OutboxRepository",
]
