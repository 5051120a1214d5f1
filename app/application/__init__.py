"""Application layer: interfaces, services, use cases, domain events.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, unit of work,
index store, event channel).
"""

from app.application.events import DomainEvent, ItemCreated, ItemDeleted
from app.application.interfaces import (
    ICatalogItemRepository,
    IEventChannel,
    IIndexStore,
    IOutboxRepository,
    IUnitOfWork,
)
from app.application.services.index_synchronizer import IndexSynchronizer
from app.application.use_cases.catalog import CatalogService
from app.application.use_cases.search import SearchService

__all__ = [
    "CatalogService",
    "DomainEvent",
    "ICatalogItemRepository",
    "IEventChannel",
    "IIndexStore",
    "IOutboxRepository",
    "IUnitOfWork",
    "IndexSynchronizer",
    "ItemCreated",
    "ItemDeleted",
    "SearchService",
]
