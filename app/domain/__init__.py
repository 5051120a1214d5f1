"""Domain layer: entities and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import CatalogItemEntity
from app.domain.exceptions import (
    CatalogException,
    IndexStoreException,
    IndexSynchronizationException,
    ValidationException,
)

__all__ = [
    # Entities
    "CatalogItemEntity",
    # Exceptions
    "CatalogException",
    "IndexStoreException",
    "IndexSynchronizationException",
    "ValidationException",
]
