"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.catalog_item import CatalogItemEntity

__all__ = ["CatalogItemEntity"]
