"""DTOs for catalog item use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogItemCreate:
    """Input for creating a catalog item (validated by CatalogItemEntity)."""

    name: str
    description: str
    price: int
    rating: float
    category: str


@dataclass(frozen=True)
class CatalogItemResult:
    """Catalog item read-model (result of insert, bulk_insert, find_page)."""

    id: str
    name: str
    description: str
    price: int
    rating: float
    category: str
