"""DTOs for full-text search and index documents (no dependency on ORM or client library)."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SearchDocument:
    """Index projection of a catalog item. Keyed by the item id."""

    id: str
    name: str
    description: str
    price: int
    rating: float
    category: str

    def to_source(self) -> dict[str, Any]:
        """Body stored in the index. Engine-managed sub-fields come from the mapping."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "rating": self.rating,
            "category": self.category,
        }


@dataclass(frozen=True)
class SearchHit:
    """Single ranked hit returned by the index store."""

    id: str
    source: dict[str, Any]
    score: float | None = None
    highlight: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchResultItem:
    """Search result projection returned to clients.

    highlighted_name is set only when the highlighter matched a name fragment;
    callers fall back to name for display.
    """

    id: str
    name: str
    highlighted_name: str | None
    description: str
    price: int
    rating: float
    category: str
