"""Catalog item domain entity.

Represents a sellable catalog entry independent of persistence. Items are
created and deleted, never mutated in place.
"""

import math
from dataclasses import dataclass

from app.core.constants import MAX_PRICE
from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class CatalogItemEntity:
    """Domain entity for a catalog item.

    Validation runs on construction, so an instance is always a valid
    creation candidate. id is None until the authoritative store assigns one.
    """

    name: str
    description: str
    price: int
    rating: float
    category: str
    id: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate catalog item rules. Raises ValidationException if invalid."""
        if not self.name or not self.name.strip():
            raise ValidationException("Item name is required", field="name")
        if not self.category or not self.category.strip():
            raise ValidationException("Item category is required", field="category")
        if isinstance(self.price, bool) or not isinstance(self.price, int):
            raise ValidationException("Price must be an integer", field="price")
        if self.price < 0:
            raise ValidationException("Price must not be negative", field="price")
        if self.price > MAX_PRICE:
            raise ValidationException(f"Price must not exceed {MAX_PRICE}", field="price")
        if not math.isfinite(self.rating):
            raise ValidationException("Rating must be a finite number", field="rating")
        if self.rating < 0.0:
            raise ValidationException("Rating must not be negative", field="rating")
        if self.description is None:
            raise ValidationException("Description must be a string", field="description")
