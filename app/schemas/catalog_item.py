"""Catalog item API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_PRICE


class CatalogItemCreateRequest(BaseModel):
    """Request body for creating a catalog item (also the element type of a bulk request)."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=10_000)
    price: int = Field(..., ge=0, le=MAX_PRICE, description="Price in the smallest currency unit")
    rating: float = Field(..., ge=0.0, allow_inf_nan=False)
    category: str = Field(..., min_length=1, max_length=100)


class CatalogItemResponse(BaseModel):
    """Catalog item as stored in the authoritative store."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    price: int
    rating: float
    category: str
