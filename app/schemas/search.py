"""Search API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SearchResultResponse(BaseModel):
    """Single search hit. highlightedName is null when the name had no highlighted fragment."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    highlighted_name: str | None = Field(default=None, alias="highlightedName")
    description: str
    price: int
    rating: float
    category: str
