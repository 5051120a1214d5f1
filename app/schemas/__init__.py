"""Pydantic request/response schemas for the API."""

from app.schemas.catalog_item import CatalogItemCreateRequest, CatalogItemResponse
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.search import SearchResultResponse

__all__ = [
    "CatalogItemCreateRequest",
    "CatalogItemResponse",
    "HealthResponse",
    "ReadinessResponse",
    "SearchResultResponse",
]
