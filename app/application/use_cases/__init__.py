"""Application use cases: one entry point per workflow."""

from app.application.use_cases.catalog import CatalogService, ReindexService
from app.application.use_cases.search import SearchService

__all__ = [
    "CatalogService",
    "ReindexService",
    "SearchService",
]
