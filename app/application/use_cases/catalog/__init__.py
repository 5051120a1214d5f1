"""Catalog use cases."""

from app.application.use_cases.catalog.catalog_operations import CatalogService
from app.application.use_cases.catalog.reindex import ReindexService

__all__ = ["CatalogService", "ReindexService"]
