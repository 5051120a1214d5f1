"""Presentation-layer dependency injection.

Services are built once at startup (app.core.lifespan) and kept on
app.state.container; routes depend on these providers, not on
infrastructure directly.
"""

from __future__ import annotations

from fastapi import Request

from app.application.use_cases.catalog import CatalogService
from app.application.use_cases.search import SearchService
from app.infrastructure.container import CatalogContainer


def get_container(request: Request) -> CatalogContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Application services are not initialized (lifespan not run)")
    return container


def get_catalog_service(request: Request) -> CatalogService:
    return get_container(request).catalog_service


def get_search_service(request: Request) -> SearchService:
    return get_container(request).search_service
