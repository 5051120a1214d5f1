"""Catalog item API: create, bulk create, delete, list, search, suggestions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import get_catalog_service, get_search_service
from app.application.dtos.catalog_item import CatalogItemCreate
from app.application.use_cases.catalog import CatalogService
from app.application.use_cases.search import SearchService
from app.schemas.catalog_item import CatalogItemCreateRequest, CatalogItemResponse
from app.schemas.search import SearchResultResponse

router = APIRouter()


def _to_create(body: CatalogItemCreateRequest) -> CatalogItemCreate:
    return CatalogItemCreate(
        name=body.name,
        description=body.description,
        price=body.price,
        rating=body.rating,
        category=body.category,
    )


@router.get("", response_model=list[CatalogItemResponse])
async def list_items(
    catalog_svc: Annotated[CatalogService, Depends(get_catalog_service)],
    page: int | None = Query(None, description="1-based page; values below 1 read as 1"),
    size: int | None = Query(None, description="Page size, clamped to 1..100 (default 10)"),
):
    """List items from the authoritative store."""
    items = await catalog_svc.list_items(page=page, size=size)
    return [CatalogItemResponse.model_validate(i) for i in items]


@router.post("", response_model=CatalogItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    body: CatalogItemCreateRequest,
    catalog_svc: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Create an item. It becomes searchable once the index write after commit succeeds."""
    item = await catalog_svc.create(_to_create(body))
    return CatalogItemResponse.model_validate(item)


@router.post(
    "/bulk",
    response_model=list[CatalogItemResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_items_bulk(
    body: list[CatalogItemCreateRequest],
    catalog_svc: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Create items in one transaction; response keeps request order."""
    items = await catalog_svc.create_batch([_to_create(b) for b in body])
    return [CatalogItemResponse.model_validate(i) for i in items]


@router.get("/search", response_model=list[SearchResultResponse])
async def search_items(
    search_svc: Annotated[SearchService, Depends(get_search_service)],
    query: str = Query(..., max_length=500),
    category: str | None = Query(None),
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    page: int | None = Query(None),
    size: int | None = Query(None),
):
    """Ranked full-text search with category and price filters and name highlighting."""
    results = await search_svc.search(
        query=query,
        category=category,
        min_price=min_price,
        max_price=max_price,
        page=page,
        size=size,
    )
    return [SearchResultResponse.model_validate(r) for r in results]


@router.get("/suggestions", response_model=list[str])
async def suggest_names(
    search_svc: Annotated[SearchService, Depends(get_search_service)],
    query: str = Query(..., max_length=200),
):
    """Up to five item names for search-as-you-type."""
    return await search_svc.suggest(query)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    catalog_svc: Annotated[CatalogService, Depends(get_catalog_service)],
) -> None:
    """Delete an item and its index document; an unknown id is also 204."""
    await catalog_svc.delete(item_id)
