"""Full-text search and autocomplete use cases. Reads go to the index store only."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.dtos.search import SearchHit, SearchResultItem
from app.application.services.pagination import SEARCH_POLICY, resolve_page
from app.application.services.query_builder import (
    SearchCriteria,
    build_name_highlight,
    build_search_query,
    build_suggest_query,
)
from app.core.constants import (
    DEFAULT_MAX_PRICE,
    DEFAULT_MIN_PRICE,
    FIELD_NAME,
    SUGGEST_SIZE,
)
from app.domain.exceptions import ValidationException
from app.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from app.application.interfaces.services import IIndexStore


def project_hit(hit: SearchHit) -> SearchResultItem:
    """Map a raw hit to a SearchResultItem.

    highlighted_name is the first name fragment, or None when the hit
    carried no name highlight. No fallback to the plain name here.
    """
    source = hit.source
    fragments = hit.highlight.get(FIELD_NAME) or []
    return SearchResultItem(
        id=str(source.get("id", hit.id)),
        name=source["name"],
        highlighted_name=fragments[0] if fragments else None,
        description=source.get("description", ""),
        price=int(source["price"]),
        rating=float(source["rating"]),
        category=source["category"],
    )


class SearchService:
    """Ranked, filtered, highlighted catalog search and name suggestions."""

    def __init__(
        self,
        index_store: "IIndexStore",
        highlight_pre_tag: str = "<b>",
        highlight_post_tag: str = "</b>",
    ) -> None:
        self.index_store = index_store
        self.highlight = build_name_highlight(highlight_pre_tag, highlight_post_tag)

    @traced("catalog.search")
    async def search(
        self,
        query: str,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        page: int | None = None,
        size: int | None = None,
    ) -> list[SearchResultItem]:
        """Search the index.

        min_price defaults to 0.0 and max_price to 1e9; an inverted range is
        passed through as-is. page defaults to 1 (min 1), size to 5 (1..100).
        """
        if not query or not query.strip():
            raise ValidationException("Search query is required", field="query")
        criteria = SearchCriteria(
            query=query,
            category=category,
            min_price=DEFAULT_MIN_PRICE if min_price is None else min_price,
            max_price=DEFAULT_MAX_PRICE if max_price is None else max_price,
        )
        window = resolve_page(page, size, SEARCH_POLICY)
        add_span_attributes(page=window.page, size=window.limit)
        hits = await self.index_store.search(
            build_search_query(criteria),
            self.highlight,
            window.offset,
            window.limit,
        )
        return [project_hit(hit) for hit in hits]

    @traced("catalog.suggest")
    async def suggest(self, prefix: str) -> list[str]:
        """Return up to five item names matching the typed prefix, in ranking order."""
        if not prefix or not prefix.strip():
            raise ValidationException("Suggestion query is required", field="query")
        hits = await self.index_store.search(
            build_suggest_query(prefix), None, 0, SUGGEST_SIZE
        )
        return [hit.source["name"] for hit in hits][:SUGGEST_SIZE]
