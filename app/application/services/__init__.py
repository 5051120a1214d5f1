"""Application services: query construction, pagination, index synchronization, outbox replay."""

from app.application.services.index_synchronizer import IndexSynchronizer
from app.application.services.outbox_relay import OutboxRelay, ReplayResult
from app.application.services.pagination import (
    LISTING_POLICY,
    SEARCH_POLICY,
    PageWindow,
    PaginationPolicy,
    resolve_page,
)

__all__ = [
    "IndexSynchronizer",
    "LISTING_POLICY",
    "OutboxRelay",
    "PageWindow",
    "PaginationPolicy",
    "ReplayResult",
    "SEARCH_POLICY",
    "resolve_page",
]
