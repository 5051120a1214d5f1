"""Pagination resolver shared by the listing and search paths.

Pure functions: no I/O, deterministic and total for every integer input
(including zero and negatives). page is 1-based on the way in; the
resolved window carries the zero-based page index and element offset.
"""

from dataclasses import dataclass

from app.core.constants import (
    DEFAULT_PAGE,
    LISTING_DEFAULT_SIZE,
    LISTING_MAX_WINDOW,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    SEARCH_DEFAULT_SIZE,
    SEARCH_MAX_WINDOW,
)


@dataclass(frozen=True)
class PaginationPolicy:
    """Defaults and clamps applied by resolve_page.

    max_window bounds offset + limit; pages past it resolve to the last
    page that fits.
    """

    default_size: int
    default_page: int = DEFAULT_PAGE
    min_size: int = MIN_PAGE_SIZE
    max_size: int = MAX_PAGE_SIZE
    max_window: int = LISTING_MAX_WINDOW


@dataclass(frozen=True)
class PageWindow:
    """Normalized page: zero-based page index, element offset, bounded limit."""

    page_index: int
    offset: int
    limit: int

    @property
    def page(self) -> int:
        """1-based page number."""
        return self.page_index + 1


SEARCH_POLICY = PaginationPolicy(default_size=SEARCH_DEFAULT_SIZE, max_window=SEARCH_MAX_WINDOW)
LISTING_POLICY = PaginationPolicy(default_size=LISTING_DEFAULT_SIZE)


def resolve_page(
    page: int | None = None,
    size: int | None = None,
    policy: PaginationPolicy = SEARCH_POLICY,
) -> PageWindow:
    """Resolve optional page/size into a bounded window.

    page defaults to policy.default_page and is clamped to >= 1.
    size defaults to policy.default_size and is clamped to
    [policy.min_size, policy.max_size]. The page is then lowered until
    offset + limit fits in policy.max_window.
    """
    resolved_page = max(page if page is not None else policy.default_page, 1)
    resolved_size = size if size is not None else policy.default_size
    resolved_size = min(max(resolved_size, policy.min_size), policy.max_size)
    last_page_index = max(policy.max_window // resolved_size - 1, 0)
    page_index = min(resolved_page - 1, last_page_index)
    return PageWindow(
        page_index=page_index,
        offset=page_index * resolved_size,
        limit=resolved_size,
    )
