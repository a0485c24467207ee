"""Paginated Query Controller - cursor state and bounded navigation over any fetch function."""

from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, TypeVar, Union

from config import DEFAULT_PAGE_SIZE
from workflow.debug import print_pagination_state
from workflow.models import PageResult, PaginatedResult, PaginationState

T = TypeVar("T")

FetchFn = Callable[[int, int], Awaitable[Union[PageResult, Mapping[str, Any]]]]


def total_pages_for(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items, never less than 1.

    Args:
        total: Total number of items (>= 0)
        page_size: Items per page (> 0)

    Returns:
        max(ceil(total / page_size), 1)
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if total < 0:
        raise ValueError(f"total must not be negative, got {total}")
    return max((total + page_size - 1) // page_size, 1)


class PaginatedQueryController(Generic[T]):
    """Wraps a page-fetching function with a cursor and safe navigation.

    The fetch function receives ``(page, page_size)`` and returns either a
    ``PageResult`` or a mapping ``{"data": [...], "total": n}``. Errors raised
    by it reach the caller of ``fetch()`` unchanged; nothing is retried here.

    Navigation never leaves ``1 <= current_page <= total_pages``, where
    ``total_pages`` comes from the last applied result (1 before any result).
    """

    def __init__(
        self,
        fetch_fn: FetchFn,
        initial_page: int = 1,
        initial_page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """Initialize the controller.

        Args:
            fetch_fn: Async function (page, page_size) -> page result
            initial_page: Starting page (default: 1)
            initial_page_size: Starting page size (default: DEFAULT_PAGE_SIZE)
        """
        if initial_page < 1:
            raise ValueError(f"initial_page must be >= 1, got {initial_page}")
        if initial_page_size <= 0:
            raise ValueError(f"initial_page_size must be positive, got {initial_page_size}")

        self._fetch_fn = fetch_fn
        self.current_page = initial_page
        self.page_size = initial_page_size
        self._total_items: Optional[int] = None
        self.last_result: Optional[PaginatedResult] = None

    @property
    def total_pages(self) -> int:
        if self._total_items is None:
            return 1
        return total_pages_for(self._total_items, self.page_size)

    @property
    def pagination(self) -> PaginationState:
        """Current cursor together with the last known totals."""
        return PaginationState(
            current_page=self.current_page,
            page_size=self.page_size,
            total_items=self._total_items or 0,
            total_pages=self.total_pages,
        )

    async def fetch(self) -> PaginatedResult[T]:
        """Fetch the page under the cursor.

        A result that arrives after the page size changed is returned to the
        caller but not applied, so clamping never uses totals computed for a
        different page size.

        Returns:
            PaginatedResult with the page data and its pagination state
        """
        page, page_size = self.current_page, self.page_size
        raw = await self._fetch_fn(page, page_size)
        page_result = raw if isinstance(raw, PageResult) else PageResult.model_validate(raw)

        result = PaginatedResult(
            data=page_result.data,
            pagination=PaginationState(
                current_page=page,
                page_size=page_size,
                total_items=page_result.total,
                total_pages=total_pages_for(page_result.total, page_size),
            ),
        )

        if page_size == self.page_size:
            self._total_items = page_result.total
            self.last_result = result

        print_pagination_state(result.pagination, applied=page_size == self.page_size)
        return result

    def go_to_page(self, page: int) -> int:
        """Move the cursor to ``page``, clamped into [1, total_pages].

        Returns:
            The new current page
        """
        self.current_page = max(1, min(int(page), self.total_pages))
        return self.current_page

    def next_page(self) -> int:
        if self.current_page < self.total_pages:
            self.current_page += 1
        return self.current_page

    def prev_page(self) -> int:
        if self.current_page > 1:
            self.current_page -= 1
        return self.current_page

    def set_page_size(self, size: int) -> None:
        """Change the page size and go back to the first page.

        Args:
            size: New page size (> 0)
        """
        if size <= 0:
            raise ValueError(f"page size must be positive, got {size}")
        self.page_size = size
        self.current_page = 1
