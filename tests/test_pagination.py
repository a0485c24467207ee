"""Tests for the paginated query controller."""

import asyncio

import pytest

from workflow.models import PageResult
from workflow.pagination import PaginatedQueryController, total_pages_for


def make_fetcher(total: int, calls: list | None = None):
    """Fetch function over range(total)."""
    items = list(range(total))

    async def fetch(page: int, page_size: int):
        if calls is not None:
            calls.append((page, page_size))
        start = (page - 1) * page_size
        return {"data": items[start:start + page_size], "total": total}

    return fetch


@pytest.mark.parametrize(
    "total, page_size, expected",
    [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (95, 10, 10), (100, 1, 100), (7, 3, 3)],
)
def test_total_pages_for(total, page_size, expected):
    assert total_pages_for(total, page_size) == expected


def test_total_pages_for_rejects_bad_input():
    with pytest.raises(ValueError):
        total_pages_for(10, 0)
    with pytest.raises(ValueError):
        total_pages_for(-1, 10)


def test_initial_state():
    """Before any result, the controller reports a single page."""
    controller = PaginatedQueryController(make_fetcher(0), initial_page_size=10)
    state = controller.pagination
    assert state.current_page == 1
    assert state.page_size == 10
    assert state.total_items == 0
    assert state.total_pages == 1


@pytest.mark.asyncio
async def test_fetch_empty_collection():
    """total=0 yields one page, never zero."""
    controller = PaginatedQueryController(make_fetcher(0), initial_page_size=10)

    result = await controller.fetch()

    assert result.data == []
    assert result.pagination.total_pages == 1
    assert result.pagination.current_page == 1


@pytest.mark.asyncio
async def test_fetch_passes_cursor_and_builds_result():
    calls = []
    controller = PaginatedQueryController(make_fetcher(95, calls), initial_page_size=10)

    result = await controller.fetch()

    assert calls == [(1, 10)]
    assert result.data == list(range(10))
    assert result.pagination.total_items == 95
    assert result.pagination.total_pages == 10
    assert controller.last_result == result


@pytest.mark.asyncio
async def test_fetch_accepts_page_result_model():
    async def fetch(page, page_size):
        return PageResult(data=["a", "b"], total=2)

    controller = PaginatedQueryController(fetch, initial_page_size=5)
    result = await controller.fetch()

    assert result.data == ["a", "b"]
    assert result.pagination.total_pages == 1


@pytest.mark.asyncio
async def test_go_to_page_clamps():
    """total=95, pageSize=10: goToPage(15) -> 10, goToPage(-3) -> 1."""
    controller = PaginatedQueryController(make_fetcher(95), initial_page_size=10)
    await controller.fetch()

    assert controller.go_to_page(15) == 10
    assert controller.current_page == 10
    assert controller.go_to_page(-3) == 1
    assert controller.go_to_page(0) == 1
    assert controller.go_to_page(4) == 4


def test_go_to_page_before_any_result():
    controller = PaginatedQueryController(make_fetcher(95), initial_page_size=10)
    assert controller.go_to_page(5) == 1


@pytest.mark.asyncio
async def test_next_and_prev_stop_at_bounds():
    controller = PaginatedQueryController(make_fetcher(25), initial_page_size=10)
    await controller.fetch()

    assert controller.prev_page() == 1
    assert controller.next_page() == 2
    assert controller.next_page() == 3
    assert controller.next_page() == 3
    assert controller.prev_page() == 2


@pytest.mark.asyncio
async def test_fetch_follows_navigation():
    calls = []
    controller = PaginatedQueryController(make_fetcher(25, calls), initial_page_size=10)
    await controller.fetch()
    controller.next_page()

    result = await controller.fetch()

    assert calls[-1] == (2, 10)
    assert result.data == list(range(10, 20))
    assert result.pagination.current_page == 2


@pytest.mark.asyncio
async def test_set_page_size_resets_to_first_page():
    controller = PaginatedQueryController(make_fetcher(95), initial_page_size=10)
    await controller.fetch()
    controller.go_to_page(7)

    controller.set_page_size(20)

    assert controller.current_page == 1
    assert controller.page_size == 20
    assert controller.total_pages == 5


def test_set_page_size_rejects_non_positive():
    controller = PaginatedQueryController(make_fetcher(5))
    with pytest.raises(ValueError):
        controller.set_page_size(0)


@pytest.mark.asyncio
async def test_stale_result_after_page_size_change_is_not_applied():
    """A page fetched with the old size must not drive clamping afterwards."""
    release = asyncio.Event()

    async def slow_fetch(page, page_size):
        await release.wait()
        return {"data": [], "total": 95}

    controller = PaginatedQueryController(slow_fetch, initial_page_size=5)
    in_flight = asyncio.ensure_future(controller.fetch())
    await asyncio.sleep(0)

    controller.set_page_size(50)
    release.set()
    stale = await in_flight

    assert stale.pagination.total_pages == 19
    assert controller.last_result is None
    assert controller.total_pages == 1
    assert controller.go_to_page(19) == 1


@pytest.mark.asyncio
async def test_fetch_errors_propagate():
    calls = []

    async def broken(page, page_size):
        calls.append(page)
        raise RuntimeError("backend down")

    controller = PaginatedQueryController(broken)

    with pytest.raises(RuntimeError, match="backend down"):
        await controller.fetch()
    assert calls == [1]
    assert controller.last_result is None


def test_rejects_invalid_initial_cursor():
    with pytest.raises(ValueError):
        PaginatedQueryController(make_fetcher(1), initial_page=0)
    with pytest.raises(ValueError):
        PaginatedQueryController(make_fetcher(1), initial_page_size=0)
