"""Document page adapter layer.

Turns a collection of the document store into a page-fetching function for
``workflow.pagination.PaginatedQueryController``. This keeps store access out
of the controller, which only knows about (page, page_size) -> PageResult.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from config import COLLECTIONS
from database.appwrite.client import DocumentStoreClient
from database.appwrite.query import Query
from workflow.models import PageResult

DocumentFetcher = Callable[[int, int], Awaitable[PageResult]]


def page_queries(page: int, page_size: int) -> List[str]:
    """Limit/offset queries selecting one page.

    Args:
        page: 1-based page number
        page_size: Items per page
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return [Query.limit(page_size), Query.offset((page - 1) * page_size)]


def document_page_fetcher(
    client: DocumentStoreClient,
    database_id: str,
    collection_id: str,
    queries: Optional[Sequence[str]] = None,
    order_by: Optional[str] = None,
    descending: bool = False,
) -> DocumentFetcher:
    """Build a page-fetching function over a collection.

    Args:
        client: Document store client
        database_id: Database identifier
        collection_id: Collection identifier
        queries: Extra filter queries applied to every page
        order_by: Attribute to sort on (optional)
        descending: Sort direction when order_by is set

    Returns:
        Async function (page, page_size) -> PageResult of raw documents
    """
    base_queries = list(queries or [])
    if order_by:
        base_queries.append(Query.order_desc(order_by) if descending else Query.order_asc(order_by))

    async def fetch_page(page: int, page_size: int) -> PageResult[Dict[str, Any]]:
        result = await client.list_documents(
            database_id,
            collection_id,
            base_queries + page_queries(page, page_size),
        )
        return PageResult[Dict[str, Any]](data=result.documents, total=result.total)

    return fetch_page


def client_page_fetcher(
    client: DocumentStoreClient,
    database_id: str,
    store_id: Optional[str] = None,
) -> DocumentFetcher:
    """Page through CRM clients, newest first, optionally for one store.

    Args:
        client: Document store client
        database_id: Database identifier
        store_id: Restrict to clients of this store (optional)
    """
    queries = [Query.equal("storeId", store_id)] if store_id else []
    return document_page_fetcher(
        client,
        database_id,
        COLLECTIONS["clients"],
        queries=queries,
        order_by="$createdAt",
        descending=True,
    )
