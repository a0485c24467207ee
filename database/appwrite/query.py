"""Query strings understood by the document store's list endpoint."""

import json
from typing import Any


def _encode(method: str, attribute: str | None = None, values: list[Any] | None = None) -> str:
    payload: dict[str, Any] = {"method": method}
    if attribute is not None:
        payload["attribute"] = attribute
    if values is not None:
        payload["values"] = values
    return json.dumps(payload, separators=(",", ":"))


class Query:
    """Builders for filter, ordering and paging queries.

    Example:
        ```python
        queries = [Query.equal("code", "ABC123"), Query.limit(1)]
        result = await client.list_documents(database_id, "access_codes", queries)
        ```
    """

    @staticmethod
    def equal(attribute: str, value: Any) -> str:
        values = value if isinstance(value, list) else [value]
        return _encode("equal", attribute, values)

    @staticmethod
    def limit(limit: int) -> str:
        return _encode("limit", values=[limit])

    @staticmethod
    def offset(offset: int) -> str:
        return _encode("offset", values=[offset])

    @staticmethod
    def order_asc(attribute: str) -> str:
        return _encode("orderAsc", attribute)

    @staticmethod
    def order_desc(attribute: str) -> str:
        return _encode("orderDesc", attribute)
