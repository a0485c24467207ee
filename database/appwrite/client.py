"""Async HTTP client for the hosted document store."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from database.appwrite.models import DocumentList


class DocumentStoreError(RuntimeError):
    """Raised when the document store cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, error_type: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_type = error_type


class DocumentNotFoundError(DocumentStoreError):
    pass


class DocumentStoreClient:
    """Talks to the document store REST API.

    Documents are addressed by database id, collection id and document id.
    One client is meant to live for the whole process; close it with
    ``aclose()`` or use it as an async context manager.
    """

    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            endpoint: Base API URL, e.g. https://cloud.appwrite.io/v1
            project_id: Project identifier sent with every request
            api_key: Server API key (optional, browser-style sessions omit it)
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        if not endpoint:
            raise ValueError("endpoint is required")
        headers = {
            "X-Appwrite-Project": project_id,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if api_key:
            headers["X-Appwrite-Key"] = api_key

        self.endpoint = endpoint.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.endpoint,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "DocumentStoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _collection_path(database_id: str, collection_id: str) -> str:
        if not database_id or not collection_id:
            raise ValueError("database_id and collection_id are required")
        return f"/databases/{quote(database_id, safe='')}/collections/{quote(collection_id, safe='')}/documents"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            resp = await self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            raise DocumentStoreError(f"Document store request failed ({method} {path}): {e}") from e

        if resp.status_code >= 400:
            message, error_type = f"HTTP {resp.status_code}", None
            try:
                body = resp.json()
                message = body.get("message") or message
                error_type = body.get("type")
            except ValueError:
                if resp.text:
                    message = f"{message}: {resp.text[:300]}"
            error_cls = DocumentNotFoundError if resp.status_code == 404 else DocumentStoreError
            raise error_cls(message, status_code=resp.status_code, error_type=error_type)

        try:
            data = resp.json()
        except ValueError as e:
            raise DocumentStoreError(f"Invalid JSON from document store ({path})", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise DocumentStoreError(f"Unexpected payload from document store ({path})", status_code=resp.status_code)
        return data

    async def list_documents(
        self,
        database_id: str,
        collection_id: str,
        queries: Optional[List[str]] = None,
    ) -> DocumentList:
        """List documents of a collection.

        Args:
            database_id: Database identifier
            collection_id: Collection identifier
            queries: Encoded queries (see ``database.appwrite.query.Query``)

        Returns:
            DocumentList with the total match count and the returned page
        """
        params = {"queries[]": list(queries)} if queries else None
        data = await self._request("GET", self._collection_path(database_id, collection_id), params=params)
        try:
            return DocumentList.model_validate(data)
        except ValueError as e:
            raise DocumentStoreError(f"Malformed document list for {collection_id}") from e

    async def get_document(self, database_id: str, collection_id: str, document_id: str) -> Dict[str, Any]:
        if not document_id:
            raise ValueError("document_id is required")
        path = f"{self._collection_path(database_id, collection_id)}/{quote(document_id, safe='')}"
        return await self._request("GET", path)

    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        data: Dict[str, Any],
        document_id: str = "unique()",
        permissions: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Create a document.

        Args:
            database_id: Database identifier
            collection_id: Collection identifier
            data: Document attributes
            document_id: Explicit id, or "unique()" to let the store generate one
            permissions: Optional permission strings, e.g. 'read("any")'

        Returns:
            The created document as returned by the store
        """
        payload: Dict[str, Any] = {"documentId": document_id, "data": data}
        if permissions is not None:
            payload["permissions"] = permissions
        return await self._request("POST", self._collection_path(database_id, collection_id), json=payload)
