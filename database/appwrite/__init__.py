"""Client for the hosted document store (databases / collections / documents)."""

from database.appwrite.client import (
    DocumentStoreClient,
    DocumentStoreError,
    DocumentNotFoundError,
)
from database.appwrite.models import DocumentList, AccessCode
from database.appwrite.query import Query
from database.appwrite.access_code_service import AccessCodeService

__all__ = [
    "DocumentStoreClient",
    "DocumentStoreError",
    "DocumentNotFoundError",
    "DocumentList",
    "AccessCode",
    "Query",
    "AccessCodeService",
]
