"""Database package."""

from database.debug import (
    test_redis_connection,
    test_document_store_connection,
    print_database_status,
    is_debug_enabled,
)

__all__ = [
    "test_redis_connection",
    "test_document_store_connection",
    "print_database_status",
    "is_debug_enabled",
]
