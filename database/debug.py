"""Debug utilities for backend connections."""

import os
from database.connection import DatabaseManager
from database.appwrite.client import DocumentStoreError
from database.appwrite.query import Query
from redis.exceptions import RedisError


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled.

    Returns:
        True if DEBUG environment variable is set to 'true' or '1'
    """
    debug = os.getenv("DEBUG", "false").lower()
    return debug in ("true", "1", "yes")


def test_redis_connection(manager: DatabaseManager) -> bool:
    """Test Redis connection.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        manager.connect_redis().ping()
        if is_debug_enabled():
            print("✅ Redis connection: OK")
        return True
    except RedisError as e:
        if is_debug_enabled():
            print(f"❌ Redis connection failed: {e}")
        return False


async def test_document_store_connection(manager: DatabaseManager, collection_id: str = "access_codes") -> bool:
    """Test the document store by listing at most one document.

    Returns:
        True if the store answered, False otherwise
    """
    try:
        await manager.get_document_store().list_documents(
            manager.database_id, collection_id, [Query.limit(1)]
        )
        if is_debug_enabled():
            print("✅ Document store connection: OK")
        return True
    except (DocumentStoreError, ValueError) as e:
        if is_debug_enabled():
            print(f"❌ Document store connection failed: {e}")
        return False


async def print_database_status(manager: DatabaseManager) -> None:
    """Print status of all backend connections."""
    if not is_debug_enabled():
        return

    print("\n" + "=" * 80)
    print("🗄️  BACKEND CONNECTION STATUS")
    print("=" * 80)

    await test_document_store_connection(manager)
    test_redis_connection(manager)

    print("=" * 80 + "\n")
