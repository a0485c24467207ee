"""Connection utilities for the remote document store and Redis."""

from typing import Optional
from redis import Redis
from pydantic_settings import BaseSettings, SettingsConfigDict

from database.appwrite.client import DocumentStoreClient


class DatabaseSettings(BaseSettings):
    """Backend configuration settings."""

    appwrite_endpoint: str = "https://cloud.appwrite.io/v1"
    appwrite_project_id: str = ""
    appwrite_api_key: Optional[str] = None
    appwrite_database_id: str = ""
    http_timeout: float = 30.0

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields from .env that are not backend-related
    )


class DatabaseManager:
    """Owns the document store client and the Redis client for one process.

    Construct it once at startup and pass it (or the clients it hands out)
    to whatever needs the backend.
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        """Initialize database manager.

        Args:
            settings: Backend settings, defaults to loading from environment
        """
        self.settings = settings or DatabaseSettings()
        self._document_store: Optional[DocumentStoreClient] = None
        self._redis_client: Optional[Redis] = None

    @property
    def database_id(self) -> str:
        return self.settings.appwrite_database_id

    def get_document_store(self) -> DocumentStoreClient:
        """Get the document store client, creating it on first use.

        Returns:
            DocumentStoreClient bound to the configured endpoint and project
        """
        if self._document_store is None:
            self._document_store = DocumentStoreClient(
                endpoint=self.settings.appwrite_endpoint,
                project_id=self.settings.appwrite_project_id,
                api_key=self.settings.appwrite_api_key,
                timeout=self.settings.http_timeout,
            )
        return self._document_store

    def connect_redis(self) -> Redis:
        """Connect to Redis.

        Returns:
            Redis client
        """
        if self._redis_client is None:
            self._redis_client = Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                decode_responses=True,
            )
        return self._redis_client

    async def close_all(self) -> None:
        """Close all backend connections."""
        if self._document_store:
            await self._document_store.aclose()
            self._document_store = None
        if self._redis_client:
            self._redis_client.close()
            self._redis_client = None
