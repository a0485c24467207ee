"""Key-value persistence port and its Redis / in-memory implementations."""

from typing import Dict, Optional, Protocol
from redis import Redis
from redis.exceptions import RedisError


class KeyValueStore(Protocol):
    """String key-value storage, modeled on browser local storage."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store. Useful for tests and single-user tools."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class StorageError(RuntimeError):
    """Raised when the key-value backend cannot be read or written."""


class UndecodableValueError(StorageError):
    """Raised when a stored value is not valid UTF-8 text."""

    def __init__(self, key: str):
        super().__init__(f"Value under {key!r} is not valid UTF-8")
        self.key = key


class RedisKeyValueStore:
    """Stores values as plain Redis strings.

    Key naming: {namespace}:{key}
    Data structure: String
    Methods: GET, SET (with optional EX), DEL

    Redis failures surface as StorageError.
    """

    def __init__(
        self,
        redis_client: Redis,
        namespace: str = "crm:gate",
        ttl: Optional[int] = None,
    ):
        """Initialize the store.

        Args:
            redis_client: Redis client, with or without decode_responses
            namespace: Key prefix, typically one per user or chat session
            ttl: Time to live in seconds applied on every write (optional)
        """
        self.redis_client = redis_client
        self.namespace = namespace
        self.ttl = ttl

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis_client.get(self._key(key))
            if isinstance(value, bytes):
                value = value.decode("utf-8")
        except UnicodeDecodeError as e:
            # decode_responses=True clients raise this from inside GET
            raise UndecodableValueError(key) from e
        except RedisError as e:
            raise StorageError(f"Redis GET failed for {key!r}: {e}") from e
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.redis_client.set(self._key(key), value, ex=self.ttl)
        except RedisError as e:
            raise StorageError(f"Redis SET failed for {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.redis_client.delete(self._key(key))
        except RedisError as e:
            raise StorageError(f"Redis DEL failed for {key!r}: {e}") from e
