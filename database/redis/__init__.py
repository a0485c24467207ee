"""Key-value persistence for cached authorizations."""

from database.redis.schema import (
    KeyValueStore,
    InMemoryKeyValueStore,
    RedisKeyValueStore,
    StorageError,
    UndecodableValueError,
)
from database.redis.models import AccessAuthorization

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "StorageError",
    "UndecodableValueError",
    "AccessAuthorization",
]
