"""Redis-backed local cache."""

from collections.abc import Iterator

import redis


class RedisLocalCache:
    """Redis implementation of LocalCache using plain GET/SET/DEL + SCAN."""

    def __init__(self, redis_client: redis.Redis, namespace: str = "formflow") -> None:
        """Initialize cache.

        Args:
            redis_client: Redis client created with ``decode_responses=True``
            namespace: Key prefix isolating this application's keys
        """
        self._redis = redis_client
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> str | None:
        """Get value for key."""
        value = self._redis.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value  # type: ignore[return-value]

    def set(self, key: str, value: str) -> None:
        """Store value under key."""
        self._redis.set(self._key(key), value)

    def delete(self, key: str) -> None:
        """Remove key if present."""
        self._redis.delete(self._key(key))

    def scan(self, prefix: str) -> Iterator[str]:
        """Iterate over keys starting with prefix."""
        strip = len(self._namespace) + 1
        for raw in self._redis.scan_iter(match=f"{self._key(prefix)}*"):
            key = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            yield key[strip:]


def create_redis_cache(redis_url: str) -> RedisLocalCache:
    """Create a RedisLocalCache from a connection URL."""
    client = redis.from_url(redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
    return RedisLocalCache(client)
