"""Cache backed by a Redis client, with every key under a common prefix."""

from __future__ import annotations

from ragamaya.cache.base import Cache, CacheMiss, CacheOptions


def _as_bytes(value) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    return str(value).encode("utf-8")


class RedisCache(Cache):
    """A cache over a ``redis.Redis`` client. Expirations are in seconds."""

    def __init__(self, client, opts: CacheOptions | None = None):
        self.client = client
        self.opts = opts if opts is not None else CacheOptions()

    def _key(self, key: str) -> str:
        return self.opts.prefix + key

    def _ttl_ms(self, expiration: float) -> int | None:
        if expiration == 0:
            expiration = self.opts.default_ttl
        if expiration > 0:
            return max(1, int(expiration * 1000))
        return None

    def get(self, key: str) -> bytes:
        key = self._key(key)
        result = self.client.get(key)
        if result is None:
            raise CacheMiss(f"key not found: {key}")
        return _as_bytes(result)

    def set(self, key: str, value: bytes, expiration: float = 0) -> None:
        self.client.set(self._key(key), value, px=self._ttl_ms(expiration))

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))

    def exists(self, key: str) -> bool:
        return self.client.exists(self._key(key)) > 0

    def _delete_matching(self, pattern: str) -> None:
        keys = self.client.keys(pattern)
        if keys:
            self.client.delete(*keys)

    def flush(self) -> None:
        """Remove every key under this cache's prefix."""
        self._delete_matching(self.opts.prefix + "*")

    def close(self) -> None:
        self.client.close()

    def invalidate_pattern(self, pattern: str) -> None:
        """Remove every key matching the prefixed glob ``pattern``."""
        self._delete_matching(self.opts.prefix + pattern)

    def ttl(self, key: str) -> float:
        """Return the remaining lifetime in seconds.

        -1 means the key has no expiry and -2 that it does not exist.
        """
        ms = self.client.pttl(self._key(key))
        if ms < 0:
            return float(ms)
        return ms / 1000

    def set_nx(self, key: str, value: bytes, expiration: float = 0) -> bool:
        """Store ``value`` only if ``key`` is absent; tell whether it was stored."""
        result = self.client.set(self._key(key), value, px=self._ttl_ms(expiration), nx=True)
        return bool(result)

    def increment(self, key: str, value: int) -> int:
        return int(self.client.incrby(self._key(key), value))

    def decrement(self, key: str, value: int) -> int:
        return int(self.client.decrby(self._key(key), value))

    def get_many(self, keys: list[str]) -> dict[str, bytes]:
        """Return the values of the keys that exist, by unprefixed key."""
        keys = list(keys)
        if not keys:
            return {}
        results = self.client.mget([self._key(k) for k in keys])
        return {
            key: _as_bytes(result)
            for key, result in zip(keys, results)
            if result is not None
        }

    def set_many(self, data: dict[str, bytes], expiration: float = 0) -> None:
        """Store several values in one pipeline with a common expiration."""
        px = self._ttl_ms(expiration)
        pipe = self.client.pipeline()
        for key, value in data.items():
            pipe.set(self._key(key), value, px=px)
        pipe.execute()