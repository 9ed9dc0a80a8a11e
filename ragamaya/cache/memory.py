"""In-process cache with per-key expiry and a background sweeper."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ragamaya.cache.base import Cache, CacheMiss, CacheOptions

CLEANUP_INTERVAL = 60.0


@dataclass
class _Item:
    value: bytes
    expires_at: float | None


class MemoryCache(Cache):
    """A thread-safe dictionary cache. Times come from ``clock`` in seconds."""

    def __init__(
        self,
        opts: CacheOptions | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.opts = opts if opts is not None else CacheOptions()
        self._clock = clock
        self._data: dict[str, _Item] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper = threading.Thread(
            target=self._sweep_loop, name="memory-cache-cleanup", daemon=True
        )
        self._sweeper.start()

    def _sweep_loop(self) -> None:
        while not self._stop.wait(CLEANUP_INTERVAL):
            self.cleanup()

    def _expired(self, item: _Item, now: float) -> bool:
        return item.expires_at is not None and now > item.expires_at

    def get(self, key: str) -> bytes:
        key = self.opts.prefix + key
        with self._lock:
            item = self._data.get(key)
            if item is None:
                raise CacheMiss(f"key not found: {key}")
            if self._expired(item, self._clock()):
                del self._data[key]
                raise CacheMiss(f"key expired: {key}")
            return item.value

    def set(self, key: str, value: bytes, expiration: float = 0) -> None:
        key = self.opts.prefix + key
        now = self._clock()
        if expiration > 0:
            expires_at = now + expiration
        elif self.opts.default_ttl > 0:
            expires_at = now + self.opts.default_ttl
        else:
            expires_at = None
        with self._lock:
            self._data[key] = _Item(bytes(value), expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(self.opts.prefix + key, None)

    def exists(self, key: str) -> bool:
        key = self.opts.prefix + key
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return False
            if self._expired(item, self._clock()):
                del self._data[key]
                return False
            return True

    def flush(self) -> None:
        with self._lock:
            self._data.clear()

    def close(self) -> None:
        """Stop the background sweeper; stored data stays readable."""
        self._stop.set()

    def cleanup(self) -> None:
        """Remove every expired item."""
        now = self._clock()
        with self._lock:
            for key in [k for k, item in self._data.items() if self._expired(item, now)]:
                del self._data[key]

    def stats(self) -> dict:
        """Return the number of stored items and the configured maximum."""
        with self._lock:
            size = len(self._data)
        return {"size": size, "max_size": self.opts.max_size}

    def keys(self) -> list[str]:
        """Return the stored keys without the prefix."""
        prefix_len = len(self.opts.prefix)
        with self._lock:
            return [k[prefix_len:] for k in self._data if len(k) > prefix_len]

    def invalidate_pattern(self, pattern: str) -> None:
        """Remove every key containing the prefixed ``pattern`` as a substring."""
        pattern = self.opts.prefix + pattern
        with self._lock:
            for key in [k for k in self._data if pattern in k]:
                del self._data[key]