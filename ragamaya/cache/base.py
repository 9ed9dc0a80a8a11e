"""Cache contract, options, a registry of named caches and JSON helpers."""

from __future__ import annotations

import base64
import contextlib
import dataclasses
import json
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


class CacheMiss(LookupError):
    """The requested key is absent from the cache or has expired."""


class Cache(ABC):
    """Contract for every cache backend. Expirations are in seconds."""

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the value stored under ``key`` or raise CacheMiss."""

    @abstractmethod
    def set(self, key: str, value: bytes, expiration: float = 0) -> None:
        """Store ``value`` under ``key``; an expiration of 0 means the default."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Tell whether ``key`` holds a live value."""

    @abstractmethod
    def flush(self) -> None:
        """Remove every key owned by this cache."""

    @abstractmethod
    def invalidate_pattern(self, pattern: str) -> None:
        """Remove every key matching ``pattern``."""

    @abstractmethod
    def close(self) -> None:
        """Release the resources held by the cache."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@dataclass
class CacheOptions:
    """Settings shared by cache implementations."""

    default_ttl: float = 5 * 60
    max_size: int = 1000
    prefix: str = "cache:"


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _dumps(value: Any) -> bytes:
    return json.dumps(value, default=_json_default).encode("utf-8")


class CacheManager:
    """A registry of named caches."""

    def __init__(self, opts: CacheOptions | None = None):
        self.opts = opts if opts is not None else CacheOptions()
        self._caches: dict[str, Cache] = {}

    def register_cache(self, name: str, cache: Cache) -> None:
        self._caches[name] = cache

    def get_cache(self, name: str) -> Cache:
        """Return the cache registered as ``name`` or raise KeyError."""
        try:
            return self._caches[name]
        except KeyError:
            raise KeyError(f"cache '{name}' not found") from None

    def close_all(self) -> None:
        """Close every registered cache, stopping at the first failure."""
        for name, cache in self._caches.items():
            try:
                cache.close()
            except Exception as exc:
                raise RuntimeError(f"failed to close cache '{name}': {exc}") from exc

    def cache_key(self, key: str) -> str:
        return self.opts.prefix + key


class CacheHelper:
    """JSON storage and read-through helpers on top of a cache."""

    def __init__(self, cache: Cache, opts: CacheOptions | None = None):
        self.cache = cache
        self.opts = opts if opts is not None else CacheOptions()

    def get_json(self, key: str) -> Any:
        """Return the decoded JSON value under ``key``."""
        return json.loads(self.cache.get(key))

    def set_json(self, key: str, value: Any, expiration: float = 0) -> None:
        """Encode ``value`` as JSON and store it; 0 means the default TTL."""
        data = _dumps(value)
        if expiration == 0:
            expiration = self.opts.default_ttl
        self.cache.set(key, data, expiration)

    def get_or_set(self, key: str, fn: Callable[[], tuple[bytes, float]]) -> bytes:
        """Return the cached bytes, or compute them with ``fn`` and store them.

        ``fn`` returns the value and its expiration. Failure to store is ignored.
        """
        try:
            return self.cache.get(key)
        except Exception:
            pass
        data, expiration = fn()
        with contextlib.suppress(Exception):
            self.cache.set(key, data, expiration)
        return data

    def get_or_set_json(self, key: str, fn: Callable[[], tuple[Any, float]]) -> Any:
        """Return the cached JSON value, or compute it with ``fn`` and store it.

        The result is always the JSON-decoded form of the value.
        """
        try:
            return self.get_json(key)
        except Exception:
            pass
        value, expiration = fn()
        with contextlib.suppress(Exception):
            self.set_json(key, value, expiration)
        return json.loads(_dumps(value))

    def invalidate_pattern(self, pattern: str) -> None:
        self.cache.invalidate_pattern(pattern)