"""Business-level services built on a cache: users, products and statistics."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from ragamaya import logger
from ragamaya.cache.base import Cache, CacheHelper
from ragamaya.cache.memory import MemoryCache
from ragamaya.cache.redis_store import RedisCache

USER_TTL = 10 * 60
USER_LIST_TTL = 5 * 60
PRODUCT_TTL = 60 * 60
PRICE_TTL = 5 * 60
SAMPLE_PRICE = 99.99


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class CacheService:
    """A cache together with its JSON helper."""

    def __init__(self, cache: Cache):
        self.cache = cache
        self.helper = CacheHelper(cache)


@dataclass
class User:
    id: str
    name: str
    email: str
    created: datetime
    modified: datetime

    @classmethod
    def _from_dict(cls, data: dict) -> User:
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            created=_parse_time(data["created"]),
            modified=_parse_time(data["modified"]),
        )


class UserService:
    """User lookups with read-through caching."""

    def __init__(
        self,
        cache_service: CacheService,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.cache_service = cache_service
        self._clock = clock

    def get_user(self, user_id: str) -> User:
        """Return the user, loading and caching it on a miss."""

        def load() -> tuple[User, float]:
            now = self._clock()
            user = User(
                id=user_id,
                name="John Doe",
                email="john@example.com",
                created=now - timedelta(hours=24),
                modified=now,
            )
            return user, USER_TTL

        data = self.cache_service.helper.get_or_set_json(f"user:{user_id}", load)
        return User._from_dict(data)

    def update_user(self, user_id: str, updates: dict) -> None:
        """Apply ``updates`` and drop the cached user and user lists.

        Cache failures are logged, never raised.
        """
        cache = self.cache_service.cache
        try:
            cache.delete(f"user:{user_id}")
        except Exception as exc:
            logger.error("Failed to invalidate cache for user %s: %s", user_id, exc)
        try:
            cache.invalidate_pattern("users:*")
        except Exception as exc:
            logger.error("Failed to invalidate user list cache: %s", exc)

    def get_users(self, page: int, limit: int) -> list[User]:
        """Return a page of users, cached per page and limit."""

        def load() -> tuple[list[User], float]:
            now = self._clock()
            users = [
                User("1", "John Doe", "john@example.com", now - timedelta(hours=24), now),
                User("2", "Jane Smith", "jane@example.com", now - timedelta(hours=12), now),
            ]
            return users, USER_LIST_TTL

        key = f"users:page:{page}:limit:{limit}"
        data = self.cache_service.helper.get_or_set_json(key, load)
        return [User._from_dict(item) for item in data]


@dataclass
class Product:
    id: str
    name: str
    price: float
    description: str
    category: str


class ProductService:
    """Product lookups: long-lived details, short-lived prices."""

    def __init__(self, cache_service: CacheService):
        self.cache_service = cache_service

    def get_product(self, product_id: str) -> Product:
        def load() -> tuple[Product, float]:
            product = Product(
                id=product_id,
                name="Sample Product",
                price=SAMPLE_PRICE,
                description="A sample product description",
                category="Electronics",
            )
            return product, PRODUCT_TTL

        data = self.cache_service.helper.get_or_set_json(f"product:{product_id}", load)
        return Product(
            id=data["id"],
            name=data["name"],
            price=float(data["price"]),
            description=data["description"],
            category=data["category"],
        )

    def get_product_price(self, product_id: str) -> float:
        data = self.cache_service.helper.get_or_set_json(
            f"product_price:{product_id}", lambda: (SAMPLE_PRICE, PRICE_TTL)
        )
        return float(data)


class CacheStatsService:
    """Statistics and bulk management of the underlying cache."""

    def __init__(self, cache_service: CacheService):
        self.cache_service = cache_service

    def get_stats(self) -> dict:
        cache = self.cache_service.cache
        stats: dict[str, Any] = {"cache_type": "unknown"}
        if isinstance(cache, RedisCache):
            stats["cache_type"] = "redis"
        elif isinstance(cache, MemoryCache):
            stats["cache_type"] = "memory"
            stats["memory_stats"] = cache.stats()
        return stats

    def flush_cache(self) -> None:
        self.cache_service.cache.flush()

    def invalidate_pattern(self, pattern: str) -> None:
        self.cache_service.cache.invalidate_pattern(pattern)