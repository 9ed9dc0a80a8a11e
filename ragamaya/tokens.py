"""Revocation list of access tokens kept in Redis."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from datetime import datetime, timezone

import redis

BLACKLIST_PREFIX = "blacklist:"
DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep:
        return address or DEFAULT_REDIS_HOST, DEFAULT_REDIS_PORT
    return host or DEFAULT_REDIS_HOST, int(port) if port else DEFAULT_REDIS_PORT


class TokenBlacklist:
    """Tokens that must no longer be accepted, each kept until it expires.

    ``clock`` returns the current time; compare it with timezone-aware
    expiry times unless both are naive.
    """

    def __init__(self, client, clock: Callable[[], datetime] = _utc_now):
        self.client = client
        self._clock = clock

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TokenBlacklist:
        """Connect to the Redis server named by REDIS_ADDR and REDIS_PASS."""
        source = os.environ if environ is None else environ
        host, port = _split_address(source.get("REDIS_ADDR", ""))
        password = source.get("REDIS_PASS") or None
        return cls(redis.Redis(host=host, port=port, password=password, db=0))

    def blacklist(self, token: str, expires_at: datetime) -> None:
        """Revoke ``token`` until ``expires_at``.

        A token whose expiry has already passed is stored without expiry.
        """
        remaining = (expires_at - self._clock()).total_seconds()
        px = max(1, int(remaining * 1000)) if remaining > 0 else None
        self.client.set(BLACKLIST_PREFIX + token, "1", px=px)

    def is_blacklisted(self, token: str) -> bool:
        return self.client.exists(BLACKLIST_PREFIX + token) == 1