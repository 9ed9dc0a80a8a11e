"""Health checks of the database and Redis connections."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
ERROR = "error"

_UNITS = (("µs", 1_000), ("ms", 1_000_000))


def _fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    digits = len(str(unit)) - 1
    frac_text = f"{frac:0{digits}d}".rstrip("0")
    return f"{whole}.{frac_text}" if frac_text else str(whole)


def _format_duration(seconds: float) -> str:
    """Format a duration the way latencies are reported, e.g. ``1.234ms``."""
    ns = round(seconds * 1_000_000_000)
    if ns == 0:
        return "0s"
    if ns < 1_000:
        return f"{ns}ns"
    if ns < 1_000_000:
        return _fraction(ns, 1_000) + "µs"
    if ns < 1_000_000_000:
        return _fraction(ns, 1_000_000) + "ms"
    hours, rest = divmod(ns, 3600 * 1_000_000_000)
    minutes, rest = divmod(rest, 60 * 1_000_000_000)
    text = _fraction(rest, 1_000_000_000) + "s"
    if hours:
        return f"{hours}h{minutes}m{text}"
    if minutes:
        return f"{minutes}m{text}"
    return text


@dataclass
class ServiceStatus:
    status: str
    message: str = ""
    latency: str = ""


def _status_dict(status: ServiceStatus) -> dict:
    data = {"status": status.status}
    if status.message:
        data["message"] = status.message
    if status.latency:
        data["latency"] = status.latency
    return data


@dataclass
class HealthCheck:
    status: str
    timestamp: datetime
    services: dict[str, ServiceStatus] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Return the JSON body of the health endpoint."""
        return {
            "status": self.status,
            "timestamp": self.timestamp.isoformat(),
            "services": {name: _status_dict(s) for name, s in self.services.items()},
        }

    def http_status(self) -> int:
        if self.status == UNHEALTHY:
            return HTTPStatus.SERVICE_UNAVAILABLE
        return HTTPStatus.OK


def check_database_health(ping: Callable[[], object] | None) -> ServiceStatus:
    """Run ``ping`` against the database and time it."""
    start = time.perf_counter()
    if ping is None:
        return ServiceStatus(ERROR, "Failed to get database instance: database not configured")
    try:
        ping()
    except Exception as exc:
        latency = _format_duration(time.perf_counter() - start)
        return ServiceStatus(ERROR, f"Database connection failed: {exc}", latency)
    latency = _format_duration(time.perf_counter() - start)
    return ServiceStatus(HEALTHY, "Database connection successful", latency)


def check_redis_health(client) -> ServiceStatus:
    """Ping a Redis client and time it."""
    start = time.perf_counter()
    if client is None:
        return ServiceStatus(ERROR, "Redis client not initialized")
    try:
        client.ping()
    except Exception as exc:
        latency = _format_duration(time.perf_counter() - start)
        return ServiceStatus(ERROR, f"Redis connection failed: {exc}", latency)
    latency = _format_duration(time.perf_counter() - start)
    return ServiceStatus(HEALTHY, "Redis connection successful", latency)


def perform_health_check(
    database_ping: Callable[[], object] | None, redis_client=None
) -> HealthCheck:
    """Check every service; the result is unhealthy if any service errs."""
    services = {
        "database": check_database_health(database_ping),
        "redis": check_redis_health(redis_client),
    }
    overall = UNHEALTHY if any(s.status == ERROR for s in services.values()) else HEALTHY
    return HealthCheck(overall, datetime.now(timezone.utc), services)