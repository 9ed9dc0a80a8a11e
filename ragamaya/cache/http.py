"""WSGI middleware that caches responses, invalidates keys and sets Cache-Control."""

from __future__ import annotations

import base64
import contextlib
import hashlib
import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from http import HTTPStatus

from ragamaya.cache.base import Cache

DEFAULT_TTL = 5 * 60
DEFAULT_EXCLUDE_HEADERS = ("Authorization", "Cookie")
KEY_HEADERS = ("Accept", "Accept-Language", "User-Agent")
USER_ID_KEY = "ragamaya.user_id"


def _header(environ: dict, name: str) -> str:
    return environ.get("HTTP_" + name.upper().replace("-", "_"), "")


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")


def _status_code(status: str) -> int:
    return int(status.split(" ", 1)[0])


def _status_line(code: int) -> str:
    try:
        phrase = HTTPStatus(code).phrase
    except ValueError:
        phrase = ""
    return f"{code} {phrase}".rstrip()


@dataclass
class CachedResponse:
    """A response as stored in the cache."""

    status_code: int
    content_type: str = ""
    body: bytes = b""
    headers: dict[str, list[str]] = field(default_factory=dict)

    def to_json(self) -> bytes:
        """Encode as JSON, with the body in base64."""
        return json.dumps(
            {
                "status_code": self.status_code,
                "content_type": self.content_type,
                "body": base64.b64encode(self.body).decode("ascii"),
                "headers": self.headers,
            }
        ).encode("utf-8")

    @classmethod
    def from_json(cls, data: bytes | str) -> CachedResponse:
        obj = json.loads(data)
        headers = obj.get("headers") or {}
        return cls(
            status_code=int(obj["status_code"]),
            content_type=obj.get("content_type") or "",
            body=base64.b64decode(obj.get("body") or ""),
            headers={name: list(values) for name, values in headers.items()},
        )


def default_key_generator(environ: dict) -> str:
    """Derive a cache key from method, path, query, some headers and the user."""
    digest = hashlib.md5(usedforsecurity=False)
    method = environ.get("REQUEST_METHOD", "GET")
    path = environ.get("PATH_INFO", "")
    digest.update(_encode(f"{method}:{path}"))
    query = environ.get("QUERY_STRING", "")
    if query:
        digest.update(_encode("?" + query))
    for name in KEY_HEADERS:
        value = _header(environ, name)
        if value:
            digest.update(_encode(f":{name}:{value}"))
    user_id = environ.get(USER_ID_KEY)
    if isinstance(user_id, str):
        digest.update(_encode(":user:" + user_id))
    return "http:" + digest.hexdigest()


def default_skip_cache(environ: dict) -> bool:
    """Skip non-GET requests, ``no-cache`` requests and authorised requests."""
    if environ.get("REQUEST_METHOD", "GET") != "GET":
        return True
    if _header(environ, "Cache-Control") == "no-cache":
        return True
    return _header(environ, "Authorization") != ""


def is_excluded_header(header: str, excluded: Iterable[str]) -> bool:
    lowered = header.lower()
    return any(name.lower() == lowered for name in excluded)


def cache_control_value(max_age: float, public: bool) -> str:
    """Build a Cache-Control value; ``max_age`` is in seconds."""
    directives = ["public" if public else "private"]
    if max_age > 0:
        directives.append(f"max-age={int(max_age)}")
    return ", ".join(directives)


def _run(app, environ: dict) -> tuple[str, list[tuple[str, str]], bytes, object]:
    """Run a WSGI app to completion and return status, headers, body, exc_info."""
    captured: dict = {}
    chunks: list[bytes] = []

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = list(headers)
        captured["exc_info"] = exc_info
        return chunks.append

    result = app(environ, start_response)
    try:
        for chunk in result:
            chunks.append(chunk)
    finally:
        close = getattr(result, "close", None)
        if close is not None:
            close()
    if "status" not in captured:
        raise RuntimeError("application did not call start_response")
    return captured["status"], captured["headers"], b"".join(chunks), captured["exc_info"]


def _respond(start_response, status, headers, exc_info):
    if exc_info is None:
        start_response(status, headers)
    else:
        start_response(status, headers, exc_info)


class CacheMiddleware:
    """Serve successful GET responses from a cache, storing them on a miss."""

    def __init__(
        self,
        app,
        cache: Cache,
        ttl: float = DEFAULT_TTL,
        key_generator: Callable[[dict], str] | None = None,
        skip_cache: Callable[[dict], bool] | None = None,
        exclude_headers: Iterable[str] | None = None,
    ):
        self.app = app
        self.cache = cache
        self.ttl = ttl
        self.key_generator = key_generator or default_key_generator
        self.skip_cache = skip_cache or default_skip_cache
        self.exclude_headers = tuple(
            DEFAULT_EXCLUDE_HEADERS if exclude_headers is None else exclude_headers
        )

    def _lookup(self, key: str) -> CachedResponse | None:
        try:
            return CachedResponse.from_json(self.cache.get(key))
        except Exception:
            return None

    def __call__(self, environ, start_response):
        if self.skip_cache(environ):
            return self.app(environ, start_response)

        key = self.key_generator(environ)
        hit = self._lookup(key)
        if hit is not None:
            headers = [(name, value) for name, values in hit.headers.items() for value in values]
            if hit.content_type and not any(n.lower() == "content-type" for n, _ in headers):
                headers.append(("Content-Type", hit.content_type))
            headers.append(("X-Cache", "HIT"))
            start_response(_status_line(hit.status_code), headers)
            return [hit.body]

        status, headers, body, exc_info = _run(self.app, environ)
        if _status_code(status) == HTTPStatus.OK and body:
            grouped: dict[str, list[str]] = {}
            for name, value in headers:
                if not is_excluded_header(name, self.exclude_headers):
                    grouped.setdefault(name, []).append(value)
            content_type = next(
                (value for name, value in headers if name.lower() == "content-type"), ""
            )
            response = CachedResponse(HTTPStatus.OK, content_type, body, grouped)
            with contextlib.suppress(Exception):
                self.cache.set(key, response.to_json(), self.ttl)
        headers.append(("X-Cache", "MISS"))
        _respond(start_response, status, headers, exc_info)
        return [body]


class InvalidateCacheMiddleware:
    """Invalidate cache patterns after a successful (2xx) response."""

    def __init__(self, app, cache: Cache, patterns: Iterable[str]):
        self.app = app
        self.cache = cache
        self.patterns = list(patterns)

    def __call__(self, environ, start_response):
        status, headers, body, exc_info = _run(self.app, environ)
        if 200 <= _status_code(status) < 300:
            for pattern in self.patterns:
                with contextlib.suppress(Exception):
                    self.cache.invalidate_pattern(pattern)
        _respond(start_response, status, headers, exc_info)
        return [body]


class CacheControlMiddleware:
    """Add a Cache-Control header unless the application sets its own."""

    def __init__(self, app, max_age: float, public: bool):
        self.app = app
        self.max_age = max_age
        self.public = public

    def __call__(self, environ, start_response):
        value = cache_control_value(self.max_age, self.public)

        def wrapped(status, headers, exc_info=None):
            headers = list(headers)
            if not any(name.lower() == "cache-control" for name, _ in headers):
                headers.append(("Cache-Control", value))
            if exc_info is None:
                return start_response(status, headers)
            return start_response(status, headers, exc_info)

        return self.app(environ, wrapped)