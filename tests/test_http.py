import base64
import json
import re
from wsgiref.util import setup_testing_defaults

import pytest

from ragamaya.cache.http import (
    USER_ID_KEY,
    CacheControlMiddleware,
    CachedResponse,
    CacheMiddleware,
    InvalidateCacheMiddleware,
    cache_control_value,
    default_key_generator,
    default_skip_cache,
    is_excluded_header,
)
from ragamaya.cache.memory import MemoryCache


def make_environ(method="GET", path="/items", query="", **headers):
    environ = {}
    setup_testing_defaults(environ)
    environ["REQUEST_METHOD"] = method
    environ["PATH_INFO"] = path
    environ["QUERY_STRING"] = query
    for name, value in headers.items():
        environ["HTTP_" + name.upper()] = value
    return environ


def call(app, environ):
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = list(headers)
        return lambda data: None

    body = b"".join(app(environ, start_response))
    return captured["status"], dict(captured["headers"]), body


class CountingApp:
    def __init__(self, status="200 OK", body=b"hello", extra_headers=()):
        self.calls = 0
        self.status = status
        self.body = body
        self.extra_headers = list(extra_headers)

    def __call__(self, environ, start_response):
        self.calls += 1
        start_response(self.status, [("Content-Type", "text/plain")] + self.extra_headers)
        return [self.body]


@pytest.fixture
def memory():
    cache = MemoryCache()
    yield cache
    cache.close()


def test_miss_then_hit(memory):
    app = CountingApp()
    middleware = CacheMiddleware(app, memory)
    status1, headers1, body1 = call(middleware, make_environ())
    status2, headers2, body2 = call(middleware, make_environ())
    assert app.calls == 1
    assert headers1["X-Cache"] == "MISS"
    assert headers2["X-Cache"] == "HIT"
    assert body2 == body1 == b"hello"
    assert status2 == status1 == "200 OK"
    assert headers2["Content-Type"] == "text/plain"


def test_non_ok_responses_are_not_cached(memory):
    app = CountingApp(status="404 Not Found")
    middleware = CacheMiddleware(app, memory)
    call(middleware, make_environ())
    status, headers, _ = call(middleware, make_environ())
    assert app.calls == 2
    assert status == "404 Not Found"
    assert headers["X-Cache"] == "MISS"


def test_empty_body_is_not_cached(memory):
    app = CountingApp(body=b"")
    middleware = CacheMiddleware(app, memory)
    call(middleware, make_environ())
    call(middleware, make_environ())
    assert app.calls == 2


def test_post_is_skipped(memory):
    app = CountingApp()
    middleware = CacheMiddleware(app, memory)
    call(middleware, make_environ(method="POST"))
    _, headers, _ = call(middleware, make_environ(method="POST"))
    assert app.calls == 2
    assert "X-Cache" not in headers


def test_authorized_request_is_skipped(memory):
    app = CountingApp()
    middleware = CacheMiddleware(app, memory)
    call(middleware, make_environ(AUTHORIZATION="Bearer token"))
    call(middleware, make_environ(AUTHORIZATION="Bearer token"))
    assert app.calls == 2


def test_different_queries_are_cached_separately(memory):
    app = CountingApp()
    middleware = CacheMiddleware(app, memory)
    call(middleware, make_environ(query="page=1"))
    call(middleware, make_environ(query="page=2"))
    call(middleware, make_environ(query="page=1"))
    assert app.calls == 2


def test_excluded_headers_are_not_replayed(memory):
    app = CountingApp(extra_headers=[("Cookie", "a=b"), ("X-Custom", "kept")])
    middleware = CacheMiddleware(app, memory)
    call(middleware, make_environ())
    _, headers, _ = call(middleware, make_environ())
    assert headers["X-Cache"] == "HIT"
    assert headers["X-Custom"] == "kept"
    assert "Cookie" not in headers


def test_cached_response_round_trip():
    original = CachedResponse(200, "application/json", b"\x00{}", {"X-A": ["1", "2"]})
    assert CachedResponse.from_json(original.to_json()) == original


def test_cached_response_body_is_base64():
    encoded = json.loads(CachedResponse(200, "text/plain", b"abc").to_json())
    assert encoded["body"] == base64.b64encode(b"abc").decode("ascii")
    assert encoded["status_code"] == 200


def test_key_generator_shape_and_stability():
    key = default_key_generator(make_environ())
    assert re.fullmatch(r"http:[0-9a-f]{32}", key)
    assert default_key_generator(make_environ()) == key


def test_key_generator_depends_on_request():
    base = default_key_generator(make_environ())
    assert default_key_generator(make_environ(path="/other")) != base
    assert default_key_generator(make_environ(ACCEPT="text/html")) != base
    with_user = make_environ()
    with_user[USER_ID_KEY] = "42"
    assert default_key_generator(with_user) != base


def test_default_skip_cache():
    assert default_skip_cache(make_environ()) is False
    assert default_skip_cache(make_environ(method="PUT")) is True
    assert default_skip_cache(make_environ(CACHE_CONTROL="no-cache")) is True
    assert default_skip_cache(make_environ(AUTHORIZATION="Bearer token")) is True


def test_is_excluded_header_ignores_case():
    assert is_excluded_header("authorization", ["Authorization", "Cookie"]) is True
    assert is_excluded_header("COOKIE", ["Authorization", "Cookie"]) is True
    assert is_excluded_header("Accept", ["Authorization", "Cookie"]) is False


def test_cache_control_value():
    assert cache_control_value(600, True) == "public, max-age=600"
    assert cache_control_value(0, False) == "private"


def test_cache_control_middleware_adds_header():
    middleware = CacheControlMiddleware(CountingApp(), 600, True)
    _, headers, _ = call(middleware, make_environ())
    assert headers["Cache-Control"] == cache_control_value(600, True)


def test_cache_control_middleware_keeps_app_header():
    app = CountingApp(extra_headers=[("Cache-Control", "no-store")])
    _, headers, _ = call(CacheControlMiddleware(app, 600, True), make_environ())
    assert headers["Cache-Control"] == "no-store"


def test_invalidate_on_success(memory):
    memory.set("users:1", b"x")
    memory.set("other", b"y")
    middleware = InvalidateCacheMiddleware(CountingApp(), memory, ["users:"])
    _, _, body = call(middleware, make_environ(method="POST"))
    assert body == b"hello"
    assert not memory.exists("users:1")
    assert memory.exists("other")


def test_no_invalidation_on_failure(memory):
    memory.set("users:1", b"x")
    app = CountingApp(status="500 Internal Server Error")
    status, _, _ = call(InvalidateCacheMiddleware(app, memory, ["users:"]), make_environ())
    assert status == "500 Internal Server Error"
    assert memory.exists("users:1")