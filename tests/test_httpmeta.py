import pytest

from ragamaya.httpmeta import (
    BLUE,
    CYAN,
    GREEN,
    LOG_BODY_LIMIT,
    RED,
    RESET,
    YELLOW,
    color_method,
    color_status,
    no_cache_headers,
    truncate_for_log,
)


def test_no_cache_headers():
    headers = dict(no_cache_headers())
    assert headers == {
        "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
        "Pragma": "no-cache",
        "Expires": "Thu, 01 Jan 1970 00:00:00 GMT",
    }


@pytest.mark.parametrize(
    "method, color",
    [("GET", BLUE), ("POST", GREEN), ("PUT", YELLOW), ("DELETE", RED), ("PATCH", CYAN)],
)
def test_color_method(method, color):
    assert color_method(method) == color + method + RESET


def test_blue_get_escape_codes():
    assert color_method("GET") == "\033[34mGET\033[0m"


@pytest.mark.parametrize(
    "status, color", [(200, GREEN), (204, GREEN), (404, YELLOW), (500, RED), (503, RED)]
)
def test_color_status(status, color):
    assert color_status(status) == color + str(status) + RESET


@pytest.mark.parametrize("status", [101, 302])
def test_other_statuses_are_plain(status):
    assert color_status(status) == str(status)


def test_short_body_is_unchanged():
    assert truncate_for_log(b'{"a": 1}') == '{"a": 1}'


def test_body_at_limit_is_unchanged():
    body = b"x" * LOG_BODY_LIMIT
    assert truncate_for_log(body) == "x" * LOG_BODY_LIMIT


def test_long_body_is_truncated():
    body = b"a" * (LOG_BODY_LIMIT + 500)
    assert truncate_for_log(body) == "a" * LOG_BODY_LIMIT + "..."