"""Response header presets and coloured request logging helpers."""

from __future__ import annotations

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
CYAN = "\033[36m"

LOG_BODY_LIMIT = 1024

_METHOD_COLORS = {"GET": BLUE, "POST": GREEN, "PUT": YELLOW, "DELETE": RED}


def no_cache_headers() -> list[tuple[str, str]]:
    """Headers that forbid any caching of a response."""
    return [
        ("Cache-Control", "no-store, no-cache, must-revalidate, max-age=0"),
        ("Pragma", "no-cache"),
        ("Expires", "Thu, 01 Jan 1970 00:00:00 GMT"),
    ]


def color_method(method: str) -> str:
    return _METHOD_COLORS.get(method, CYAN) + method + RESET


def color_status(status: int) -> str:
    if 200 <= status < 300:
        return GREEN + str(status) + RESET
    if 400 <= status < 500:
        return YELLOW + str(status) + RESET
    if status >= 500:
        return RED + str(status) + RESET
    return str(status)


def truncate_for_log(body: bytes) -> str:
    """Return the body as text, cut to the log limit with a trailing ``...``."""
    if len(body) > LOG_BODY_LIMIT:
        return body[:LOG_BODY_LIMIT].decode("utf-8", errors="replace") + "..."
    return body.decode("utf-8", errors="replace")