"""Coloured console logging with a panic level that raises."""

from __future__ import annotations

import sys
from datetime import datetime

RESET = "\033[0m"
RED = "\033[31m"
YELLOW = "\033[33m"
BLUE = "\033[34m"

_INFO_PREFIX = BLUE + "[INFO] " + RESET
_WARNING_PREFIX = YELLOW + "[WARNING] " + RESET
_ERROR_PREFIX = RED + "[ERROR] " + RESET
_PANIC_PREFIX = RED + "[PANIC] " + RESET

PANIC_MESSAGE = "something went wrong, check panic log"


class PanicError(RuntimeError):
    """Raised after a panic-level message has been logged."""


def _format(msg: str, args: tuple) -> str:
    if not args:
        return msg
    return msg.replace("%v", "%s") % args


def _emit(to_stderr: bool, prefix: str, msg: str, args: tuple) -> None:
    stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
    line = f"{prefix}{stamp} {_format(msg, args)}"
    if not line.endswith("\n"):
        line += "\n"
    stream = sys.stderr if to_stderr else sys.stdout
    stream.write(line)
    stream.flush()


def info(msg: str, *args) -> None:
    """Log an informational message to standard output."""
    _emit(False, _INFO_PREFIX, msg, args)


def warning(msg: str, *args) -> None:
    """Log a warning to standard output."""
    _emit(False, _WARNING_PREFIX, msg, args)


def error(msg: str, *args) -> None:
    """Log an error to standard error."""
    _emit(True, _ERROR_PREFIX, msg, args)


def panic_error(msg: str, *args) -> None:
    """Log a panic message to standard error and raise PanicError."""
    _emit(True, _PANIC_PREFIX, msg, args)
    raise PanicError(PANIC_MESSAGE)