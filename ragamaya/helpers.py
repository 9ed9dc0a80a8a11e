"""Small helpers: hashing, formatting, random strings and transactions."""

from __future__ import annotations

import base64
import hashlib
import secrets
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from http import HTTPStatus

import bcrypt

from ragamaya.exceptions import (
    ERR_CREDENTIALS_HASH,
    ERR_INVALID_CREDENTIALS,
    ApiException,
)

BCRYPT_COST = 14
_BCRYPT_MAX_BYTES = 72

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def encrypt_to_sha512(text: str) -> str:
    """Return the hex SHA-512 digest of ``text``."""
    return hashlib.sha512(text.encode("utf-8")).hexdigest()


@contextmanager
def commit_or_rollback(session) -> Iterator:
    """Commit ``session`` on success, roll it back on error.

    The session is rolled back when the block raises (the exception is
    re-raised) or when the session carries a non-empty ``error`` attribute.
    """
    try:
        yield session
    except BaseException:
        session.rollback()
        raise
    if getattr(session, "error", None) is not None:
        session.rollback()
    else:
        session.commit()


def is_duplicate_key_error(error) -> bool:
    """Tell whether an error message looks like a uniqueness violation."""
    text = str(error).lower()
    return any(word in text for word in ("duplicate", "unique", "constraint"))


def say_hi() -> str:
    return "Hi!"


def generate_random_string(length: int) -> str:
    """Return a URL-safe random string of exactly ``length`` characters."""
    if length < 0:
        raise ValueError("length must not be negative")
    raw = secrets.token_bytes(length)
    return base64.urlsafe_b64encode(raw).decode("ascii")[:length]


def format_file_size(size: int) -> str:
    """Format a byte count as whole B, KB or MB."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size // 1024} KB"
    return f"{size // (1024 * 1024)} MB"


def format_indonesian_time(moment: datetime) -> str:
    """Format a timestamp as e.g. ``January 2, 2006 • 15:04 PM``."""
    meridiem = "PM" if moment.hour >= 12 else "AM"
    return (
        f"{_MONTHS[moment.month - 1]} {moment.day}, {moment.year} • "
        f"{moment.hour:02d}:{moment.minute:02d} {meridiem}"
    )


def format_indonesian_locale_string(value: int) -> str:
    """Format a non-negative integer with Indonesian thousands separators."""
    if value < 0:
        raise ValueError("value must not be negative")
    return f"{value:,}".replace(",", ".")


def hash_password(password: str) -> str:
    """Hash a password with bcrypt at the application's cost factor."""
    encoded = password.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise ApiException(HTTPStatus.INTERNAL_SERVER_ERROR, ERR_CREDENTIALS_HASH)
    try:
        hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=BCRYPT_COST))
    except ValueError as exc:
        raise ApiException(HTTPStatus.INTERNAL_SERVER_ERROR, ERR_CREDENTIALS_HASH) from exc
    return hashed.decode("ascii")


def check_password_hash(password: str, hashed: str) -> None:
    """Raise a 401 ApiException unless ``password`` matches ``hashed``."""
    try:
        matches = bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        matches = False
    if not matches:
        raise ApiException(HTTPStatus.UNAUTHORIZED, ERR_INVALID_CREDENTIALS)