"""Bearer token authentication for users, sellers and internal callers."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus

import jwt

from ragamaya.exceptions import (
    ERR_FORBIDDEN,
    ERR_INVALID_CREDENTIALS,
    ERR_INVALID_TOKEN_STRUCTURE,
    ERR_NOT_SELLER,
    ApiException,
)
from ragamaya.models import Roles

BLACKLISTED_MESSAGE = "Token is blacklisted"
_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


@dataclass
class SellerProfile:
    uuid: str = ""
    name: str = ""
    avatar_url: str = ""


@dataclass
class AuthenticatedUser:
    """The user described by the claims of a valid access token."""

    uuid: str
    email: str
    is_email_verified: bool
    sub: str
    name: str
    role: str
    avatar_url: str
    seller_profile: SellerProfile | None = None


def extract_bearer_token(header: str | None) -> str:
    """Return the token of an ``Authorization: Bearer <token>`` header."""
    if not header:
        raise ApiException(HTTPStatus.FORBIDDEN, ERR_FORBIDDEN)
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise ApiException(HTTPStatus.FORBIDDEN, ERR_INVALID_CREDENTIALS)
    return parts[1]


def _check_blacklist(token: str, blacklist) -> None:
    if blacklist is None:
        return
    try:
        listed = blacklist.is_blacklisted(token)
    except Exception:
        listed = False
    if listed:
        raise ApiException(HTTPStatus.UNAUTHORIZED, BLACKLISTED_MESSAGE)


def _decode(token: str, secret) -> dict:
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=_HMAC_ALGORITHMS,
            options={"verify_aud": False},
        )
    except jwt.PyJWTError as exc:
        raise ApiException(HTTPStatus.FORBIDDEN, ERR_INVALID_CREDENTIALS) from exc


def _claim(claims: dict, name: str, kind: type):
    value = claims.get(name)
    if not isinstance(value, kind):
        raise ApiException(HTTPStatus.INTERNAL_SERVER_ERROR, ERR_INVALID_TOKEN_STRUCTURE)
    return value


def _user_from_claims(claims: dict, seller_profile: SellerProfile | None = None) -> AuthenticatedUser:
    return AuthenticatedUser(
        uuid=_claim(claims, "uuid", str),
        email=_claim(claims, "email", str),
        is_email_verified=_claim(claims, "is_email_verified", bool),
        sub=_claim(claims, "sub", str),
        name=_claim(claims, "name", str),
        role=_claim(claims, "role", str),
        avatar_url=_claim(claims, "avatar_url", str),
        seller_profile=seller_profile,
    )


def authenticate(header: str | None, secret, blacklist=None) -> AuthenticatedUser:
    """Validate a bearer header and return the user it identifies.

    A failing blacklist lookup is treated as "not blacklisted".
    """
    token = extract_bearer_token(header)
    _check_blacklist(token, blacklist)
    claims = _decode(token, secret)
    return _user_from_claims(claims)


def authenticate_seller(header: str | None, secret, blacklist=None) -> AuthenticatedUser:
    """Like ``authenticate``, but the user must be a seller with a profile."""
    token = extract_bearer_token(header)
    _check_blacklist(token, blacklist)
    claims = _decode(token, secret)

    if _claim(claims, "role", str) != Roles.SELLER.value:
        raise ApiException(HTTPStatus.FORBIDDEN, ERR_NOT_SELLER)
    if "seller_profile" not in claims:
        raise ApiException(HTTPStatus.FORBIDDEN, ERR_NOT_SELLER)
    profile = claims["seller_profile"]
    if not isinstance(profile, dict):
        raise ApiException(HTTPStatus.FORBIDDEN, ERR_INVALID_CREDENTIALS)

    seller = SellerProfile(
        uuid=_claim(profile, "uuid", str),
        name=_claim(profile, "name", str),
        avatar_url=_claim(profile, "avatar_url", str),
    )
    return _user_from_claims(claims, seller)


def authenticate_internal(header: str | None, secret, admin_username: str) -> dict:
    """Validate an administrator token and return its claims."""
    token = extract_bearer_token(header)
    claims = _decode(token, secret)
    if _claim(claims, "admin_username", str) != admin_username:
        raise ApiException(HTTPStatus.FORBIDDEN, ERR_INVALID_CREDENTIALS)
    return claims