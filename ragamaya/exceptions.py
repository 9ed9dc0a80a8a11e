"""API exceptions, standard error messages and database error translation."""

from __future__ import annotations

from collections.abc import Callable
from http import HTTPStatus

ERR_INVALID_CREDENTIALS = "invalid credentials"
ERR_UNAUTHORIZED = "unauthorized access"
ERR_BAD_REQUEST = "invalid request body or parameters"
ERR_FORBIDDEN = "forbidden access"
ERR_NOT_SELLER = "you are not a seller"
ERR_NOT_FOUND = "record not found"
ERR_INTERNAL_SERVER = "something went wrong"
ERR_EMAIL_NOT_VERIFIED = "email not verified"
ERR_EMAIL_SEND_FAILED = "failed to send email"
ERR_EMAIL_ALREADY_REGISTERED = "email already registered"
ERR_DATABASE_COMMUNICATION = "failed to communicate with database"
ERR_TOKEN_GENERATE = "failed to generate token"
ERR_CREDENTIALS_HASH = "failed to secure credentials"
ERR_FILE_UPLOAD = "failed to upload file"
ERR_FILE_PERMISSION = "failed to set file permission"
ERR_FILE_SIZE = "file size exceeds the limit"
ERR_JSON_MARSHAL = "failed to marshal JSON"
ERR_FILE_READ = "failed to read file"
ERR_FILE_URL = "invalid file URL"
ERR_REGISTERED_WITH_GOOGLE = "user already registered with Google"
ERR_REGISTERED_WITH_CREDENTIALS = "user already registered with credentials"
ERR_NOT_CHECKED_IN_YET = "reservation not checked in yet"
ERR_NOT_CHECKED_OUT_YET = "reservation not checked out yet"
ERR_INVALID_DATE = "invalid date"
ERR_INVALID_TOKEN_STRUCTURE = "invalid token structure"
ERR_DATA_NOT_VERIFIED = "data not verified"
ERR_NOT_THE_OWNER = "you are not the owner of this resource"
ERR_CHECKOUT_QUANTITY_MORE_THAN_STOCKS = "checkout quantity more than stocks"
ERR_CHECKOUT_QUANTITY_MORE_THAN_ALLOWED = "checkout quantity more than allowed"
ERR_ALREADY_OWNED = "you already own this product"


class ApiException(Exception):
    """An error carrying an HTTP status code and a client-facing message."""

    def __init__(self, status, message):
        super().__init__(message)
        self.status = int(status)
        self.message = message

    def __str__(self) -> str:
        return f"Error {self.status}: {self.message}"

    def __repr__(self) -> str:
        return f"ApiException(status={self.status!r}, message={self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiException):
            return NotImplemented
        return (self.status, self.message) == (other.status, other.message)

    def __hash__(self) -> int:
        return hash((self.status, self.message))

    def to_dict(self) -> dict:
        """Return the JSON body sent to clients."""
        return {"status": self.status, "message": self.message}


class RecordNotFoundError(Exception):
    """A query matched no record."""


class DuplicatedKeyError(Exception):
    """A unique constraint was violated."""


class ForeignKeyViolatedError(Exception):
    """A foreign key constraint was violated."""


class InvalidDataError(Exception):
    """The data given to the database was invalid."""


def new_validation_exception(error) -> ApiException:
    """Wrap a validation error as a 400 response."""
    return ApiException(HTTPStatus.BAD_REQUEST, str(error))


def parse_database_error(
    error: BaseException, rollback: Callable[[], object] | None = None
) -> ApiException:
    """Translate a database error into an ApiException.

    ``rollback`` is called for every error except a missing record.
    """
    if rollback is not None and not isinstance(error, RecordNotFoundError):
        rollback()

    if isinstance(error, RecordNotFoundError):
        return ApiException(HTTPStatus.NOT_FOUND, "Record not found")
    if isinstance(error, DuplicatedKeyError):
        return ApiException(HTTPStatus.CONFLICT, "Data already exists")
    if isinstance(error, ForeignKeyViolatedError):
        return ApiException(HTTPStatus.BAD_REQUEST, "Related record not found")
    if isinstance(error, InvalidDataError):
        return ApiException(HTTPStatus.BAD_REQUEST, "Invalid data")
    if "duplicate key" in str(error):
        return ApiException(HTTPStatus.CONFLICT, "Data already exists")
    return ApiException(HTTPStatus.INTERNAL_SERVER_ERROR, "Database error occurred")