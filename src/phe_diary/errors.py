"""Domain errors mapped onto HTTP status codes by the API layer."""

from http import HTTPStatus


class PheDiaryError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(PheDiaryError):
    status_code = HTTPStatus.BAD_REQUEST


class AuthenticationError(PheDiaryError):
    status_code = HTTPStatus.UNAUTHORIZED


class ForbiddenError(PheDiaryError):
    status_code = HTTPStatus.FORBIDDEN


class TierLimitError(ForbiddenError):
    """Raised when a free-tier usage limit would be exceeded."""


class NotFoundError(PheDiaryError):
    status_code = HTTPStatus.NOT_FOUND


class ConflictError(PheDiaryError):
    status_code = HTTPStatus.CONFLICT
