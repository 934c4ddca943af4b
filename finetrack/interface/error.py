"""Interface layer errors.

Maps domain errors onto HTTP responses. Anything not listed here is a bug
and surfaces as a 500.
"""

import logfire
from fastapi import HTTPException, status

from finetrack.domain.error import (
    ContentDeletedError,
    DomainError,
    ForbiddenError,
    InvalidThreadError,
    NotFoundError,
    TransientStoreError,
    UnauthenticatedError,
    ValidationError,
)

STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (InvalidThreadError, status.HTTP_400_BAD_REQUEST),
    (ContentDeletedError, status.HTTP_404_NOT_FOUND),
    (TransientStoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(error: DomainError) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: Exception) -> HTTPException:
    """Translate a domain error (or a malformed id) into an HTTPException."""
    if isinstance(error, DomainError):
        code = status_for(error)
    elif isinstance(error, ValueError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if code >= 500:
        logfire.error("Request failed", error=str(error), status=code)
    else:
        logfire.warn("Request rejected", error=str(error), status=code)

    detail = str(error) if code < 500 else "Internal server error"
    if isinstance(error, TransientStoreError):
        detail = "Comment store temporarily unavailable, please retry"
    return HTTPException(status_code=code, detail=detail)
