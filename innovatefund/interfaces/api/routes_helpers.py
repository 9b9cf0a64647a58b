"""Helper utilities shared across API route handlers."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from innovatefund.domain.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DOMAIN_ERRORS = (
    ValidationError,
    NotFoundError,
    AccessDeniedError,
    AuthenticationError,
    PersistenceError,
)

_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
)


def http_error_from(exc: Exception) -> HTTPException:
    """Translate a domain exception into the matching :class:`HTTPException`."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))

    # Persistence failures keep their details in the logs only.
    logger.error("Request aborted: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Server error",
    )


__all__ = ["DOMAIN_ERRORS", "http_error_from"]
