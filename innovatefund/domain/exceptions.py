"""Error taxonomy shared by use cases, routes and the realtime gateway."""

from __future__ import annotations


class ValidationError(ValueError):
    """Malformed input rejected before any side effect."""


class NotFoundError(LookupError):
    """The referenced resource does not exist for the caller."""


class AccessDeniedError(PermissionError):
    """The principal is not allowed to use the requested channel or resource."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class PersistenceError(RuntimeError):
    """A durable-store read or write failed."""


class AuthenticationError(RuntimeError):
    """A credential was missing, malformed, expired or unknown."""

    def __init__(self, message: str = "Authentication error") -> None:
        super().__init__(message)


__all__ = [
    "AccessDeniedError",
    "AuthenticationError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
