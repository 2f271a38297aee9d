"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. Each one carries an :class:`ErrorKind` tag; the
translation of a kind to an HTTP status lives in ``account/core/errors.py``.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError message mentions the constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ErrorKind(str, Enum):
    """Transport-neutral classification of service failures."""

    AUTHORIZATION = "AUTHORIZATION"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"
    NOT_FOUND = "NOT_FOUND"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The web layer maps :attr:`kind` to a status code.
    """

    kind: ErrorKind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Specific errors
# --------------------------------------------------------------------------- #


class BadRequestError(ServiceError):
    """Raised when the caller supplied unusable input."""

    kind = ErrorKind.BAD_REQUEST


class UnsupportedMediaTypeError(ServiceError):
    """Raised when the request body is not in a supported format."""

    kind = ErrorKind.UNSUPPORTED_MEDIA_TYPE
    default_message = "Unsupported media type"


class AuthorizationError(ServiceError):
    """
    Raised when credentials or tokens cannot be verified.

    The message is deliberately generic; the concrete reason is only logged.
    """

    kind = ErrorKind.AUTHORIZATION
    default_message = "Authorization failed"


class InternalError(ServiceError):
    """Raised on unexpected failures (signing, mandatory store writes)."""

    kind = ErrorKind.INTERNAL
    default_message = "Internal server error"


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: object
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: object) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    kind = ErrorKind.CONFLICT

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        self.detail = detail
        super().__init__(f"Conflict on {entity}: {detail}")
