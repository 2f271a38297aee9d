"""Service layer public API.

Re-exports
----------
- Base primitives (from ``account.services._shared.base``)
    * :class:`BaseService`

- Service errors (from ``account.services._shared.errors``)
    * :class:`ErrorKind`, :class:`ServiceError` and its subclasses

Concrete services live in :mod:`account.services.tokens` and
:mod:`account.services.users.service`.
"""

from __future__ import annotations

from ._shared.base import BaseService
from ._shared.errors import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    ErrorKind,
    InternalError,
    NotFoundError,
    ServiceError,
    UnsupportedMediaTypeError,
)

__all__ = [
    "BaseService",
    "ErrorKind",
    "ServiceError",
    "AuthorizationError",
    "BadRequestError",
    "ConflictError",
    "InternalError",
    "NotFoundError",
    "UnsupportedMediaTypeError",
]
