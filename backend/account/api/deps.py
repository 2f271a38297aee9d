"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request
from sqlalchemy.orm import Session

from account.core.extensions import db, get_token_service
from account.services._shared.errors import (
    AuthorizationError,
    BadRequestError,
    UnsupportedMediaTypeError,
)
from account.services.users.dto import User

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "


def get_session() -> Session:
    """Return the SQLAlchemy session bound to the current application."""

    return db.session


def json_body() -> dict[str, Any]:
    """Return the request body as a JSON object.

    :raises UnsupportedMediaTypeError: If the body is not declared as JSON.
    :raises BadRequestError: If the body is not a well-formed JSON object.
    """

    if not request.is_json:
        raise UnsupportedMediaTypeError("Request body must be application/json")
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object")
    return body


def bearer_token() -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    :raises AuthorizationError: If the header is missing or malformed.
    """

    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        raise AuthorizationError("Must provide Authorization header with format `Bearer {token}`")
    token = header[len(BEARER_PREFIX) :].strip()
    if not token:
        raise AuthorizationError("Must provide Authorization header with format `Bearer {token}`")
    return token


def require_identity(func: F) -> F:
    """Ensure the request carries a valid identity token; exposes ``g.user``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.user = get_token_service().validate_identity_token(bearer_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user() -> User:
    """Return the user verified by :func:`require_identity`."""

    return g.user


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
