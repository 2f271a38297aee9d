"""Centralized JSON (RFC 7807) error handling for the API.

Service errors carry an :class:`~account.services._shared.errors.ErrorKind`;
:func:`status_for` is the only place a kind becomes an HTTP status.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from account.core.logger import ensure_request_id
from account.services._shared.errors import ErrorKind, ServiceError

log = logging.getLogger(__name__)

KIND_STATUS: Mapping[ErrorKind, HTTPStatus] = {
    ErrorKind.AUTHORIZATION: HTTPStatus.UNAUTHORIZED,
    ErrorKind.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
}


def status_for(kind: ErrorKind) -> HTTPStatus:
    """Map a service error kind to its HTTP status (500 for unknown kinds)."""
    return KIND_STATUS.get(kind, HTTPStatus.INTERNAL_SERVER_ERROR)


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _problem_response(problem: dict[str, Any], status: int) -> tuple[Response, int]:
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp, status


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees RFC 7807 responses for all handled errors.
    - Internal errors never expose their message or cause to clients.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = status_for(err.kind)
        message = err.message if status < 500 else "Unexpected error"
        problem = _as_problem(status=status, code=err.kind.value.lower(), message=message)
        if status >= 500:
            log.error(
                "service.error",
                extra={"kind": err.kind.value, "status": int(status)},
                exc_info=err,
            )
        else:
            log.warning("service.error: %s", err.message, extra={"kind": err.kind.value})
        return _problem_response(problem, status)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        problem = _as_problem(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )
        log.warning("request.invalid", extra={"status": HTTPStatus.UNPROCESSABLE_ENTITY})
        return _problem_response(problem, HTTPStatus.UNPROCESSABLE_ENTITY)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        problem = _as_problem(
            status=status,
            code=HTTPStatus(status).phrase.lower().replace(" ", "_"),
            message=message,
        )
        return _problem_response(problem, status)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        problem = _as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal",
            message="Unexpected error",
        )
        log.error("Unhandled exception: request_id=%s", problem["request_id"], exc_info=err)
        return _problem_response(problem, HTTPStatus.INTERNAL_SERVER_ERROR)


__all__ = ["KIND_STATUS", "init_app", "status_for"]
