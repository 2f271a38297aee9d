"""CORS policy for the account API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from account.core.logger import REQUEST_ID_HEADER


def init_app(app: Flask) -> None:
    """Allow browser clients to call ``/api/*`` with bearer tokens.

    Tokens travel in the ``Authorization`` header and JSON bodies, never in
    cookies, so credentialed requests stay disabled. ``CORS_ORIGINS`` is a
    comma-separated list; blank or ``"*"`` allows any origin.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    CORS(
        app,
        resources={r"/api/*": {"origins": origins if origins and origins != ["*"] else "*"}},
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        supports_credentials=False,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
