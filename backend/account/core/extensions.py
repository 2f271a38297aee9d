"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

if TYPE_CHECKING:
    from account.services._shared.ports import RefreshTokenStore
    from account.services.tokens import KeyMaterial, TokenService

log = logging.getLogger(__name__)

convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Import-safe singleton; bound per app in init_app
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
limiter = Limiter(key_func=get_remote_address)

TOKEN_SERVICE_KEY = "token_service"
REDIS_CLIENT_KEY = "redis_client"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, rate limiting, the refresh store and the token service.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances.

    Raises
    ------
    RuntimeError
        If Redis is missing outside debug/testing or unreachable, or key
        material is unusable.
    """
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # Ensure models are imported so metadata is complete
    from account import models as _models  # noqa: F401
    from account.services.tokens import TokenConfig, TokenService

    store = _init_refresh_store(app)
    keys = load_key_material(app.config)
    token_cfg = TokenConfig(
        id_expiration_secs=int(app.config["ID_TOKEN_EXPIRATION_SECS"]),
        refresh_expiration_secs=int(app.config["REFRESH_TOKEN_EXPIRATION_SECS"]),
    )
    app.extensions[TOKEN_SERVICE_KEY] = TokenService(
        refresh_store=store, keys=keys, token_cfg=token_cfg
    )


def _init_refresh_store(app: Flask) -> RefreshTokenStore:
    from account.services._shared.ports import InMemoryRefreshTokenStore

    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        app.extensions.pop(REDIS_CLIENT_KEY, None)
        if app.config.get("TESTING"):
            return InMemoryRefreshTokenStore()
        if not app.config.get("DEBUG"):
            raise RuntimeError("REDIS_URL must be set outside development and testing")
        log.warning("REDIS_URL is not set; refresh tokens are kept in process memory")
        return InMemoryRefreshTokenStore()

    from account.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

    client = redis.Redis.from_url(redis_url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions[REDIS_CLIENT_KEY] = client
    return RedisRefreshTokenStore(r=client)


def load_key_material(config) -> KeyMaterial:
    """Build :class:`KeyMaterial` from inline PEMs or PEM file paths.

    Inline ``PRIV_KEY``/``PUB_KEY`` win over ``PRIV_KEY_FILE``/``PUB_KEY_FILE``.
    """
    from account.services.tokens import KeyMaterial, KeyMaterialError

    secret = config.get("REFRESH_SECRET")
    try:
        if config.get("PRIV_KEY") and config.get("PUB_KEY"):
            return KeyMaterial.from_pem(config["PRIV_KEY"], config["PUB_KEY"], secret or "")
        if config.get("PRIV_KEY_FILE") and config.get("PUB_KEY_FILE"):
            return KeyMaterial.from_files(
                config["PRIV_KEY_FILE"], config["PUB_KEY_FILE"], secret or ""
            )
    except KeyMaterialError as exc:
        raise RuntimeError(f"Invalid token key material: {exc}") from exc
    raise RuntimeError("Token key material is not configured (PRIV_KEY/PUB_KEY or *_FILE)")


def get_token_service() -> TokenService:
    """Return the token service bound to the current app."""
    service = current_app.extensions.get(TOKEN_SERVICE_KEY)
    if service is None:
        raise RuntimeError("Token service is not initialized. Call init_app() first.")
    return cast("TokenService", service)

