"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env during development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable.

    Raises
    ------
    ValueError
        If the variable is set but is not an integer.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {val!r}") from exc


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    ID_TOKEN_EXPIRATION_SECS: int
        Identity token lifetime in seconds (15 minutes by default).
    REFRESH_TOKEN_EXPIRATION_SECS: int
        Refresh token lifetime in seconds (3 days by default).
    PRIV_KEY / PUB_KEY: str | None
        Inline PEM RSA keys. Take precedence over the ``*_FILE`` variants.
    PRIV_KEY_FILE / PUB_KEY_FILE: str | None
        Paths to PEM RSA keys.
    REFRESH_SECRET: str | None
        HMAC secret for refresh tokens.
    REDIS_URL: str | None
        Refresh token store. Required unless ``DEBUG`` or ``TESTING``; those
        fall back to an in-memory store.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter expression applied to ``POST /signin`` per client address.
    RATELIMIT_STORAGE_URI: str
        Flask-Limiter counter storage (``memory://`` or a Redis URL).
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed browser origins (``*`` for any).

    Notes
    -----
    Values are sourced from environment variables, enabling configuration
    without code changes. Missing key material aborts app creation.
    """

    API_BASE_PREFIX = "/api"

    # Tokens
    ID_TOKEN_EXPIRATION_SECS = env_int("ID_TOKEN_EXPIRATION_SECS", 15 * 60)
    REFRESH_TOKEN_EXPIRATION_SECS = env_int("REFRESH_TOKEN_EXPIRATION_SECS", 3 * 24 * 60 * 60)
    PRIV_KEY = os.getenv("PRIV_KEY")
    PUB_KEY = os.getenv("PUB_KEY")
    PRIV_KEY_FILE = os.getenv("PRIV_KEY_FILE")
    PUB_KEY_FILE = os.getenv("PUB_KEY_FILE")
    REFRESH_SECRET = os.getenv("REFRESH_SECRET")

    # Stores
    REDIS_URL = os.getenv("REDIS_URL")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Rate limiting
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:8080")
    CORS_MAX_AGE = env_int("CORS_MAX_AGE", 600)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to Redis; the in-memory refresh token store is used.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    REDIS_URL = None
    AUTH_LOGIN_RATE_LIMIT = "1000 per minute"
    RATELIMIT_STORAGE_URI = "memory://"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
