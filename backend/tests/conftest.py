"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. RSA key pairs are
generated once per session.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from unittest.mock import Mock

import pytest
from account.core.config import TestingConfig
from account.core.extensions import db as _db  # Flask-SQLAlchemy instance
from account.factory import create_app  # application factory under test
from account.services._shared.ports import InMemoryRefreshTokenStore
from account.services.tokens import KeyMaterial, TokenConfig, TokenService
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

TEST_REFRESH_SECRET = "test-refresh-secret-with-enough-entropy"


@dataclass(frozen=True, slots=True)
class PemPair:
    """PEM-encoded RSA private/public key pair."""

    private_pem: str
    public_pem: str


def generate_pem_pair(key_size: int = 2048) -> PemPair:
    """Generate a fresh RSA key pair serialized as PEM strings."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return PemPair(private_pem=private_pem, public_pem=public_pem)


@pytest.fixture(scope="session")
def rsa_keys() -> PemPair:
    """RSA key pair used by the application under test."""
    return generate_pem_pair()


@pytest.fixture(scope="session")
def other_rsa_keys() -> PemPair:
    """An unrelated RSA key pair (wrong-key scenarios)."""
    return generate_pem_pair()


@pytest.fixture(scope="session")
def key_material(rsa_keys) -> KeyMaterial:
    return KeyMaterial.from_pem(rsa_keys.private_pem, rsa_keys.public_pem, TEST_REFRESH_SECRET)


@pytest.fixture()
def memory_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def refresh_store(memory_store):
    """``memory_store`` wrapped in a Mock so calls and their order can be asserted."""
    return Mock(wraps=memory_store)


@pytest.fixture()
def token_service(key_material, refresh_store) -> TokenService:
    """Token service with the default lifetimes (15 min / 3 days)."""
    return TokenService(refresh_store=refresh_store, keys=key_material, token_cfg=TokenConfig())


@pytest.fixture(scope="session")
def app(rsa_keys):
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application with inline test keys and an in-memory refresh store.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)

    class TestConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        PRIV_KEY = rsa_keys.private_pem
        PUB_KEY = rsa_keys.public_pem
        PRIV_KEY_FILE = None
        PUB_KEY_FILE = None
        REFRESH_SECRET = TEST_REFRESH_SECRET
        ID_TOKEN_EXPIRATION_SECS = 15 * 60
        REFRESH_TOKEN_EXPIRATION_SECS = 3 * 24 * 60 * 60
        CORS_ORIGINS = "http://localhost:8080"

    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. Service-level ``commit()``
    calls only release the session's own SAVEPOINT.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # Route app code (db.session) through the scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.clear()
