"""Factory Boy base wired to the per-test SQLAlchemy session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session installed by the ``_factories_session`` fixture."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def clear(cls):
        cls._session = None

    @classmethod
    def get(cls):
        """Return the registered session.

        :raises RuntimeError: If a factory is used outside the ``session`` fixture.
        """
        if cls._session is None:
            raise RuntimeError("No factory session; request the 'session' fixture first")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Abstract factory flushing rows into the transactional session."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
