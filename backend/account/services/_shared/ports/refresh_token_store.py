from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol


class RefreshTokenStore(Protocol):
    """
    Stateful store tracking the live refresh token ids of each user.

    Implementations raise on failure; callers decide whether a failure is fatal.
    """

    def set_refresh_token(self, user_id: str, token_id: str, expires_in: timedelta) -> None:
        """
        Upsert the ``(user_id, token_id)`` association with a time-to-live.

        This MUST be executed *before* the signed token is handed to the client.
        """

    def delete_refresh_token(self, user_id: str, token_id: str) -> None:
        """Remove the ``(user_id, token_id)`` association. Absent entries are a no-op."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh token store for tests and single-process development.

    Expired entries are dropped on every write, so the map never holds more
    than the ids issued within one refresh lifetime.

    .. note::
       Uses a threading lock so it can back a multi-threaded dev server.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], datetime] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def _purge_expired(self, now: datetime) -> None:
        expired = [key for key, expires_at in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    def set_refresh_token(self, user_id: str, token_id: str, expires_in: timedelta) -> None:
        with self._lock:
            now = self._now()
            self._purge_expired(now)
            self._entries[(user_id, token_id)] = now + expires_in

    def delete_refresh_token(self, user_id: str, token_id: str) -> None:
        with self._lock:
            self._entries.pop((user_id, token_id), None)

    def contains(self, user_id: str, token_id: str) -> bool:
        """Return whether a non-expired entry exists for the pair."""
        with self._lock:
            expires_at = self._entries.get((user_id, token_id))
            return expires_at is not None and expires_at > self._now()

    def __len__(self) -> int:
        """Number of entries currently held, expired ones included until the next write."""
        with self._lock:
            return len(self._entries)
