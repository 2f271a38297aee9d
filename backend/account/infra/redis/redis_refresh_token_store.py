# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import redis  # type: ignore[import-untyped]

from account.services._shared.ports import RefreshTokenStore


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    One key per live token, ``"{user_id}:{token_id}"``, expiring with the
    token itself.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _k(user_id: str, token_id: str) -> str:
        return f"{user_id}:{token_id}"

    @staticmethod
    def _ttl_seconds(expires_in: timedelta) -> int:
        # Redis rejects EX <= 0
        return max(1, int(expires_in.total_seconds()))

    # -------------------- API ------------------------

    def set_refresh_token(self, user_id: str, token_id: str, expires_in: timedelta) -> None:
        """
        Store the token id *before* the signed token reaches the client.

        :raises redis.RedisError: If the write fails.
        """
        self.r.set(self._k(user_id, token_id), "", ex=self._ttl_seconds(expires_in))

    def delete_refresh_token(self, user_id: str, token_id: str) -> None:
        """
        Delete a token id; deleting a missing key is not an error.

        :raises redis.RedisError: If the command fails.
        """
        self.r.delete(self._k(user_id, token_id))
