"""
Claim model for the identity and refresh tokens.

Both classes are plain data with a symmetric ``to_payload`` / ``from_payload``
pair mapping to the JSON payload of a signed token. Timestamps are whole
seconds since the epoch (``iat`` / ``exp``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any
from uuid import UUID

from account.services.users.dto import User

# JSON names of the public user fields embedded in an identity token.
USER_CLAIM_FIELDS: tuple[tuple[str, str], ...] = (
    ("uid", "uid"),
    ("email", "email"),
    ("name", "name"),
    ("image_url", "imageUrl"),
    ("website", "website"),
)


def _as_timestamp(value: Any, name: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Claim '{name}' must be an integer timestamp")
    return value


@dataclass(frozen=True, slots=True)
class IdentityClaims:
    """
    Claims of the short-lived identity token.

    :ivar user: Public view of the user (password is never serialized).
    :ivar issued_at: ``iat`` in epoch seconds.
    :ivar expires_at: ``exp`` in epoch seconds.
    """

    user: User
    issued_at: int
    expires_at: int

    @classmethod
    def for_user(cls, user: User, *, now: int, expires_in_secs: int) -> IdentityClaims:
        return cls(user=user.public(), issued_at=now, expires_at=now + expires_in_secs)

    @property
    def expires_in(self) -> timedelta:
        return timedelta(seconds=self.expires_at - self.issued_at)

    def to_payload(self) -> dict[str, Any]:
        user_claims: dict[str, Any] = {}
        for attr, key in USER_CLAIM_FIELDS:
            value = getattr(self.user, attr)
            user_claims[key] = str(value) if attr == "uid" else value
        return {"user": user_claims, "iat": self.issued_at, "exp": self.expires_at}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> IdentityClaims:
        """
        Rebuild the claims from a verified payload.

        :raises KeyError: If a required claim is missing.
        :raises ValueError: If a claim has the wrong shape.
        """
        raw_user = payload["user"]
        if not isinstance(raw_user, Mapping):
            raise ValueError("Claim 'user' must be an object")

        values: dict[str, Any] = {}
        for attr, key in USER_CLAIM_FIELDS:
            value = raw_user.get(key, "")
            if not isinstance(value, str):
                raise ValueError(f"Claim 'user.{key}' must be a string")
            values[attr] = value

        user = User(
            uid=UUID(values.pop("uid")),
            password="",
            **values,
        )
        return cls(
            user=user,
            issued_at=_as_timestamp(payload["iat"], "iat"),
            expires_at=_as_timestamp(payload["exp"], "exp"),
        )


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """
    Claims of the long-lived refresh token.

    :ivar uid: Owner user id.
    :ivar token_id: Random identifier tracked by the refresh token store (``jti``).
    :ivar issued_at: ``iat`` in epoch seconds.
    :ivar expires_at: ``exp`` in epoch seconds.
    """

    uid: UUID
    token_id: str
    issued_at: int
    expires_at: int

    @classmethod
    def for_user(
        cls, uid: UUID, token_id: str, *, now: int, expires_in_secs: int
    ) -> RefreshClaims:
        return cls(uid=uid, token_id=token_id, issued_at=now, expires_at=now + expires_in_secs)

    @property
    def expires_in(self) -> timedelta:
        return timedelta(seconds=self.expires_at - self.issued_at)

    def to_payload(self) -> dict[str, Any]:
        return {
            "uid": str(self.uid),
            "jti": self.token_id,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> RefreshClaims:
        token_id = payload["jti"]
        if not isinstance(token_id, str) or not token_id:
            raise ValueError("Claim 'jti' must be a non-empty string")
        return cls(
            uid=UUID(str(payload["uid"])),
            token_id=token_id,
            issued_at=_as_timestamp(payload["iat"], "iat"),
            expires_at=_as_timestamp(payload["exp"], "exp"),
        )
