# account/services/tokens/service.py
from __future__ import annotations

import secrets
from collections.abc import Mapping
from typing import Any
from uuid import UUID

import jwt

from account.services._shared.base import BaseService
from account.services._shared.errors import AuthorizationError, InternalError
from account.services._shared.ports.refresh_token_store import RefreshTokenStore
from account.services.tokens.claims import IdentityClaims, RefreshClaims
from account.services.tokens.dto import RefreshToken, TokenConfig, TokenPair
from account.services.tokens.keys import KeyMaterial
from account.services.users.dto import User

# Pinned algorithms: the header of an incoming token is never trusted.
ID_TOKEN_ALGORITHM = "RS256"
REFRESH_TOKEN_ALGORITHM = "HS256"

# 16 bytes -> 128 bits of entropy, hex encoded
REFRESH_TOKEN_ID_BYTES = 16

_DECODE_OPTIONS = {"require": ["exp", "iat"]}


class TokenService(BaseService):
    """
    Issue, verify and rotate identity/refresh token pairs.

    Identity tokens are RS256-signed so any holder of the public key can verify
    them; refresh tokens are HS256-signed with a secret that never leaves the
    backend. Every issued refresh token id is registered in the
    :class:`RefreshTokenStore` before the pair is returned.

    The service keeps no mutable state and is safe to share between threads.
    """

    def __init__(
        self,
        *,
        refresh_store: RefreshTokenStore,
        keys: KeyMaterial,
        token_cfg: TokenConfig | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param refresh_store: Store tracking live refresh token ids.
        :param keys: Validated signing/verification keys.
        :param token_cfg: Identity/Refresh lifetimes.
        """
        super().__init__()
        self.refresh_store = refresh_store
        self.keys = keys
        self.cfg = token_cfg or TokenConfig()

    # ------------------------------------------------------------------ #
    # Issuance / rotation
    # ------------------------------------------------------------------ #

    def issue_token_pair(self, user: User, previous_refresh_token_id: str = "") -> TokenPair:
        """
        Mint a new token pair for ``user``, rotating out a previous refresh token.

        The new refresh token id is registered in the store *before* the old
        one is deleted, so a failure in between never leaves the user without
        a valid refresh token.

        :param user: User whose public fields go into the identity token.
        :param previous_refresh_token_id: Id of the refresh token being
            exchanged; empty when there is nothing to invalidate.
        :returns: Identity/Refresh token pair.
        :raises ValueError: If ``user`` has no id.
        :raises InternalError: If signing fails or the new id cannot be stored.
        """
        if user.uid is None or not str(user.uid):
            raise ValueError("Cannot issue tokens for a user without an id")

        now = self.now_epoch()
        id_claims = IdentityClaims.for_user(
            user, now=now, expires_in_secs=self.cfg.id_expiration_secs
        )
        id_token = self._sign(id_claims.to_payload(), self.keys.private_key, ID_TOKEN_ALGORITHM)

        refresh_claims = RefreshClaims.for_user(
            user.uid,
            self.new_token_id(),
            now=now,
            expires_in_secs=self.cfg.refresh_expiration_secs,
        )
        refresh_token = self._sign(
            refresh_claims.to_payload(), self.keys.refresh_secret, REFRESH_TOKEN_ALGORITHM
        )

        user_id = str(user.uid)

        # Register first; nothing is returned unless the new id is tracked.
        try:
            self.refresh_store.set_refresh_token(
                user_id, refresh_claims.token_id, refresh_claims.expires_in
            )
        except Exception as exc:
            self.log.error(
                "refresh_token.store_failed",
                extra={"uid": user_id, "token_id": refresh_claims.token_id},
                exc_info=True,
            )
            raise InternalError() from exc

        if previous_refresh_token_id:
            try:
                self.refresh_store.delete_refresh_token(user_id, previous_refresh_token_id)
            except Exception:
                # Orphaned ids expire through their TTL.
                self.log.warning(
                    "refresh_token.delete_failed",
                    extra={"uid": user_id, "token_id": previous_refresh_token_id},
                    exc_info=True,
                )

        self.log.debug(
            "token_pair.issued", extra={"uid": user_id, "token_id": refresh_claims.token_id}
        )
        return TokenPair(id_token=id_token, refresh_token=refresh_token)

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate_identity_token(self, token: str) -> User:
        """
        Verify an identity token and return the embedded user.

        :param token: Encoded identity JWT.
        :returns: User built from the claims; ``password`` is empty.
        :raises AuthorizationError: On any signature, expiry or format problem.
        """
        try:
            payload = self._decode(token, self.keys.public_key, ID_TOKEN_ALGORITHM)
            claims = IdentityClaims.from_payload(payload)
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
            self.log.info("id_token.rejected: %s: %s", type(exc).__name__, exc)
            raise AuthorizationError("Unable to verify user from idToken") from None
        return claims.user

    def validate_refresh_token(self, token: str) -> RefreshToken:
        """
        Verify a refresh token signature and expiry.

        Whether the id is still registered is the store's concern; callers
        rotate it through :meth:`issue_token_pair`.

        :param token: Encoded refresh JWT.
        :returns: Token id, owner id and the signed string.
        :raises AuthorizationError: On any signature, expiry or format problem.
        """
        try:
            payload = self._decode(token, self.keys.refresh_secret, REFRESH_TOKEN_ALGORITHM)
            claims = RefreshClaims.from_payload(payload)
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
            self.log.info("refresh_token.rejected: %s: %s", type(exc).__name__, exc)
            raise AuthorizationError("Unable to verify refresh token") from None
        return RefreshToken(id=claims.token_id, uid=claims.uid, ss=token)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def revoke_refresh_token(self, uid: UUID, token_id: str) -> None:
        """
        Invalidate a single refresh token (sign-out).

        :raises InternalError: If the store cannot delete the entry.
        """
        try:
            self.refresh_store.delete_refresh_token(str(uid), token_id)
        except Exception as exc:
            self.log.error(
                "refresh_token.revoke_failed",
                extra={"uid": str(uid), "token_id": token_id},
                exc_info=True,
            )
            raise InternalError() from exc

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def new_token_id() -> str:
        """Generate an unguessable refresh token identifier."""
        return secrets.token_hex(REFRESH_TOKEN_ID_BYTES)

    def _sign(self, payload: Mapping[str, Any], key: Any, algorithm: str) -> str:
        try:
            return jwt.encode(dict(payload), key, algorithm=algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            self.log.error("token.sign_failed: alg=%s", algorithm, exc_info=True)
            raise InternalError() from exc

    @staticmethod
    def _decode(token: str, key: Any, algorithm: str) -> dict[str, Any]:
        if not isinstance(token, str) or not token:
            raise jwt.DecodeError("Empty token")
        return jwt.decode(token, key, algorithms=[algorithm], options=_DECODE_OPTIONS)
