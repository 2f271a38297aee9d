# account/services/tokens/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Output DTO with the identity and refresh tokens.

    :param id_token: Encoded identity JWT (RS256).
    :type id_token: str
    :param refresh_token: Encoded refresh JWT (HS256).
    :type refresh_token: str
    """

    id_token: str
    refresh_token: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class RefreshToken:
    """
    Verified refresh token.

    :param id: Token identifier tracked by the store.
    :type id: str
    :param uid: Owner user id.
    :type uid: UUID
    :param ss: The signed string the claims were read from.
    :type ss: str
    """

    id: str
    uid: UUID
    ss: str = field(repr=False)


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """
    Token lifetimes, in whole seconds.

    :param id_expiration_secs: Identity token lifetime.
    :type id_expiration_secs: int
    :param refresh_expiration_secs: Refresh token lifetime.
    :type refresh_expiration_secs: int
    """

    id_expiration_secs: int = 15 * 60
    refresh_expiration_secs: int = 3 * 24 * 60 * 60

    def __post_init__(self) -> None:
        for name in ("id_expiration_secs", "refresh_expiration_secs"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive number of seconds")
