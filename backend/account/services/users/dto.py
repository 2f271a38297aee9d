# account/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from uuid import UUID


@dataclass(slots=True)
class User:
    """
    Account identity record shared across services.

    :param uid: Stable unique identifier.
    :type uid: UUID
    :param email: Login email (unique, normalized).
    :type email: str
    :param password: Password hash. Never serialized outward.
    :type password: str
    :param name: Display name.
    :type name: str
    :param image_url: Avatar URL.
    :type image_url: str
    :param website: Personal website URL.
    :type website: str
    """

    uid: UUID | None = None
    email: str = ""
    password: str = field(default="", repr=False)
    name: str = ""
    image_url: str = ""
    website: str = ""

    def public(self) -> User:
        """Return a copy with the password removed."""
        return replace(self, password="")


@dataclass(frozen=True, slots=True)
class CredentialsIn:
    """
    Input DTO for signup and signin.

    :param email: User email.
    :type email: str
    :param password: Raw password.
    :type password: str
    """

    email: str
    password: str = field(repr=False)
