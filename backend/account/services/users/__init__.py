"""User records shared by the token and user services.

:class:`~account.services.users.service.UserService` is imported from its
module directly; repositories depend on these DTOs.
"""

from __future__ import annotations

from .dto import CredentialsIn, User

__all__ = [
    "CredentialsIn",
    "User",
]
