"""Convenience exports for application schemas."""

from __future__ import annotations

from .account import CredentialsSchema, RefreshTokenSchema, TokenPairSchema, UserSchema

__all__ = [
    "CredentialsSchema",
    "RefreshTokenSchema",
    "TokenPairSchema",
    "UserSchema",
]
