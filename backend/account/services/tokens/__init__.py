"""Token service layer: claims, key material and the token service."""

from __future__ import annotations

from .claims import IdentityClaims, RefreshClaims
from .dto import RefreshToken, TokenConfig, TokenPair
from .keys import KeyMaterial, KeyMaterialError
from .service import TokenService

__all__ = [
    "TokenService",
    "KeyMaterial",
    "KeyMaterialError",
    # Claims
    "IdentityClaims",
    "RefreshClaims",
    # DTOs
    "RefreshToken",
    "TokenConfig",
    "TokenPair",
]
