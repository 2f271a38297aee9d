"""API v1 blueprint package bundling the account routes."""

from __future__ import annotations

from flask import Blueprint

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .account import bp as account_bp

# Each tuple: (blueprint, url_prefix_relative_to_API_BASE_PREFIX)
REGISTRY: list[tuple[Blueprint, str]] = [
    (account_bp, "/account"),  # -> /api/account
]
