"""
account.services._shared.ports
==============================

*Ports* (hexagonal interfaces) consumed by the service layer.

Modules
-------
- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore`, the contract for tracking live
    refresh token ids, and :class:`~.InMemoryRefreshTokenStore`.

Design Notes
------------
Concrete adapters (e.g., Redis) implement these interfaces under
``account.infra``.
"""

from __future__ import annotations

from .refresh_token_store import InMemoryRefreshTokenStore, RefreshTokenStore

__all__ = [
    "RefreshTokenStore",
    "InMemoryRefreshTokenStore",
]
