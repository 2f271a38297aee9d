# account/services/_shared/base.py
from __future__ import annotations

import logging
from datetime import UTC, datetime


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide a per-service logger and a single clock.
    * Keep services thin, orchestration-only, no web leakage.

    Notes
    -----
    Services hold no request-scoped state so one instance can serve every
    worker thread.
    """

    def __init__(self) -> None:
        self.log = logging.getLogger(type(self).__module__)

    @staticmethod
    def now_utc() -> datetime:
        """Return the current UTC time."""
        return datetime.now(UTC)

    def now_epoch(self) -> int:
        """Return the current time in whole epoch seconds."""
        return int(self.now_utc().timestamp())
