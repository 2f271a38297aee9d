"""User model definition for the account service."""

from __future__ import annotations

import uuid

from sqlalchemy import String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from account.core.extensions import db

from .base import ReprMixin, TimestampMixin


class UserModel(ReprMixin, TimestampMixin, db.Model):
    """
    Persisted account identity.

    Fields
    ------
    uid : uuid.UUID
        Primary key, generated by the service on signup.
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    password : str
        Password hash produced by Werkzeug; never the raw password.
    name, image_url, website : str
        Public profile fields, empty by default.
    """

    __tablename__ = "users"

    uid: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password: Mapped[str] = mapped_column(String(254), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    image_url: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    website: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v
