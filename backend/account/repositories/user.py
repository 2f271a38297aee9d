"""User repository mapping :class:`UserModel` rows to :class:`User` records.

Repositories stay thin and persistence-focused: they never commit or roll
back; services own transactions.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from account.models.user import UserModel
from account.services.users.dto import User


class UserRepository:
    """Persistence-only repository for account users."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ---------------------------- Mapping ----------------------------

    @staticmethod
    def to_user(row: UserModel) -> User:
        return User(
            uid=row.uid,
            email=row.email,
            password=row.password,
            name=row.name,
            image_url=row.image_url,
            website=row.website,
        )

    # ---------------------------- Writes ----------------------------

    def create(self, user: User) -> User:
        """Insert ``user`` and flush so constraint violations surface here.

        :param user: Record to persist; ``password`` must already be hashed.
        :type user: User
        :returns: The stored record (with generated uid if none was given).
        :rtype: User
        :raises sqlalchemy.exc.IntegrityError: On unique violations.
        """
        row = UserModel(
            email=user.email,
            password=user.password,
            name=user.name,
            image_url=user.image_url,
            website=user.website,
        )
        if user.uid is not None:
            row.uid = user.uid
        self.session.add(row)
        self.session.flush()
        return self.to_user(row)

    # ---------------------------- Lookups ----------------------------

    def find_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive)."""
        stmt = select(UserModel).where(UserModel.email == email.lower().strip())
        row = self.session.execute(stmt).scalars().first()
        return self.to_user(row) if row is not None else None

    def find_by_id(self, uid: UUID) -> User | None:
        """Fetch a user by primary key."""
        row = self.session.get(UserModel, uid)
        return self.to_user(row) if row is not None else None
