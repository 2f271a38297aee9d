"""
UserService
===========

Account-level operations that feed token issuance:

- Signup (hashing + unique email)
- Signin (credential verification only, no token issuance)
- Lookup by id
"""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from account.repositories.user import UserRepository
from account.services._shared.base import BaseService
from account.services._shared.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    violates,
)
from account.services.users.dto import CredentialsIn, User


class UserService(BaseService):
    """
    Orchestrates user persistence for the account endpoints.

    :param session: SQLAlchemy session owning the transaction.
    """

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session
        self.users = UserRepository(session)

    def get(self, uid: UUID) -> User:
        """
        Return the user with ``uid``.

        :raises NotFoundError: If no such user exists.
        """
        user = self.users.find_by_id(uid)
        if user is None:
            raise NotFoundError("User", uid)
        return user

    def signup(self, dto: CredentialsIn) -> User:
        """
        Create a user with a hashed password and a fresh uid.

        :param dto: Email and raw password.
        :returns: The created user.
        :raises ConflictError: If the email is already registered.
        """
        user = User(
            uid=uuid4(),
            email=dto.email.lower().strip(),
            password=generate_password_hash(dto.password),
        )
        try:
            created = self.users.create(user)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise ConflictError("User", "email already in use") from exc
            raise
        self.log.info("User signed up: uid=%s", created.uid)
        return created

    def signin(self, dto: CredentialsIn) -> User:
        """
        Verify credentials and return the matching user.

        :raises AuthorizationError: On unknown email or wrong password (same message).
        """
        user = self.users.find_by_email(dto.email)
        if user is None or not check_password_hash(user.password, dto.password):
            raise AuthorizationError("Invalid email and password combination")
        return user
