from __future__ import annotations

from uuid import uuid4

import pytest
from account.repositories.user import UserRepository
from account.services._shared.errors import AuthorizationError, ConflictError, NotFoundError
from account.services.users import CredentialsIn
from account.services.users.service import UserService
from werkzeug.security import check_password_hash

from tests.factories.user import DEFAULT_PASSWORD, UserModelFactory


class TestUserService:
    """Signup/signin/get against the transactional session."""

    @pytest.fixture()
    def service(self, session) -> UserService:
        return UserService(session)

    @pytest.fixture()
    def repo(self, session) -> UserRepository:
        return UserRepository(session)

    # ------------------------------ Signup -------------------------------- #

    def test_signup_hashes_password_and_assigns_uid(self, service, repo):
        user = service.signup(CredentialsIn(email="  Ana@Example.com ", password="hunter22"))

        assert user.uid is not None
        assert user.email == "ana@example.com"
        assert user.password != "hunter22"
        assert check_password_hash(user.password, "hunter22")

        stored = repo.find_by_id(user.uid)
        assert stored is not None
        assert stored.email == "ana@example.com"

    def test_signup_duplicate_email_conflicts(self, service):
        UserModelFactory(email="taken@example.com")

        with pytest.raises(ConflictError):
            service.signup(CredentialsIn(email="taken@example.com", password="whatever"))

    # ------------------------------ Signin -------------------------------- #

    def test_signin_returns_user_for_valid_credentials(self, service):
        row = UserModelFactory(email="bob@bob.com")

        user = service.signin(CredentialsIn(email="BOB@bob.com", password=DEFAULT_PASSWORD))

        assert user.uid == row.uid
        assert user.name == row.name

    def test_signin_wrong_password_and_unknown_email_look_the_same(self, service):
        UserModelFactory(email="bob@bob.com")

        with pytest.raises(AuthorizationError) as wrong_password:
            service.signin(CredentialsIn(email="bob@bob.com", password="not-it"))
        with pytest.raises(AuthorizationError) as unknown_email:
            service.signin(CredentialsIn(email="nobody@bob.com", password=DEFAULT_PASSWORD))

        assert wrong_password.value.message == unknown_email.value.message

    # ------------------------------- Get ---------------------------------- #

    def test_get_returns_existing_user(self, service):
        row = UserModelFactory()

        assert service.get(row.uid).email == row.email

    def test_get_missing_user_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.get(uuid4())
