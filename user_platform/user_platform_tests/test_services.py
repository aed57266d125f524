"""Tests for the registration and authentication flows."""
from unittest.mock import MagicMock

import pytest

from user_platform.user_platform.user_service.auth import PasswordHasher, TokenIssuer
from user_platform.user_platform.user_service.config import Settings
from user_platform.user_platform.user_service.errors import AuthenticationFailed, BadInput, Conflict, NotFound
from user_platform.user_platform.user_service.models import User
from user_platform.user_platform.user_service.repository import UserRepository
from user_platform.user_platform.user_service.schemas import AuthenticationRequest, UserCreate
from user_platform.user_platform.user_service.services import (
    AuthenticationManager,
    AuthenticationService,
    RegistrationService,
)

CONFIG = Settings(PASSWORD_HASH_ROUNDS=1000, JWT_SECRET_KEY="service-test-secret-key-with-32-bytes")


@pytest.fixture
def hasher():
    return PasswordHasher(CONFIG)


@pytest.fixture
def issuer():
    return TokenIssuer(CONFIG)


@pytest.fixture
def repository(db_session):
    return UserRepository(db_session)


@pytest.fixture
def registration(repository, hasher):
    return RegistrationService(repository, hasher)


@pytest.fixture
def authentication(repository, hasher, issuer):
    return AuthenticationService(repository, AuthenticationManager(repository, hasher), issuer)


def test_register_persists_hashed_user(registration, repository, hasher):
    user = registration.register(UserCreate(username="alice", password="secret1", role="ADMIN"))

    assert user.id is not None
    assert user.role == "USER"
    assert user.password != "secret1"
    assert hasher.verify("secret1", user.password)
    assert repository.find_by_username("alice").id == user.id


@pytest.mark.parametrize(
    "username, password",
    [
        (None, "secret1"), ("", "secret1"), ("al", "secret1"),
        ("alice", None), ("alice", ""), ("alice", "12345"), ("alice", "x" * 5000),
    ],
)
def test_register_validation_has_no_side_effect(username, password, hasher):
    repository = MagicMock(spec=UserRepository)
    service = RegistrationService(repository, hasher)

    with pytest.raises(BadInput):
        service.register(UserCreate(username=username, password=password))

    repository.exists_by_username.assert_not_called()
    repository.save.assert_not_called()


def test_register_duplicate_raises_conflict_without_write(registration, repository):
    registration.register(UserCreate(username="alice", password="secret1"))

    repository.save = MagicMock(wraps=repository.save)
    with pytest.raises(Conflict):
        registration.register(UserCreate(username="alice", password="other12"))
    repository.save.assert_not_called()


def test_register_race_surfaces_storage_conflict(registration, repository):
    registration.register(UserCreate(username="alice", password="secret1"))

    # Simulate a concurrent request that checked before the first write landed
    repository.exists_by_username = MagicMock(return_value=False)
    with pytest.raises(Conflict):
        registration.register(UserCreate(username="alice", password="other12"))


def test_manager_verify_returns_user(registration, repository, hasher):
    registration.register(UserCreate(username="alice", password="secret1"))
    user = AuthenticationManager(repository, hasher).verify("alice", "secret1")
    assert user.username == "alice"


def test_manager_unknown_user_pays_for_hash(repository):
    hasher = MagicMock(spec=PasswordHasher)
    manager = AuthenticationManager(repository, hasher)

    with pytest.raises(AuthenticationFailed) as exc_info:
        manager.verify("ghost", "secret1")

    hasher.dummy_verify.assert_called_once()
    assert exc_info.value.detail == "Invalid credentials"


def test_manager_failures_share_public_detail(registration, repository, hasher):
    registration.register(UserCreate(username="alice", password="secret1"))
    manager = AuthenticationManager(repository, hasher)

    errors = []
    for username, password in [("alice", "wrong12"), ("ghost", "secret1"), ("alice", None)]:
        with pytest.raises(AuthenticationFailed) as exc_info:
            manager.verify(username, password)
        errors.append(exc_info.value)

    assert {(type(e), e.detail, e.status_code) for e in errors} == {
        (AuthenticationFailed, "Invalid credentials", 401)
    }


def test_authenticate_issues_token(registration, authentication, issuer):
    registration.register(UserCreate(username="alice", password="secret1"))

    response = authentication.authenticate(AuthenticationRequest(username="alice", password="secret1"))

    claims = issuer.verify(response.token)
    assert claims["sub"] == "alice"
    assert claims["role"] == "USER"


def test_authenticate_user_vanished_raises_not_found(hasher, issuer):
    user = User(id=1, username="alice", password=hasher.hash("secret1"), role="USER")
    repository = MagicMock(spec=UserRepository)
    repository.find_by_username.side_effect = [user, None]
    service = AuthenticationService(repository, AuthenticationManager(repository, hasher), issuer)

    with pytest.raises(NotFound):
        service.authenticate(AuthenticationRequest(username="alice", password="secret1"))


def test_register_accepts_longest_hashable_password(registration, hasher):
    password = "x" * 4096
    user = registration.register(UserCreate(username="alice", password=password))
    assert hasher.verify(password, user.password)
