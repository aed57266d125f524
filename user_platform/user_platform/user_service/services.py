"""
Registration and authentication flows.

Both flows are plain classes wired with their collaborators, so the API
layer only has to translate HTTP to calls and errors back to responses.
"""
import logging

from .auth import PasswordHasher, TokenIssuer
from .errors import AuthenticationFailed, BadInput, Conflict, NotFound
from .models import DEFAULT_ROLE, User
from .repository import UserRepository
from .schemas import AuthenticationRequest, AuthenticationResponse, UserCreate

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
# passlib refuses secrets longer than this
MAX_PASSWORD_LENGTH = 4096


class RegistrationService:
    def __init__(self, repository: UserRepository, hasher: PasswordHasher):
        self.repository = repository
        self.hasher = hasher

    def validate(self, payload: UserCreate) -> None:
        if not payload.username or len(payload.username) < MIN_USERNAME_LENGTH:
            raise BadInput(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
        if not payload.password or len(payload.password) < MIN_PASSWORD_LENGTH:
            raise BadInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(payload.password.encode("utf-8")) > MAX_PASSWORD_LENGTH:
            raise BadInput(f"Password must be at most {MAX_PASSWORD_LENGTH} bytes")

    def register(self, payload: UserCreate) -> User:
        self.validate(payload)
        if self.repository.exists_by_username(payload.username):
            raise Conflict()

        # Role is never taken from the caller
        new_user = User(
            username=payload.username,
            password=self.hasher.hash(payload.password),
            role=DEFAULT_ROLE,
        )
        return self.repository.save(new_user)


class AuthenticationManager:
    """Checks a username/password pair against the credential store."""

    def __init__(self, repository: UserRepository, hasher: PasswordHasher):
        self.repository = repository
        self.hasher = hasher

    def verify(self, username: str, password: str) -> User:
        """
        Return the matching user or raise ``AuthenticationFailed``.

        Unknown usernames and wrong passwords raise the same error, and an
        unknown username still pays for one hash verification, so neither
        the response nor its timing tells the two apart.
        """
        if not username or not password:
            raise AuthenticationFailed("missing credentials")

        user = self.repository.find_by_username(username)
        if user is None:
            self.hasher.dummy_verify()
            raise AuthenticationFailed("unknown username")
        if not self.hasher.verify(password, user.password):
            raise AuthenticationFailed("password mismatch")
        return user


class AuthenticationService:
    def __init__(self, repository: UserRepository, manager: AuthenticationManager, issuer: TokenIssuer):
        self.repository = repository
        self.manager = manager
        self.issuer = issuer

    def authenticate(self, request: AuthenticationRequest) -> AuthenticationResponse:
        self.manager.verify(request.username, request.password)

        # The row can disappear between verification and this lookup
        user = self.repository.find_by_username(request.username)
        if user is None:
            logger.error("User vanished after credential check: username=%s", request.username)
            raise NotFound()

        return AuthenticationResponse(token=self.issuer.issue(user))
