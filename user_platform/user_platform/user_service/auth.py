from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
import logging
import jwt

from .config import Settings, settings
from .errors import InvalidToken
from .models import User

logger = logging.getLogger(__name__)


class PasswordHasher:
    """One-way, salted password hashing backed by passlib.

    The scheme and work factor come from ``Settings`` so they are fixed for
    the life of the process.
    """

    def __init__(self, config: Settings):
        # Use pbkdf2_sha256 by default to avoid external bcrypt backend issues in some environments
        scheme = config.PASSWORD_HASH_SCHEME
        self._context = CryptContext(
            schemes=[scheme],
            deprecated="auto",
            **{f"{scheme}__rounds": config.PASSWORD_HASH_ROUNDS},
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be identified")
            return False

    def dummy_verify(self) -> None:
        """Spend the same time as a real verify when there is no stored hash."""
        self._context.dummy_verify()


class TokenIssuer:
    """Creates and checks signed, time-bounded access tokens."""

    def __init__(self, config: Settings):
        self._secret_key = config.JWT_SECRET_KEY
        self._algorithm = config.JWT_ALGORITHM
        self._expires = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {"sub": user.username, "iat": now, "exp": now + self._expires}
        if user.role:
            payload["role"] = user.role
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> dict:
        """
        Decode a token and return its claims.

        Raises:
            InvalidToken: if the signature does not match, the token is
                malformed, or it has expired.
        """
        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken("token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(str(exc)) from exc


password_hasher = PasswordHasher(settings)
token_issuer = TokenIssuer(settings)


def get_password_hasher() -> PasswordHasher:
    return password_hasher


def get_token_issuer() -> TokenIssuer:
    return token_issuer
